from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, TextAreaField, HiddenField
from wtforms.validators import DataRequired, Optional, Length
from ...services.repairs import DEVICE_TYPES
from ...utils.lifecycle import RepairStatus, UNASSIGNED

STATUS_CHOICES = [(status.value, status.value) for status in RepairStatus]


class RepairIntakeForm(FlaskForm):
    customer_id = SelectField('Customer', coerce=int, validators=[
        DataRequired(message='Please search for and select a customer first.')
    ])
    device_type = SelectField('Device Type', choices=[('', 'Select device type')] + [(d, d) for d in DEVICE_TYPES],
                              validators=[DataRequired(message='Please fill out all device and problem details.')])
    brand = StringField('Brand', validators=[DataRequired(message='Please fill out all device and problem details.'), Length(max=50)])
    model = StringField('Model', validators=[DataRequired(message='Please fill out all device and problem details.'), Length(max=100)])
    password_pin = StringField('Password / PIN', validators=[Optional(), Length(max=100)])
    accessories = StringField('Accessories (comma separated)', validators=[Optional()])
    problem_notes = TextAreaField('Problem Notes', validators=[DataRequired(message='Please fill out all device and problem details.')])
    signature = TextAreaField('Customer Signature', validators=[DataRequired(message='Please have the customer sign for liability.')])
    assigned_to = SelectField('Assign To', default=UNASSIGNED, validators=[Optional()])


class StatusForm(FlaskForm):
    status = SelectField('Status', choices=STATUS_CHOICES, validators=[DataRequired()])


class AssignForm(FlaskForm):
    technician = SelectField('Technician', validators=[DataRequired()])


class ActionForm(FlaskForm):
    """Empty form for POST-only buttons (clone, delete) so CSRF still applies"""
    confirm = HiddenField(default='yes')
