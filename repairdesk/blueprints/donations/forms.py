from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, TextAreaField
from wtforms.validators import DataRequired, Optional, Length
from ...services.repairs import DEVICE_TYPES


class DonationForm(FlaskForm):
    customer_id = SelectField('Donating Customer', coerce=int, validators=[
        DataRequired(message='Please search for and select the donating customer first.')
    ])
    device_type = SelectField('Device Type', choices=[('', 'Select device type')] + [(d, d) for d in DEVICE_TYPES],
                              validators=[DataRequired(message='Please fill out all device details.')])
    brand = StringField('Brand', validators=[DataRequired(message='Please fill out all device details.'), Length(max=50)])
    model = StringField('Model', validators=[DataRequired(message='Please fill out all device details.'), Length(max=100)])
    notes = TextAreaField('Notes', validators=[Optional()])
