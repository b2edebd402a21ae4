# repairdesk/blueprints/staff/forms.py
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, EmailField, TelField
from wtforms.validators import DataRequired, Email, Length, Optional


class TechnicianForm(FlaskForm):
    name = StringField('Name *', validators=[
        DataRequired(message='Please provide both name and email.'),
        Length(max=100)
    ])
    email = EmailField('Email *', validators=[
        DataRequired(message='Please provide both name and email.'),
        Email(message='Enter a valid email address'),
        Length(max=120)
    ])
    phone = TelField('Phone', validators=[Optional(), Length(max=30)])


class AdminForm(FlaskForm):
    email = EmailField('Email *', validators=[
        DataRequired(message='Please provide an email.'),
        Email(message='Enter a valid email address'),
        Length(max=120)
    ])


class TechnicianImportForm(FlaskForm):
    entries = TextAreaField('One per line: name,email,phone', validators=[Optional()])
