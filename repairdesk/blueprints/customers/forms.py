from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, EmailField, TelField
from wtforms.validators import DataRequired, Email, Length, Optional


class CustomerForm(FlaskForm):
    full_name = StringField('Full Name *', validators=[
        DataRequired(message='Please provide a name and at least an email or phone number.'),
        Length(max=100)
    ])
    email = EmailField('Email', validators=[
        Optional(),
        Email(message='Enter a valid email address'),
        Length(max=120)
    ])
    phone = TelField('Phone', validators=[Optional(), Length(max=30)])


class BulkImportForm(FlaskForm):
    entries = TextAreaField('One per line: name,email,phone', validators=[Optional()])
