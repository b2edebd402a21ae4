from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SelectField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class LoginForm(FlaskForm):
    role = SelectField('Role', choices=[
        ('Student', 'Student'),
        ('Admin', 'Admin'),
    ], default='Student', validators=[DataRequired()])
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember = BooleanField('Remember Me')


class ChangePasswordForm(FlaskForm):
    new_password = PasswordField('New Password', validators=[
        DataRequired(message='Please enter and confirm your new password.'),
        Length(min=6, message='Password must be at least 6 characters long'),
    ])
    confirm_password = PasswordField('Confirm New Password', validators=[
        DataRequired(message='Please enter and confirm your new password.'),
        EqualTo('new_password', message='Please ensure both passwords are the same.'),
    ])
