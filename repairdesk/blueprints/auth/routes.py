from flask import render_template, redirect, url_for, flash, request, session, current_app
from flask_login import login_user, logout_user, current_user
from ...services import ServiceError, ValidationError
from ...services.auth import authenticate, load_account, load_onboarding_token
from ...services.staff import change_password as change_account_password
from .. import flash_service_error, flash_form_errors
from . import auth_bp
from .forms import LoginForm, ChangePasswordForm

# Session key holding the account that must pick a new password first
PENDING_PASSWORD_CHANGE = 'pending_password_change'


def start_session(account, remember=False):
    """Log an account in, or park it until its password has been changed"""
    if account.force_password_change:
        session[PENDING_PASSWORD_CHANGE] = account.get_id()
        return redirect(url_for('auth.change_password'))
    session.pop(PENDING_PASSWORD_CHANGE, None)
    login_user(account, remember=remember)
    current_app.logger.info(f'{account.role} {account.email} logged in')
    return redirect(url_for('repair.dashboard'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('repair.dashboard'))

    form = LoginForm()
    if request.method == 'GET':
        # Onboarding links pre-fill the email (never the password)
        prefill_email = request.args.get('email')
        if prefill_email:
            form.email.data = prefill_email
        prefill_role = request.args.get('role')
        if prefill_role in ('Admin', 'Student'):
            form.role.data = prefill_role

    if form.validate_on_submit():
        account = authenticate(form.role.data, form.email.data, form.password.data)
        if account is not None:
            return start_session(account, remember=form.remember.data)
        flash('Invalid Credentials: Please check your email and password.', 'danger')
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('auth/login.html', form=form, title='Login')


@auth_bp.route('/logout')
def logout():
    session.pop(PENDING_PASSWORD_CHANGE, None)
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/change-password', methods=['GET', 'POST'])
def change_password():
    account = None
    if session.get(PENDING_PASSWORD_CHANGE):
        account = load_account(session[PENDING_PASSWORD_CHANGE])
    elif current_user.is_authenticated:
        account = current_user._get_current_object()

    if account is None:
        session.pop(PENDING_PASSWORD_CHANGE, None)
        return redirect(url_for('auth.login'))

    form = ChangePasswordForm()
    if form.validate_on_submit():
        try:
            change_account_password(account, form.new_password.data, form.confirm_password.data)
        except ServiceError as e:
            flash_service_error(e)
        else:
            session.pop(PENDING_PASSWORD_CHANGE, None)
            logout_user()
            flash('Password Changed: Your password has been updated successfully. Please log in again.', 'success')
            return redirect(url_for('auth.login', email=account.email, role=account.role))
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('auth/change_password.html', form=form, account=account, title='Change Password')


@auth_bp.route('/onboard/<token>')
def onboard(token):
    """Landing page for the QR code handed to new staff"""
    try:
        account = load_onboarding_token(token)
    except ValidationError as e:
        flash_service_error(e)
        return redirect(url_for('auth.login'))

    logout_user()
    return redirect(url_for('auth.login', email=account.email, role=account.role))
