from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from ...models import Admin
from ...services import ServiceError
from ...services.staff import create_admin, delete_admin, reset_password, update_admin
from ...utils.permissions import admin_required
from .. import flash_service_error, flash_form_errors
from ..repair.forms import ActionForm
from .forms import AdminForm
from .onboarding import onboarding_card, render_onboarding
from . import staff_bp


def admin_or_404(admin_id):
    admin = Admin.query.get(admin_id)
    if admin is None:
        return None, (render_template('not_found.html', message='Admin not found.', title='Not Found'), 404)
    return admin, None


@staff_bp.route('/admins')
@login_required
@admin_required
def admin_list():
    return render_template('staff/admins.html',
                           admins=Admin.query.order_by(Admin.email).all(),
                           form=AdminForm(),
                           action_form=ActionForm(),
                           title='Admins')


@staff_bp.route('/admins/add', methods=['POST'])
@login_required
@admin_required
def add_admin():
    form = AdminForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('staff.admin_list'))

    try:
        admin, temp_password = create_admin(form.email.data)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.admin_list'))

    flash(f'Admin Added: {admin.email} can now sign in with the code below.', 'success')
    return render_onboarding([onboarding_card(admin, temp_password)], 'New Admin', 'staff.admin_list')


@staff_bp.route('/admins/<int:admin_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_admin(admin_id):
    admin, response = admin_or_404(admin_id)
    if response is not None:
        return response

    form = AdminForm(obj=admin)
    if form.validate_on_submit():
        try:
            update_admin(admin, form.email.data)
        except ServiceError as e:
            flash_service_error(e)
        else:
            flash(f'Admin Updated: {admin.email} has been saved.', 'success')
            return redirect(url_for('staff.admin_list'))
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('staff/edit.html',
                           form=form,
                           account=admin,
                           back_endpoint='staff.admin_list',
                           title=f'Edit {admin.email}')


@staff_bp.route('/admins/<int:admin_id>/delete', methods=['POST'])
@login_required
@admin_required
def remove_admin(admin_id):
    admin, response = admin_or_404(admin_id)
    if response is not None:
        return response

    email = admin.email
    removing_self = admin.id == current_user.id
    try:
        delete_admin(admin)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.admin_list'))

    flash(f'Admin Removed: {email} has been removed.', 'success')
    if removing_self:
        return redirect(url_for('auth.logout'))
    return redirect(url_for('staff.admin_list'))


@staff_bp.route('/admins/<int:admin_id>/reset-password', methods=['POST'])
@login_required
@admin_required
def reset_admin_password(admin_id):
    admin, response = admin_or_404(admin_id)
    if response is not None:
        return response

    try:
        temp_password = reset_password(admin)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.admin_list'))

    flash(f'Password Reset: {admin.email} must choose a new password at next login.', 'success')
    return render_onboarding([onboarding_card(admin, temp_password)], 'Password Reset', 'staff.admin_list')
