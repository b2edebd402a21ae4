from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required
from ...models import Technician
from ...services import ServiceError
from ...services.staff import (bulk_import_technicians, create_technician, delete_technician,
                               reset_password, update_technician)
from ...utils.permissions import admin_required
from .. import flash_service_error, flash_form_errors
from ..repair.forms import ActionForm
from .forms import TechnicianForm, TechnicianImportForm
from .onboarding import onboarding_card, render_onboarding
from . import staff_bp


def technician_or_404(technician_id):
    technician = Technician.query.get(technician_id)
    if technician is None:
        return None, (render_template('not_found.html', message='Technician not found.', title='Not Found'), 404)
    return technician, None


@staff_bp.route('/technicians')
@login_required
@admin_required
def technician_list():
    technicians = Technician.query.order_by(Technician.name).all()
    return render_template('staff/technicians.html',
                           technicians=technicians,
                           form=TechnicianForm(),
                           import_form=TechnicianImportForm(),
                           action_form=ActionForm(),
                           title='Technicians')


@staff_bp.route('/technicians/add', methods=['POST'])
@login_required
@admin_required
def add_technician():
    form = TechnicianForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('staff.technician_list'))

    try:
        technician, temp_password = create_technician(form.name.data, form.email.data, form.phone.data)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.technician_list'))

    flash(f'Technician Added: {technician.name} can now sign in with the code below.', 'success')
    return render_onboarding([onboarding_card(technician, temp_password)],
                             'New Technician', 'staff.technician_list')


@staff_bp.route('/technicians/import', methods=['POST'])
@login_required
@admin_required
def import_technicians():
    form = TechnicianImportForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('staff.technician_list'))

    try:
        result = bulk_import_technicians(form.entries.data)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.technician_list'))

    flash(f'Import Complete: Successfully added {len(result.added)} new technicians.',
          'success' if result.added else 'info')
    cards = [onboarding_card(technician, temp) for technician, temp in result.added]
    return render_onboarding(cards, 'Imported Technicians', 'staff.technician_list',
                             duplicates=result.duplicates, skipped=result.skipped)


@staff_bp.route('/technicians/<int:technician_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_technician(technician_id):
    technician, response = technician_or_404(technician_id)
    if response is not None:
        return response

    form = TechnicianForm(obj=technician)
    if form.validate_on_submit():
        try:
            update_technician(technician, form.name.data, form.email.data, form.phone.data)
        except ServiceError as e:
            flash_service_error(e)
        else:
            flash(f'Technician Updated: {technician.name} has been saved.', 'success')
            return redirect(url_for('staff.technician_list'))
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('staff/edit.html',
                           form=form,
                           account=technician,
                           back_endpoint='staff.technician_list',
                           title=f'Edit {technician.name}')


@staff_bp.route('/technicians/<int:technician_id>/delete', methods=['POST'])
@login_required
@admin_required
def remove_technician(technician_id):
    technician, response = technician_or_404(technician_id)
    if response is not None:
        return response

    name = technician.name
    try:
        delete_technician(technician)
    except ServiceError as e:
        flash_service_error(e)
    else:
        flash(f'Technician Removed: {name} has been removed.', 'success')
    return redirect(url_for('staff.technician_list'))


@staff_bp.route('/technicians/<int:technician_id>/reset-password', methods=['POST'])
@login_required
@admin_required
def reset_technician_password(technician_id):
    technician, response = technician_or_404(technician_id)
    if response is not None:
        return response

    try:
        temp_password = reset_password(technician)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('staff.technician_list'))

    flash(f'Password Reset: {technician.name} must choose a new password at next login.', 'success')
    return render_onboarding([onboarding_card(technician, temp_password)],
                             'Password Reset', 'staff.technician_list')
