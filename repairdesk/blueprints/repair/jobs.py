from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from ...models import Repair, Customer, Technician
from ...services import ServiceError
from ...services.repairs import (assign_technician, change_status, clone_repair,
                                 delete_repair, technician_display_name)
from ...utils.lifecycle import UNASSIGNED
from ...utils.links import repair_status_url, share_links, share_text
from ...utils.permissions import can_view_repair, is_admin
from ...utils.qr_codes import QRCodeGenerator
from .. import flash_service_error, flash_form_errors
from .dashboard import technician_choices
from .forms import StatusForm, AssignForm, ActionForm
from . import repair_bp


def load_visible_repair(repair_id):
    """Repair for the detail pages, or a response to return instead"""
    repair = Repair.query.get(repair_id)
    if repair is None:
        return None, (render_template('not_found.html', message='Repair not found.', title='Not Found'), 404)
    if not can_view_repair(current_user, repair):
        flash('You are not assigned to this repair.', 'danger')
        return None, redirect(url_for('repair.dashboard'))
    return repair, None


def back_to(repair):
    target = request.form.get('next') or request.args.get('next')
    if target and target.startswith('/') and not target.startswith('//'):
        return redirect(target)
    return redirect(url_for('repair.repair_detail', repair_id=repair.id))


@repair_bp.route('/repairs/<int:repair_id>')
@login_required
def repair_detail(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response

    technicians = Technician.query.order_by(Technician.name).all()
    customer = Customer.query.get(repair.customer_id) if repair.customer_id else None
    status_url = repair_status_url(repair)

    assign_form = AssignForm()
    assign_form.technician.choices = technician_choices(technicians)
    assign_form.technician.data = str(repair.technician_id) if repair.technician_id else UNASSIGNED
    status_form = StatusForm()
    status_form.status.data = repair.status

    return render_template('repair/detail.html',
                           repair=repair,
                           customer=customer,
                           technician_name=technician_display_name(repair, technicians),
                           status_url=status_url,
                           qr_code=QRCodeGenerator.to_data_url(status_url),
                           share=share_links(repair, customer.phone if customer else '', status_url),
                           share_message=share_text(repair, status_url),
                           just_created=request.args.get('created') == '1',
                           status_form=status_form,
                           assign_form=assign_form,
                           action_form=ActionForm(),
                           is_admin=is_admin(current_user),
                           title=f'Repair {repair.ticket_number}')


@repair_bp.route('/repairs/<int:repair_id>/print')
@login_required
def print_qr(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response
    status_url = repair_status_url(repair)
    return render_template('repair/print_qr.html',
                           repair=repair,
                           qr_code=QRCodeGenerator.to_data_url(status_url),
                           title=f'Repair {repair.ticket_number} QR Code')


@repair_bp.route('/repairs/<int:repair_id>/status', methods=['POST'])
@login_required
def update_status(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response

    form = StatusForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return back_to(repair)

    try:
        change_status(repair, form.status.data, current_user)
        flash(f'Status Updated: Repair {repair.ticket_number} status changed to {repair.status}.', 'success')
    except ServiceError as e:
        flash_service_error(e)
    return back_to(repair)


@repair_bp.route('/repairs/<int:repair_id>/assign', methods=['POST'])
@login_required
def assign(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response

    technicians = Technician.query.order_by(Technician.name).all()
    form = AssignForm()
    form.technician.choices = technician_choices(technicians)
    if not form.validate_on_submit():
        flash_form_errors(form)
        return back_to(repair)

    choice = form.technician.data
    technician = UNASSIGNED if choice == UNASSIGNED else Technician.query.get(int(choice))
    try:
        if assign_technician(repair, technician, current_user):
            flash(f'Technician Assigned: Repair assigned to {repair.assigned_to_name}.', 'success')
    except ServiceError as e:
        flash_service_error(e)
    return back_to(repair)


@repair_bp.route('/repairs/<int:repair_id>/clone', methods=['POST'])
@login_required
def clone(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response

    try:
        new_repair = clone_repair(repair, current_user)
    except ServiceError as e:
        flash_service_error(e)
        return back_to(repair)

    flash(f'Repair Cloned: A new repair for {repair.customer_name} has been created.', 'success')
    return redirect(url_for('repair.repair_detail', repair_id=new_repair.id))


@repair_bp.route('/repairs/<int:repair_id>/delete', methods=['POST'])
@login_required
def delete(repair_id):
    repair, response = load_visible_repair(repair_id)
    if response is not None:
        return response

    ticket = repair.ticket_number
    try:
        delete_repair(repair, current_user)
    except ServiceError as e:
        flash_service_error(e)
        return back_to(repair)

    flash(f'Repair Deleted: Repair {ticket} has been permanently removed.', 'success')
    return redirect(url_for('repair.archive'))
