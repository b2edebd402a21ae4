from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from ...models import Customer, Technician
from ...services import ServiceError
from ...services.repairs import create_repair
from ...utils.lifecycle import UNASSIGNED
from ...utils.permissions import is_admin
from .. import flash_service_error, flash_form_errors
from .dashboard import technician_choices
from .forms import RepairIntakeForm
from . import repair_bp


@repair_bp.route('/new-repair', methods=['GET', 'POST'])
@login_required
def new_repair():
    customers = Customer.query.order_by(Customer.full_name).all()
    technicians = Technician.query.order_by(Technician.name).all()

    form = RepairIntakeForm()
    form.customer_id.choices = [(0, 'Select a customer')] + [
        (c.id, f'{c.full_name} ({c.email or c.phone})') for c in customers
    ]
    form.assigned_to.choices = technician_choices(technicians)

    if request.method == 'GET':
        form.customer_id.data = request.args.get('customer_id', 0, type=int)
        if is_admin(current_user):
            form.assigned_to.data = UNASSIGNED
        else:
            form.assigned_to.data = str(current_user.id)

    if form.validate_on_submit():
        customer = Customer.query.get(form.customer_id.data) if form.customer_id.data else None
        assigned_to = UNASSIGNED
        if form.assigned_to.data and form.assigned_to.data != UNASSIGNED:
            assigned_to = Technician.query.get(int(form.assigned_to.data))

        try:
            repair = create_repair(
                customer=customer,
                device_type=form.device_type.data,
                brand=form.brand.data,
                model=form.model.data,
                problem_notes=form.problem_notes.data,
                signature=form.signature.data,
                assigned_to=assigned_to,
                password_pin=form.password_pin.data,
                accessories=form.accessories.data,
                actor=current_user,
            )
        except ServiceError as e:
            flash_service_error(e)
        else:
            flash(f'Repair Created: Ticket {repair.ticket_number} for {repair.customer_name}.', 'success')
            return redirect(url_for('repair.repair_detail', repair_id=repair.id, created=1))
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('repair/new_repair.html',
                           form=form,
                           is_admin=is_admin(current_user),
                           title='New Repair')
