from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from ...models import Customer
from ...services import ServiceError
from ...services.donations import list_donations, record_donation
from ...services.repairs import DEVICE_TYPES
from ...utils.permissions import admin_required, is_admin
from .. import flash_service_error, flash_form_errors
from .forms import DonationForm
from . import donations_bp


def build_form():
    form = DonationForm()
    customers = Customer.query.order_by(Customer.full_name).all()
    form.customer_id.choices = [(0, 'Select a customer')] + [
        (c.id, f'{c.full_name} ({c.email or c.phone})') for c in customers
    ]
    return form


def prefill(form, args):
    """Fill the form from ?customer_id=&device_type=&brand=&model="""
    form.customer_id.data = args.get('customer_id', 0, type=int)
    device_type = args.get('device_type', '')
    if device_type in DEVICE_TYPES:
        form.device_type.data = device_type
    form.brand.data = args.get('brand', '')
    form.model.data = args.get('model', '')


@donations_bp.route('/')
@login_required
def donation_list():
    form = build_form() if is_admin(current_user) else None
    if form is not None:
        prefill(form, request.args)
    return render_template('donations/list.html',
                           donations=list_donations(),
                           form=form,
                           title='Donations')


@donations_bp.route('/add', methods=['POST'])
@login_required
@admin_required
def add_donation():
    form = build_form()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('donations.donation_list'))

    customer = Customer.query.get(form.customer_id.data)
    try:
        donation = record_donation(customer, form.device_type.data, form.brand.data,
                                   form.model.data, form.notes.data, current_user)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('donations.donation_list'))

    flash(f'Donation Recorded: {donation.brand} {donation.model} from {donation.customer_name}.', 'success')
    return redirect(url_for('donations.donation_list'))
