from flask import render_template, request, flash, redirect, url_for
from flask_login import login_required, current_user
from ...models import Customer
from ...services import ServiceError
from ...services.customers import (bulk_import_customers, create_customer, customer_history,
                                   delete_customer, delete_customers, search_customers,
                                   update_customer)
from ...utils.links import tel_uri
from ...utils.permissions import admin_required, filter_repairs, is_admin
from ...utils.qr_codes import QRCodeGenerator
from .. import flash_service_error, flash_form_errors
from ..repair.forms import ActionForm
from .forms import CustomerForm, BulkImportForm
from . import customers_bp


@customers_bp.route('/')
@login_required
def customer_list():
    term = request.args.get('q', '')
    return render_template('customers/list.html',
                           customers=search_customers(term),
                           search=term,
                           form=CustomerForm(),
                           import_form=BulkImportForm(),
                           action_form=ActionForm(),
                           is_admin=is_admin(current_user),
                           title='Customers')


@customers_bp.route('/add', methods=['POST'])
@login_required
def add_customer():
    form = CustomerForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('customers.customer_list'))

    try:
        customer = create_customer(form.full_name.data, form.email.data, form.phone.data)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('customers.customer_list'))

    flash(f'Customer Added: {customer.full_name} has been added.', 'success')
    # Intake goes straight on to booking the repair
    if request.form.get('next') == 'new_repair':
        return redirect(url_for('repair.new_repair', customer_id=customer.id))
    return redirect(url_for('customers.customer_detail', customer_id=customer.id))


@customers_bp.route('/import', methods=['POST'])
@login_required
@admin_required
def import_customers():
    form = BulkImportForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('customers.customer_list'))

    try:
        result = bulk_import_customers(form.entries.data, current_user)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('customers.customer_list'))

    message = f'Import Complete: Successfully added {len(result.added)} new customers.'
    if result.duplicates:
        message += f' Skipped {len(result.duplicates)} duplicates.'
    if result.skipped:
        message += f' Ignored {result.skipped} unreadable lines.'
    flash(message, 'success' if result.added else 'info')
    return redirect(url_for('customers.customer_list'))


@customers_bp.route('/bulk-delete', methods=['POST'])
@login_required
@admin_required
def bulk_delete():
    ids = [int(value) for value in request.form.getlist('customer_ids') if value.isdigit()]
    if not ids:
        flash('No Customers Selected: Tick the customers you want to delete.', 'warning')
        return redirect(url_for('customers.customer_list'))

    form = ActionForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('customers.customer_list'))

    try:
        count = delete_customers(ids, current_user)
    except ServiceError as e:
        flash_service_error(e)
    else:
        flash(f'Customers Deleted: {count} customers have been removed.', 'success')
    return redirect(url_for('customers.customer_list'))


@customers_bp.route('/<int:customer_id>')
@login_required
def customer_detail(customer_id):
    customer = Customer.query.get(customer_id)
    if customer is None:
        return render_template('not_found.html', message='Customer not found.', title='Not Found'), 404

    repairs, donations = customer_history(customer)
    phone_uri = tel_uri(customer.phone)

    return render_template('customers/detail.html',
                           customer=customer,
                           repairs=filter_repairs(current_user, repairs),
                           donations=donations,
                           phone_uri=phone_uri,
                           phone_qr=QRCodeGenerator.to_data_url(phone_uri) if phone_uri else None,
                           action_form=ActionForm(),
                           is_admin=is_admin(current_user),
                           title=customer.full_name)


@customers_bp.route('/<int:customer_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_customer(customer_id):
    customer = Customer.query.get(customer_id)
    if customer is None:
        return render_template('not_found.html', message='Customer not found.', title='Not Found'), 404

    form = CustomerForm(obj=customer)
    if form.validate_on_submit():
        try:
            update_customer(customer, form.full_name.data, form.email.data, form.phone.data)
        except ServiceError as e:
            flash_service_error(e)
        else:
            flash('Customer Updated: Details have been saved.', 'success')
            return redirect(url_for('customers.customer_detail', customer_id=customer.id))
    elif request.method == 'POST':
        flash_form_errors(form)

    return render_template('customers/edit.html',
                           form=form,
                           customer=customer,
                           title=f'Edit {customer.full_name}')


@customers_bp.route('/<int:customer_id>/delete', methods=['POST'])
@login_required
@admin_required
def remove_customer(customer_id):
    customer = Customer.query.get(customer_id)
    if customer is None:
        return render_template('not_found.html', message='Customer not found.', title='Not Found'), 404

    name = customer.full_name
    try:
        delete_customer(customer, current_user)
    except ServiceError as e:
        flash_service_error(e)
        return redirect(url_for('customers.customer_detail', customer_id=customer_id))

    flash(f'Customer Deleted: {name} has been removed.', 'success')
    return redirect(url_for('customers.customer_list'))
