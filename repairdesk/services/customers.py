from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..models import Customer, Repair, Donation
from ..utils.permissions import is_admin
from . import (ImportResult, PermissionDenied, ValidationError, commit_or_raise,
               has_import_input, parse_import_lines)


def validate_customer(full_name, email, phone):
    if not full_name or (not email and not phone):
        raise ValidationError('Please provide a name and at least an email or phone number.')


def search_customers(term=''):
    query = Customer.query
    term = (term or '').strip()
    if term:
        like = f'%{term.lower()}%'
        query = query.filter(
            or_(
                func.lower(Customer.full_name).like(like),
                func.lower(Customer.email).like(like),
                Customer.phone.contains(term),
            )
        )
    return query.order_by(Customer.full_name).all()


def create_customer(full_name, email='', phone=''):
    full_name = (full_name or '').strip()
    email = (email or '').strip()
    phone = (phone or '').strip()
    validate_customer(full_name, email, phone)

    customer = Customer(full_name=full_name, email=email, phone=phone)
    db.session.add(customer)
    commit_or_raise('add customer')
    current_app.logger.info(f'Customer {customer.id} added: {full_name}')
    return customer


def update_customer(customer, full_name, email='', phone=''):
    full_name = (full_name or '').strip()
    email = (email or '').strip()
    phone = (phone or '').strip()
    validate_customer(full_name, email, phone)

    customer.full_name = full_name
    customer.email = email
    customer.phone = phone
    commit_or_raise('update customer details')
    return customer


def delete_customer(customer, actor):
    if not is_admin(actor):
        raise PermissionDenied('Only admins can delete customers.')
    name = customer.full_name
    db.session.delete(customer)
    commit_or_raise('delete customer')
    current_app.logger.info(f'Customer {name} deleted by {actor.email}')


def delete_customers(customer_ids, actor):
    """Delete several customers in one transaction; returns how many went"""
    if not is_admin(actor):
        raise PermissionDenied('Only admins can delete customers.')
    if not customer_ids:
        return 0

    customers = Customer.query.filter(Customer.id.in_(customer_ids)).all()
    for customer in customers:
        db.session.delete(customer)
    commit_or_raise('delete customers')
    current_app.logger.info(f'{len(customers)} customer(s) deleted by {actor.email}')
    return len(customers)


def bulk_import_customers(data, actor=None):
    """Add customers from ``name,email[,phone]`` lines.

    Each customer is saved on its own; a failed save is skipped and the rest
    of the batch carries on. Emails already on file (or earlier in the same
    batch) are reported as duplicates.
    """
    if actor is not None and not is_admin(actor):
        raise PermissionDenied('Only admins can import customers.')
    if not has_import_input(data):
        raise ValidationError('Please paste customer data into the text area.', 'No Input')

    existing_emails = {
        email.lower() for (email,) in db.session.query(Customer.email).all() if email
    }
    added, duplicates, skipped = [], [], 0

    for parsed in parse_import_lines(data):
        if parsed is None:
            skipped += 1
            continue
        name, email, phone = parsed
        if email.lower() in existing_emails:
            duplicates.append(email)
            continue

        customer = Customer(full_name=name, email=email, phone=phone)
        db.session.add(customer)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception(f'Bulk import: could not add customer {email}')
            skipped += 1
            continue
        added.append(customer)
        existing_emails.add(email.lower())

    current_app.logger.info(
        f'Customer import: {len(added)} added, {len(duplicates)} duplicates, {skipped} skipped'
    )
    return ImportResult(added, duplicates, skipped)


def customer_history(customer):
    """Repairs (newest first) and donations for one customer"""
    repairs = Repair.query.filter_by(customer_id=customer.id).order_by(Repair.created_at.desc()).all()
    donations = Donation.query.filter_by(customer_id=customer.id).order_by(Donation.donated_at.desc()).all()
    return repairs, donations
