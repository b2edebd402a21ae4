"""
Technician and admin accounts.

New accounts and password resets get a random temporary password that is
shown to the admin once, together with an onboarding QR code. The account is
flagged so the first login goes through a password change.
"""
import secrets
import string

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..models import Admin, Technician
from . import (ImportResult, ServiceError, ValidationError, commit_or_raise,
               has_import_input, parse_import_lines)

PASSWORD_CHARSET = string.ascii_letters + string.digits + '!@#$%^&*()'


def generate_temp_password(length=None):
    length = length or current_app.config.get('TEMP_PASSWORD_LENGTH', 10)
    return ''.join(secrets.choice(PASSWORD_CHARSET) for _ in range(length))


def _email_taken(model, email, exclude_id=None):
    query = model.query.filter(func.lower(model.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def find_by_email(model, email):
    if not email:
        return None
    return model.query.filter(func.lower(model.email) == email.strip().lower()).first()


# ---------- Technicians ----------

def create_technician(name, email, phone=''):
    """Returns (technician, temporary_password)"""
    name = (name or '').strip()
    email = (email or '').strip()
    if not name or not email:
        raise ValidationError('Please provide both name and email.')
    if _email_taken(Technician, email):
        raise ValidationError('A technician with this email already exists.', 'Email exists')

    temp_password = generate_temp_password()
    technician = Technician(
        name=name,
        email=email.lower(),
        phone=(phone or '').strip(),
        force_password_change=True,
    )
    technician.set_password(temp_password)
    db.session.add(technician)
    commit_or_raise('add technician')
    current_app.logger.info(f'Technician added: {technician.email}')
    return technician, temp_password


def update_technician(technician, name, email, phone=''):
    name = (name or '').strip()
    email = (email or '').strip()
    if not name or not email:
        raise ValidationError('Please provide both name and email.')
    if _email_taken(Technician, email, exclude_id=technician.id):
        raise ValidationError('A technician with this email already exists.', 'Email exists')

    technician.name = name
    technician.email = email.lower()
    technician.phone = (phone or '').strip()
    commit_or_raise('update technician')
    return technician


def delete_technician(technician):
    email = technician.email
    db.session.delete(technician)
    commit_or_raise('remove technician')
    current_app.logger.info(f'Technician removed: {email}')


def bulk_import_technicians(data):
    """Add technicians from ``name,email[,phone]`` lines.

    ``added`` holds (technician, temporary_password) pairs so the admin can
    hand out the onboarding codes.
    """
    if not has_import_input(data):
        raise ValidationError('Please paste technician data into the text area.', 'No Input')

    existing_emails = {email.lower() for (email,) in db.session.query(Technician.email).all()}
    added, duplicates, skipped = [], [], 0

    for parsed in parse_import_lines(data):
        if parsed is None:
            skipped += 1
            continue
        name, email, phone = parsed
        if email.lower() in existing_emails:
            duplicates.append(email)
            continue

        temp_password = generate_temp_password()
        technician = Technician(name=name, email=email.lower(), phone=phone, force_password_change=True)
        technician.set_password(temp_password)
        db.session.add(technician)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception(f'Bulk import: could not add technician {email}')
            skipped += 1
            continue
        added.append((technician, temp_password))
        existing_emails.add(email.lower())

    current_app.logger.info(
        f'Technician import: {len(added)} added, {len(duplicates)} duplicates, {skipped} skipped'
    )
    return ImportResult(added, duplicates, skipped)


# ---------- Admins ----------

def create_admin(email):
    """Returns (admin, temporary_password)"""
    email = (email or '').strip()
    if not email:
        raise ValidationError('Please provide an email.')
    if _email_taken(Admin, email):
        raise ValidationError('An admin with this email already exists.', 'Email exists')

    temp_password = generate_temp_password()
    admin = Admin(email=email.lower(), force_password_change=True)
    admin.set_password(temp_password)
    db.session.add(admin)
    commit_or_raise('add admin')
    current_app.logger.info(f'Admin added: {admin.email}')
    return admin, temp_password


def update_admin(admin, email):
    email = (email or '').strip()
    if not email:
        raise ValidationError('Please provide an email.')
    if _email_taken(Admin, email, exclude_id=admin.id):
        raise ValidationError('An admin with this email already exists.', 'Email exists')

    admin.email = email.lower()
    commit_or_raise('update admin')
    return admin


def delete_admin(admin):
    """Remove an admin unless it is the last one"""
    if Admin.query.count() <= 1:
        raise ServiceError('You cannot delete the last admin.', 'Cannot Delete')
    email = admin.email
    db.session.delete(admin)
    commit_or_raise('remove admin')
    current_app.logger.info(f'Admin removed: {email}')


def ensure_default_admin(email, password):
    """Create the bootstrap admin when the admins table is empty"""
    if Admin.query.first() is not None:
        return None
    admin = Admin(email=email.lower(), force_password_change=True)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    current_app.logger.warning(f'No admins found, created default admin {admin.email}')
    return admin


# ---------- Passwords ----------

def reset_password(account):
    """Give an admin or technician a new temporary password"""
    temp_password = generate_temp_password()
    account.set_password(temp_password)
    account.force_password_change = True
    commit_or_raise('reset password')
    current_app.logger.info(f'Password reset for {account.email}')
    return temp_password


def change_password(account, new_password, confirm_password):
    if not new_password or not confirm_password:
        raise ValidationError('Please enter and confirm your new password.', 'Missing Fields')
    if new_password != confirm_password:
        raise ValidationError('Please ensure both passwords are the same.', 'Passwords Do Not Match')

    account.set_password(new_password)
    account.force_password_change = False
    commit_or_raise('update password')
    current_app.logger.info(f'Password changed for {account.email}')
