"""
Permission and role checking utilities
"""

from functools import wraps
from flask import flash, redirect, url_for
from flask_login import current_user
from sqlalchemy import false, func, or_

ADMIN = 'Admin'
STUDENT = 'Student'


def role_required(*roles):
    """
    Decorator to require specific roles
    Usage: @role_required('Admin')
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                flash('Please log in to access this page.', 'warning')
                return redirect(url_for('auth.login'))

            if current_user.role not in roles:
                flash('You do not have permission to access this page.', 'danger')
                return redirect(url_for('repair.dashboard'))

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """Decorator to require admin role"""
    return role_required(ADMIN)(f)


def is_admin(user):
    return getattr(user, 'role', None) == ADMIN


def _identity_names(user):
    names = {user.email.lower()}
    if getattr(user, 'name', None):
        names.add(user.name.lower())
    return names


def can_view_repair(user, repair):
    """Admins see every ticket, students only the ones assigned to them"""
    if is_admin(user):
        return True
    if getattr(user, 'role', None) != STUDENT:
        return False
    if repair.technician_id is not None and repair.technician_id == user.id:
        return True
    # Older tickets only carry the assignee's name or email
    return (repair.assigned_to_name or '').lower() in _identity_names(user)


def filter_repairs(user, repairs):
    return [repair for repair in repairs if can_view_repair(user, repair)]


def visible_repairs_query(user, query):
    """Narrow a Repair query to what the user may see"""
    from ..models import Repair

    if is_admin(user):
        return query
    if getattr(user, 'role', None) != STUDENT:
        return query.filter(false())
    return query.filter(
        or_(
            Repair.technician_id == user.id,
            func.lower(Repair.assigned_to_name).in_(_identity_names(user)),
        )
    )
