# repairdesk/services/repairs.py
"""
Repair ticket operations: intake, status changes, technician assignment,
cloning and deleting archived tickets.
"""
from datetime import datetime

from flask import current_app
from sqlalchemy import func

from .. import db
from ..models import Repair, Technician
from ..utils.lifecycle import (RepairStatus, UNASSIGNED, LifecycleError,
                               apply_transition, initial_state)
from ..utils.permissions import STUDENT, can_view_repair, is_admin
from . import PermissionDenied, ServiceError, ValidationError, commit_or_raise

DEVICE_TYPES = ['Computer', 'Phone', 'Tablet', 'Console', 'Other']


def clean_accessories(accessories):
    """Strip blanks and repeats, keep the order they were ticked in"""
    if isinstance(accessories, str):
        accessories = accessories.split(',')
    seen = []
    for item in accessories or []:
        item = (item or '').strip()
        if item and item not in seen:
            seen.append(item)
    return seen


def find_technician(identifier):
    """Technician whose email or name matches, ignoring case"""
    if not identifier or identifier == UNASSIGNED:
        return None
    identifier = identifier.strip().lower()
    return (Technician.query.filter(func.lower(Technician.email) == identifier).first()
            or Technician.query.filter(func.lower(Technician.name) == identifier).first())


def resolve_technician_name(identifier, technicians):
    """Display name for an assignee stored as a name or an email.

    Unmatched identifiers are shown as stored.
    """
    if not identifier or identifier == UNASSIGNED:
        return UNASSIGNED
    lowered = identifier.lower()
    for technician in technicians:
        if technician.email.lower() == lowered:
            return technician.name
    for technician in technicians:
        if technician.name.lower() == lowered:
            return technician.name
    return identifier


def technician_display_name(repair, technicians=None):
    if repair.technician is not None:
        return repair.technician.name
    if technicians is None:
        technicians = Technician.query.all()
    return resolve_technician_name(repair.assigned_to_name, technicians)


def create_repair(customer, device_type, brand, model, problem_notes, signature,
                  assigned_to=None, password_pin='', accessories=None, actor=None):
    """Open a new Pending ticket for a customer"""
    if customer is None:
        raise ValidationError('Please search for and select a customer first.', 'No Customer Selected')
    if not device_type or not brand or not model or not problem_notes:
        raise ValidationError('Please fill out all device and problem details.')
    if not signature:
        raise ValidationError('Please have the customer sign for liability.', 'Signature Required')

    # Students always take the tickets they open
    if actor is not None and getattr(actor, 'role', None) == STUDENT:
        assigned_to = actor

    if isinstance(assigned_to, Technician):
        technician = assigned_to
    else:
        technician = find_technician(assigned_to)
    assigned_name = technician.name if technician else (assigned_to or '').strip()
    if not assigned_name:
        raise ValidationError('Please assign a technician to this repair.', 'No Technician Assigned')

    state = initial_state()
    repair = Repair(
        customer_id=customer.id,
        customer_name=customer.full_name,
        device_type=device_type,
        brand=brand.strip(),
        model=model.strip(),
        problem_notes=problem_notes.strip(),
        password_pin=(password_pin or '').strip(),
        accessories=clean_accessories(accessories),
        signature=signature,
        status=state.status.value,
        ready_at=state.ready_at,
        archived_at=state.archived_at,
        assigned_to_name=assigned_name,
        technician_id=technician.id if technician else None,
        created_at=datetime.utcnow(),
    )
    db.session.add(repair)
    commit_or_raise('create repair')
    current_app.logger.info(f'Repair {repair.ticket_number} created for {customer.full_name}')
    return repair


def change_status(repair, new_status, actor, now=None):
    if not can_view_repair(actor, repair):
        raise PermissionDenied('You are not assigned to this repair.')
    try:
        transition = apply_transition(repair.status, new_status, now or datetime.utcnow(),
                                      archived_at=repair.archived_at)
    except LifecycleError as e:
        raise ServiceError(str(e), 'Invalid Status')

    old_status = repair.status
    repair.status = transition.status.value
    repair.ready_at = transition.ready_at
    repair.archived_at = transition.archived_at
    commit_or_raise('update repair status')
    current_app.logger.info(
        f'Repair {repair.ticket_number}: {old_status} -> {repair.status} by {actor.email}'
    )
    return repair


def assign_technician(repair, technician, actor):
    """Point a ticket at a technician.

    ``technician`` may be a Technician or a name/email. Picking the
    "To Be Determined" placeholder does nothing and returns False.
    """
    if not is_admin(actor):
        raise PermissionDenied('Only admins can assign technicians.')
    if technician is None or technician == UNASSIGNED:
        return False

    if not isinstance(technician, Technician):
        match = find_technician(technician)
        if match is None:
            raise ValidationError('That technician could not be found.', 'Unknown Technician')
        technician = match

    repair.technician_id = technician.id
    repair.assigned_to_name = technician.name
    commit_or_raise('assign technician')
    current_app.logger.info(f'Repair {repair.ticket_number} assigned to {technician.email}')
    return True


def clone_repair(repair, actor):
    """Open a fresh Pending ticket from an archived one"""
    if not can_view_repair(actor, repair):
        raise PermissionDenied('You are not assigned to this repair.')
    if not repair.is_archived:
        raise ServiceError('Only archived repairs can be cloned.', 'Cannot Clone')

    state = initial_state()
    clone = Repair(
        customer_id=repair.customer_id,
        customer_name=repair.customer_name,
        device_type=repair.device_type,
        brand=repair.brand,
        model=repair.model,
        problem_notes=repair.problem_notes,
        password_pin=repair.password_pin,
        accessories=list(repair.accessories or []),
        signature=repair.signature,
        assigned_to_name=repair.assigned_to_name,
        technician_id=repair.technician_id,
        status=state.status.value,
        ready_at=state.ready_at,
        archived_at=state.archived_at,
        created_at=datetime.utcnow(),
    )
    db.session.add(clone)
    commit_or_raise('clone repair')
    current_app.logger.info(f'Repair {repair.ticket_number} cloned as {clone.ticket_number}')
    return clone


def delete_repair(repair, actor):
    if not is_admin(actor):
        raise PermissionDenied('Only admins can delete repairs.')
    if repair.status != RepairStatus.ARCHIVED.value:
        raise ServiceError('Only archived repairs can be deleted.', 'Cannot Delete')
    ticket = repair.ticket_number
    db.session.delete(repair)
    commit_or_raise('delete repair')
    current_app.logger.info(f'Repair {ticket} deleted by {actor.email}')
