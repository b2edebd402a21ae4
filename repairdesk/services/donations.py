from datetime import datetime

from flask import current_app

from .. import db
from ..models import Donation
from ..utils.permissions import is_admin
from . import PermissionDenied, ValidationError, commit_or_raise


def record_donation(customer, device_type, brand, model, notes, actor):
    if not is_admin(actor):
        raise PermissionDenied('Only admins can record donations.')
    if customer is None:
        raise ValidationError('Please search for and select the donating customer first.', 'No Customer Selected')
    if not device_type or not brand or not model:
        raise ValidationError('Please fill out all device details.')

    donation = Donation(
        customer_id=customer.id,
        customer_name=customer.full_name,
        device_type=device_type,
        brand=brand.strip(),
        model=model.strip(),
        notes=(notes or '').strip(),
        donated_at=datetime.utcnow(),
        received_by=actor.email,
    )
    db.session.add(donation)
    commit_or_raise('record donation')
    current_app.logger.info(f'Donation {donation.id} from {customer.full_name} received by {actor.email}')
    return donation


def list_donations():
    return Donation.query.order_by(Donation.donated_at.desc(), Donation.id.desc()).all()


def donation_key(record):
    """Repairs and donations match on customer and device"""
    return (record.customer_id, record.device_type, record.brand, record.model)


def donated_keys():
    return {donation_key(donation) for donation in Donation.query.all()}
