"""
Full, ordered materialisations of each collection.
"""
from ..models import Admin, Customer, Donation, Repair, Technician
from ..utils.permissions import filter_repairs, is_admin
from .hub import COLLECTIONS

SNAPSHOT_ORDER = {
    'technicians': lambda: Technician.query.order_by(Technician.name, Technician.id),
    'repairs': lambda: Repair.query.order_by(Repair.created_at.desc(), Repair.id.desc()),
    'customers': lambda: Customer.query.order_by(Customer.full_name, Customer.id),
    'donations': lambda: Donation.query.order_by(Donation.donated_at.desc(), Donation.id.desc()),
    'admins': lambda: Admin.query.order_by(Admin.email),
}

STUDENT_COLLECTIONS = ('technicians', 'repairs', 'customers', 'donations')


def collections_for(user):
    """Collections a user may subscribe to"""
    if user is None:
        return ()
    if is_admin(user):
        return COLLECTIONS
    return STUDENT_COLLECTIONS


def load_snapshot(name, user=None):
    """Model instances of one collection in its fixed order.

    With a user, the repairs snapshot is narrowed to what they may see.
    """
    if name not in SNAPSHOT_ORDER:
        raise KeyError(name)
    records = SNAPSHOT_ORDER[name]().all()
    if name == 'repairs' and user is not None:
        records = filter_repairs(user, records)
    return records


def serialize_snapshot(name, user=None):
    return [record.to_dict() for record in load_snapshot(name, user)]
