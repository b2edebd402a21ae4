# repairdesk/models/__init__.py

from .customer import Customer
from .staff import Admin, Technician
from .repair import Repair
from .donation import Donation

# Export all models
__all__ = [
    'Customer',
    'Admin',
    'Technician',
    'Repair',
    'Donation',
]
