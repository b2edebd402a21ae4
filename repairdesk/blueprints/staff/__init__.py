from flask import Blueprint

staff_bp = Blueprint('staff', __name__)

# Import all routes
from . import technicians, admins

__all__ = ['staff_bp']
