from flask import Blueprint

repair_bp = Blueprint('repair', __name__)

# Import all routes
from . import dashboard, intake, jobs

__all__ = ['repair_bp']
