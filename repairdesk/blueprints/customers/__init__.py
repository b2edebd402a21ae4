from flask import Blueprint

customers_bp = Blueprint('customers', __name__)

# Import all routes
from . import routes

__all__ = ['customers_bp']
