from flask import Blueprint

donations_bp = Blueprint('donations', __name__)

# Import all routes
from . import routes

__all__ = ['donations_bp']
