from flask import Blueprint

live_bp = Blueprint('live', __name__)

# Import all routes
from . import routes

__all__ = ['live_bp']
