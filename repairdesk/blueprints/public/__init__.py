from flask import Blueprint

public_bp = Blueprint('public', __name__)

# Import all routes
from . import routes

__all__ = ['public_bp']
