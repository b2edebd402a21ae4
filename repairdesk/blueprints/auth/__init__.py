from flask import Blueprint

auth_bp = Blueprint('auth', __name__)
api_bp = Blueprint('api', __name__)

# Import all routes
from . import routes, api

__all__ = ['auth_bp', 'api_bp']
