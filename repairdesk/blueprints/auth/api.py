from flask import jsonify, request, session, current_app
from flask_login import login_user
from ... import csrf
from ...services.auth import authenticate, INVALID_CREDENTIALS
from . import api_bp
from .routes import PENDING_PASSWORD_CHANGE

csrf.exempt(api_bp)


@api_bp.route('/login', methods=['POST'])
def login():
    """JSON admin login: {email, password} -> {success, forcePasswordChange}"""
    try:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not payload.get('email') or not payload.get('password'):
            return jsonify({'message': 'Email and password are required.'}), 400

        admin = authenticate('Admin', str(payload['email']), str(payload['password']))
        if admin is None:
            return jsonify({'message': INVALID_CREDENTIALS}), 401

        if admin.force_password_change:
            session[PENDING_PASSWORD_CHANGE] = admin.get_id()
        else:
            login_user(admin)

        return jsonify({
            'success': True,
            'forcePasswordChange': bool(admin.force_password_change),
        }), 200
    except Exception:
        current_app.logger.exception('API Login Error')
        return jsonify({'message': 'An unexpected error occurred.'}), 500
