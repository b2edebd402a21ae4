"""
Login and onboarding.

Both roles are checked server-side against salted password hashes. Onboarding
links carry a signed, expiring token naming the account; the temporary
password itself is never put into a URL or QR code.
"""
import hashlib

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..models import Admin, Technician
from ..utils.permissions import ADMIN, STUDENT
from . import ValidationError
from .staff import find_by_email

ROLE_MODELS = {
    ADMIN: Admin,
    STUDENT: Technician,
}

ID_PREFIXES = {
    'admin': Admin,
    'technician': Technician,
}

INVALID_CREDENTIALS = 'Invalid credentials.'


def authenticate(role, email, password):
    """Return the matching account or None; email match ignores case"""
    model = ROLE_MODELS.get(role)
    if model is None or not email or not password:
        return None
    account = find_by_email(model, email)
    if account is None or not account.check_password(password):
        current_app.logger.info(f'Failed {role} login for {email!r}')
        return None
    return account


def load_account(user_id):
    """Flask-Login loader for ids like ``admin:3`` or ``technician:7``"""
    prefix, _, raw_id = (user_id or '').partition(':')
    model = ID_PREFIXES.get(prefix)
    if model is None or not raw_id.isdigit():
        return None
    return model.query.get(int(raw_id))


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt='repairdesk-onboarding')


def password_fingerprint(account):
    # Changes whenever the password does, so a reset or a completed first
    # login invalidates links handed out earlier.
    return hashlib.sha256((account.password_hash or '').encode()).hexdigest()[:16]


def make_onboarding_token(account):
    return _serializer().dumps({
        'role': account.role,
        'email': account.email,
        'pw': password_fingerprint(account),
    })


def load_onboarding_token(token, max_age=None):
    """Return the account an onboarding token was issued for"""
    if max_age is None:
        max_age = current_app.config['ONBOARDING_TOKEN_MAX_AGE']
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        raise ValidationError('This onboarding link has expired. Ask an admin for a new one.', 'Link Expired')
    except BadSignature:
        raise ValidationError('This onboarding link is not valid.', 'Invalid Link')

    model = ROLE_MODELS.get(data.get('role'))
    account = find_by_email(model, data.get('email')) if model else None
    if account is None or data.get('pw') != password_fingerprint(account):
        raise ValidationError('This onboarding link is no longer valid.', 'Invalid Link')
    return account
