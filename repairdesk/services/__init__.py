"""
Business operations behind the views.

Routes call these instead of touching the session directly so that
validation happens before any write and database failures are rolled back,
logged and turned into a message the user can read.
"""
from collections import namedtuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .. import db


class ServiceError(Exception):
    """Base error; the message is safe to flash to the user"""

    def __init__(self, message, title='Error'):
        super().__init__(message)
        self.message = message
        self.title = title


class ValidationError(ServiceError):
    def __init__(self, message, title='Missing Information'):
        super().__init__(message, title)


class PermissionDenied(ServiceError):
    def __init__(self, message='You do not have permission to do that.'):
        super().__init__(message, 'Access Denied')


# Outcome of a line-by-line import: added records, duplicate emails, and the
# number of lines that were malformed or failed to save
ImportResult = namedtuple('ImportResult', ['added', 'duplicates', 'skipped'])


def commit_or_raise(action):
    """Commit the current session; on failure roll back and raise ServiceError"""
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(f'Database error while trying to {action}')
        raise ServiceError(f'Could not {action}.')


def parse_import_lines(data):
    """Yield (name, email, phone) for each usable ``name,email[,phone]`` line.

    Blank lines are passed over. Lines with fewer than two fields or an empty
    name/email yield None so the caller can count them as skipped.
    """
    if isinstance(data, str):
        lines = data.strip().split('\n')
    else:
        lines = list(data or [])

    for line in lines:
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split(',')]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            yield None
            continue
        phone = parts[2] if len(parts) > 2 else ''
        yield parts[0], parts[1], phone


def has_import_input(data):
    if isinstance(data, str):
        return bool(data.strip())
    return any(line.strip() for line in (data or []))
