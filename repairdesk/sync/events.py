"""
Feed the snapshot hub from SQLAlchemy session events.

Changed tables are collected on flush and only announced once the
transaction commits; a rollback throws them away.
"""
from itertools import chain

from flask import current_app, has_app_context
from sqlalchemy import event

from .hub import COLLECTIONS

PENDING_KEY = 'repairdesk_changed_collections'
HUB_EXTENSION = 'repairdesk_hub'

_installed = False


def current_hub():
    if not has_app_context():
        return None
    return current_app.extensions.get(HUB_EXTENSION)


def _collect_changes(session, flush_context):
    changed = session.info.setdefault(PENDING_KEY, set())
    for instance in chain(session.new, session.dirty, session.deleted):
        table = getattr(instance, '__tablename__', None)
        if table in COLLECTIONS:
            changed.add(table)


def _announce_changes(session):
    changed = session.info.pop(PENDING_KEY, None)
    if not changed:
        return
    hub = current_hub()
    if hub is not None:
        current_app.logger.debug(f'Collections changed: {", ".join(sorted(changed))}')
        hub.publish(changed)


def _discard_changes(session):
    session.info.pop(PENDING_KEY, None)


def install_listeners(db):
    """Hook the shared session once; each app finds its own hub at commit time"""
    global _installed
    if _installed:
        return
    event.listen(db.session, 'after_flush', _collect_changes)
    event.listen(db.session, 'after_commit', _announce_changes)
    event.listen(db.session, 'after_rollback', _discard_changes)
    _installed = True
