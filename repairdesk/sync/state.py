"""
Shared session state: who is signed in plus the live collections they see.
"""
from collections import namedtuple

from flask import current_app

from ..services.auth import load_account, password_fingerprint
from .hub import COLLECTIONS
from .snapshots import collections_for, serialize_snapshot

Identity = namedtuple('Identity', ['id', 'email', 'name', 'role'])


def identity_for(user):
    """Freeze the parts of an account the filters need"""
    if user is None:
        return None
    return Identity(user.id, user.email, getattr(user, 'name', None), user.role)


class SessionState:
    """A read-through cache of the five collections for one signed-in user.

    Snapshots are reloaded from the database whenever the hub reports a
    change; listeners registered with ``subscribe`` are called with
    ``(collection_name, snapshot)`` after each reload.

    The account is re-read before every reload. Once it has been deleted or
    its password has changed the state logs itself out and delivers nothing.
    """

    def __init__(self, hub, user=None, loader=serialize_snapshot):
        self._hub = hub
        self._loader = loader
        self._listeners = []
        self._subscription = None
        self._account_id = None
        self._fingerprint = None
        self.identity = None
        self.collections = {name: [] for name in COLLECTIONS}
        if user is not None:
            self.login(user)

    def login(self, user):
        self.logout()
        self.identity = identity_for(user)
        self._account_id = user.get_id()
        self._fingerprint = password_fingerprint(user)
        self._subscription = self._hub.subscribe(collections_for(self.identity))

    def logout(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        self.identity = None
        self._account_id = None
        self._fingerprint = None
        self.collections = {name: [] for name in COLLECTIONS}

    close = logout

    @property
    def active(self):
        return self._subscription is not None

    def subscribe(self, listener):
        """Register a change listener; returns a callable that removes it"""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def account_is_current(self):
        """False (and logged out) when the account is gone or re-keyed"""
        if not self.active:
            return False
        account = load_account(self._account_id)
        if account is None or password_fingerprint(account) != self._fingerprint:
            current_app.logger.info(f'Live session for {self.identity.email} ended: account changed')
            self.logout()
            return False
        return True

    def _publish(self, name, snapshot):
        self.collections[name] = snapshot
        for listener in list(self._listeners):
            listener(name, snapshot)

    def _reload(self, names):
        for name in names:
            self._publish(name, self._loader(name, self.identity))
        return names

    def resync(self):
        """Reload every watched collection and report the ones that differ.

        Commits made by other worker processes never reach this hub, so
        idle periods compare against the database directly.
        """
        if not self.account_is_current():
            return []
        changed = []
        for name in self._subscription.collections:
            snapshot = self._loader(name, self.identity)
            if snapshot != self.collections[name]:
                self._publish(name, snapshot)
                changed.append(name)
        return changed

    def refresh(self):
        """Reload every collection with a pending change; returns their names"""
        if not self.active:
            return []
        names = self._subscription.drain()
        if not self.account_is_current():
            return []
        return self._reload(names)

    def wait(self, timeout=None):
        """Block until something changes, then reload it.

        When ``timeout`` passes with no notification the collections are
        resynced from the database instead.
        """
        if not self.active:
            return []
        names = self._subscription.wait(timeout)
        if not names:
            return self.resync()
        if not self.account_is_current():
            return []
        return self._reload(names)
