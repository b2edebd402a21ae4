from .hub import COLLECTIONS, SnapshotHub, Subscription
from .events import current_hub, install_listeners
from .snapshots import collections_for, load_snapshot, serialize_snapshot
from .state import Identity, SessionState, identity_for

__all__ = [
    'COLLECTIONS',
    'SnapshotHub',
    'Subscription',
    'current_hub',
    'install_listeners',
    'collections_for',
    'load_snapshot',
    'serialize_snapshot',
    'Identity',
    'SessionState',
    'identity_for',
]
