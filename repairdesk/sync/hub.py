"""
Change notifications for the five collections.

The hub only says *which* collection changed; subscribers then reload the
whole ordered snapshot themselves (see ``snapshots.load_snapshot``). A
subscription is primed with every collection it watches, so the first read
after subscribing always delivers the current state.
"""
import queue
import threading

COLLECTIONS = ('technicians', 'repairs', 'customers', 'donations', 'admins')


class Subscription:
    def __init__(self, hub, collections):
        self._hub = hub
        self.collections = tuple(name for name in COLLECTIONS if name in set(collections))
        self._queue = queue.Queue()
        self._pending = set()
        self._lock = threading.Lock()
        self.closed = False

    def notify(self, name):
        """Queue a change; repeated changes coalesce until the next read"""
        if name not in self.collections:
            return
        with self._lock:
            if self.closed or name in self._pending:
                return
            self._pending.add(name)
        self._queue.put(name)

    def _take(self, block, timeout):
        try:
            name = self._queue.get(block=block, timeout=timeout)
        except queue.Empty:
            return None
        with self._lock:
            self._pending.discard(name)
            if self.closed:
                return None
        return name

    def get(self, timeout=None):
        """Next changed collection name, or None after ``timeout`` seconds"""
        return self._take(True, timeout)

    def drain(self):
        """All changed collection names queued right now, oldest first"""
        names = []
        while True:
            name = self._take(False, None)
            if name is None:
                return names
            names.append(name)

    def wait(self, timeout=None):
        """Block for the first change, then collect everything else pending"""
        first = self.get(timeout)
        if first is None:
            return []
        return [first] + self.drain()

    def close(self):
        self._hub.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SnapshotHub:
    def __init__(self):
        self._subscriptions = set()
        self._lock = threading.Lock()

    def subscribe(self, collections=COLLECTIONS):
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f'Unknown collections: {", ".join(sorted(unknown))}')

        subscription = Subscription(self, collections)
        for name in subscription.collections:
            subscription.notify(name)
        with self._lock:
            self._subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription):
        with subscription._lock:
            subscription.closed = True
        with self._lock:
            self._subscriptions.discard(subscription)

    def publish(self, names):
        names = [name for name in COLLECTIONS if name in set(names)]
        if not names:
            return
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            for name in names:
                subscription.notify(name)

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)
