"""
Bookkeeping of live connections and the side each one controls.

Both maps are only touched under the registry lock, so a connection is
never visible without its side (or vice versa).
"""

import itertools
import threading

from models import Connection

SPECTATOR = 'spectator'


def overflow_to_left(taken):
    """Left, then right, then left again: a third player co-controls left."""
    if 'left' not in taken:
        return 'left'
    if 'right' not in taken:
        return 'right'
    return 'left'


def spectator_overflow(taken):
    """Left, then right; everyone after that watches without a side."""
    if 'left' not in taken:
        return 'left'
    if 'right' not in taken:
        return 'right'
    return None


SIDE_POLICIES = {
    'overflow-to-left': overflow_to_left,
    'spectator': spectator_overflow,
}


def get_policy(name):
    try:
        return SIDE_POLICIES[name]
    except KeyError:
        raise ValueError(f'Unknown side policy: {name!r}') from None


class ConnectionRegistry:
    def __init__(self, policy=overflow_to_left):
        self.policy = policy
        self.connections = {}  # {sid: Connection}
        self.sides = {}  # {sid: 'left' | 'right' | None}
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def register(self, sid):
        """Add a connection and assign its side. Returns the side (None for spectators)."""
        with self._lock:
            side = self.policy(set(self.sides.values()))
            self.connections[sid] = Connection(sid, next(self._seq))
            self.sides[sid] = side
            return side

    def remove(self, sid):
        """Drop both entries for sid. Returns the removed connection, or None if unknown."""
        with self._lock:
            self.sides.pop(sid, None)
            return self.connections.pop(sid, None)

    def side_of(self, sid):
        with self._lock:
            return self.sides.get(sid)

    def sids(self):
        with self._lock:
            return list(self.connections)

    def __len__(self):
        with self._lock:
            return len(self.connections)

    def __contains__(self, sid):
        with self._lock:
            return sid in self.connections

    def active_sides(self):
        """Assigned sides, each once, in order of first assignment."""
        with self._lock:
            return self._active_sides()

    def snapshot(self):
        """(connection count, active sides), read under one lock."""
        with self._lock:
            return len(self.connections), self._active_sides()

    def _active_sides(self):
        seen = []
        for conn in sorted(self.connections.values(), key=lambda c: c.seq):
            side = self.sides.get(conn.sid)
            if side is not None and side not in seen:
                seen.append(side)
        return seen
