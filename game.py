"""
The single owner of the shared game: state, registry and the lock around them.

Socket handlers and the tick loop go through PongGame only; nothing else
writes to the state.
"""

import json
import logging
import math
import random
import threading

import broadcast
import physics
from config import SIDES
from models import GameState
from registry import SPECTATOR, ConnectionRegistry, overflow_to_left

logger = logging.getLogger(__name__)


class MalformedMessage(ValueError):
    pass


def parse_message(raw):
    """Decode an inbound payload into (type, data). Raises MalformedMessage."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8', errors='replace')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise MalformedMessage(f'not JSON: {exc}') from exc
    if not isinstance(raw, dict):
        raise MalformedMessage('payload is not an object')
    msg_type = raw.get('type')
    if msg_type != 'move':
        raise MalformedMessage(f'unknown message type: {msg_type!r}')

    side = raw.get('side')
    if side not in SIDES:
        raise MalformedMessage(f'unknown side: {side!r}')
    y = raw.get('y')
    # bool is an int subclass but never a position
    if isinstance(y, bool) or not isinstance(y, (int, float)):
        raise MalformedMessage(f'bad y: {y!r}')
    # infinities and huge ints clamp to the bounds, NaN has nowhere to go
    if isinstance(y, float) and math.isnan(y):
        raise MalformedMessage(f'bad y: {y!r}')
    return msg_type, {'side': side, 'y': y}


class PongGame:
    def __init__(self, policy=overflow_to_left, rng=None):
        self.state = GameState()
        self.registry = ConnectionRegistry(policy)
        self.rng = rng or random.Random()
        self.ticks = 0
        self._lock = threading.Lock()

    def connect(self, sid):
        side = self.registry.register(sid)
        logger.info('Player %s connected and assigned to %s side', sid, side or SPECTATOR)
        return side

    def disconnect(self, sid):
        side = self.registry.side_of(sid)
        if self.registry.remove(sid) is not None:
            logger.info('Player %s (%s) disconnected', sid, side or SPECTATOR)

    def apply_move(self, sid, side, y):
        """Move a paddle if sid controls that side. Returns True when applied."""
        if side not in SIDES or self.registry.side_of(sid) != side:
            logger.debug('Ignoring move of %s side from %s', side, sid)
            return False
        with self._lock:
            self.state.paddles[side]['y'] = physics.clamp_paddle(y)
        return True

    def handle_message(self, sid, raw):
        try:
            _, data = parse_message(raw)
        except MalformedMessage as exc:
            logger.debug('Bad WS message from %s: %s', sid, exc)
            return False
        return self.apply_move(sid, data['side'], data['y'])

    def tick(self, transport):
        """One physics step followed by a broadcast. Returns the send outcomes."""
        with self._lock:
            scorer = physics.step(self.state, self.rng)
            self.ticks += 1
            score = dict(self.state.score)
        if scorer:
            logger.info('Point to %s, score is now %s', scorer, score)
        return broadcast.publish(self.state, self.registry, transport, lock=self._lock)
