import threading

from broadcast import SendOutcome, build_snapshot, publish
from helpers import FakeTransport
from models import GameState
from registry import ConnectionRegistry


def make_registry(*sids):
    registry = ConnectionRegistry()
    for sid in sids:
        registry.register(sid)
    return registry


def test_snapshot_shape():
    registry = make_registry('a', 'b')
    snapshot = build_snapshot(GameState(), registry)
    assert snapshot == {
        'type': 'state',
        'state': {
            'ball': {'x': 300, 'y': 200, 'vx': 3, 'vy': 2},
            'paddles': {'left': {'y': 160}, 'right': {'y': 160}},
            'score': {'left': 0, 'right': 0},
        },
        'playerCount': 2,
        'activeSides': ['left', 'right'],
    }


def test_snapshot_is_a_copy():
    state = GameState()
    snapshot = build_snapshot(state, make_registry('a'))
    state.ball['x'] = 0
    assert snapshot['state']['ball']['x'] == 300


def test_publish_delivers_to_everyone():
    registry = make_registry('a', 'b')
    transport = FakeTransport()
    outcomes = publish(GameState(), registry, transport)
    assert outcomes == {'a': SendOutcome.DELIVERED, 'b': SendOutcome.DELIVERED}
    assert [sid for sid, _ in transport.sent] == ['a', 'b']
    assert transport.sent[0][1]['type'] == 'state'


def test_publish_skips_connections_not_ready():
    registry = make_registry('a', 'b')
    transport = FakeTransport(not_ready={'a'})
    outcomes = publish(GameState(), registry, transport)
    assert outcomes['a'] is SendOutcome.SKIPPED
    assert outcomes['b'] is SendOutcome.DELIVERED
    # skipped connections stay registered
    assert 'a' in registry


def test_publish_removes_connections_that_fail():
    registry = make_registry('a', 'b')
    transport = FakeTransport(failing={'b'})
    outcomes = publish(GameState(), registry, transport)
    assert outcomes['b'] is SendOutcome.FAILED
    assert 'b' not in registry
    assert registry.side_of('b') is None

    transport = FakeTransport()
    publish(GameState(), registry, transport)
    assert [sid for sid, _ in transport.sent] == ['a']
    assert transport.sent[0][1]['playerCount'] == 1


def test_publish_does_nothing_without_connections():
    transport = FakeTransport()
    assert publish(GameState(), ConnectionRegistry(), transport) == {}
    assert transport.sent == []
    assert transport.ready_checks == 0


def test_publish_releases_state_lock_before_sending():
    lock = threading.Lock()

    class LockCheckingTransport(FakeTransport):
        def send(self, sid, packet):
            assert not lock.locked()
            super().send(sid, packet)

    registry = make_registry('a')
    transport = LockCheckingTransport()
    outcomes = publish(GameState(), registry, transport, lock=lock)
    assert outcomes == {'a': SendOutcome.DELIVERED}
    assert not lock.locked()
