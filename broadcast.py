import contextlib
import enum
import json
import logging

logger = logging.getLogger(__name__)


class SendOutcome(enum.Enum):
    DELIVERED = 'delivered'
    SKIPPED = 'skipped-not-ready'
    FAILED = 'failed-removed'


def build_snapshot(state, registry):
    player_count, active_sides = registry.snapshot()
    return {
        'type': 'state',
        'state': state.to_dict(),
        'playerCount': player_count,
        'activeSides': active_sides,
    }


def serialize(state, registry):
    return json.dumps(build_snapshot(state, registry))


def deliver(packet, registry, transport):
    """
    Best-effort send of one packet to every live connection.

    A connection that is not ready is skipped until the next tick; one whose
    send raises is removed from the registry on the spot.
    """
    outcomes = {}
    for sid in registry.sids():
        if not transport.is_ready(sid):
            outcomes[sid] = SendOutcome.SKIPPED
            continue
        try:
            transport.send(sid, packet)
        except Exception as exc:
            logger.warning('Error sending to player %s, dropping it: %s', sid, exc)
            registry.remove(sid)
            outcomes[sid] = SendOutcome.FAILED
        else:
            outcomes[sid] = SendOutcome.DELIVERED
    return outcomes


def publish(state, registry, transport, lock=None):
    """
    Serialize the state and deliver it. Does nothing when nobody is connected.

    When given, lock is held while the state is read, not during the sends.
    """
    with lock or contextlib.nullcontext():
        packet = serialize(state, registry) if len(registry) else None
    if packet is None:
        return {}
    return deliver(packet, registry, transport)
