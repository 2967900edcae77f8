import json

from config import WS_NAMESPACE


class SequenceRandom:
    """Stands in for random.Random, returning the given values in order."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class FakeTransport:
    def __init__(self, not_ready=(), failing=()):
        self.not_ready = set(not_ready)
        self.failing = set(failing)
        self.sent = []
        self.ready_checks = 0

    def is_ready(self, sid):
        self.ready_checks += 1
        return sid not in self.not_ready

    def send(self, sid, packet):
        if sid in self.failing:
            raise ConnectionResetError('peer went away')
        self.sent.append((sid, json.loads(packet)))


def messages(client):
    """Decoded JSON messages a test client has received since the last call."""
    decoded = []
    for pkt in client.get_received(WS_NAMESPACE):
        if pkt['name'] != 'message':
            continue
        args = pkt['args']
        if isinstance(args, list):
            args = args[0]
        decoded.append(json.loads(args))
    return decoded
