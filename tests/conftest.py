import os
import sys
import random

import pytest

# Ensure the project root (containing the server modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from config import WS_NAMESPACE  # noqa: E402
from server import create_app, socketio  # noqa: E402


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    HOST = '127.0.0.1'
    PORT = 0
    TICK_MS = 16
    SIDE_POLICY = 'overflow-to-left'
    RANDOM_SEED = 1234
    CORS_ALLOWED_ORIGINS = '*'
    START_TICK_LOOP = False


@pytest.fixture()
def rng():
    return random.Random(42)


@pytest.fixture()
def flask_app():
    return create_app(TestConfig)


@pytest.fixture()
def game(flask_app):
    return flask_app.extensions['pong']


@pytest.fixture()
def ws_client(flask_app):
    clients = []

    def connect():
        client = socketio.test_client(flask_app, namespace=WS_NAMESPACE)
        clients.append(client)
        return client

    yield connect
    for client in clients:
        if client.is_connected(WS_NAMESPACE):
            client.disconnect(namespace=WS_NAMESPACE)
