import json
import logging
import random
import sys
import time

from flask import Flask, current_app, render_template, request
from flask_socketio import SocketIO, send

from config import WS_NAMESPACE, Config
from game import PongGame
from registry import SPECTATOR, get_policy

logger = logging.getLogger(__name__)

socketio = SocketIO()


class SocketIOTransport:
    """Per-connection sends over the /ws namespace."""

    def __init__(self, sio, namespace=WS_NAMESPACE):
        self.sio = sio
        self.namespace = namespace

    def is_ready(self, sid):
        return self.sio.server.manager.is_connected(sid, self.namespace)

    def send(self, sid, packet):
        self.sio.send(packet, to=sid, namespace=self.namespace)


def run_tick_loop(game, transport, period):
    logger.info('Tick loop started, period %.3fs', period)
    while True:
        started = time.monotonic()
        try:
            game.tick(transport)
        except Exception:
            logger.exception('Tick %s failed', game.ticks)
        socketio.sleep(max(0.0, period - (time.monotonic() - started)))


def _game():
    return current_app.extensions['pong']


# Socket events
@socketio.on('connect', namespace=WS_NAMESPACE)
def handle_connect(auth=None):
    side = _game().connect(request.sid)
    send(json.dumps({'type': 'assignment', 'side': side or SPECTATOR}))


@socketio.on('disconnect', namespace=WS_NAMESPACE)
def handle_disconnect(reason=None):
    _game().disconnect(request.sid)


@socketio.on('message', namespace=WS_NAMESPACE)
def handle_message(data):
    _game().handle_message(request.sid, data)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    origins = app.config['CORS_ALLOWED_ORIGINS']
    if origins != '*':
        origins = [o.strip() for o in origins.split(',') if o.strip()]
    socketio.init_app(app, cors_allowed_origins=origins)

    game = PongGame(
        policy=get_policy(app.config['SIDE_POLICY']),
        rng=random.Random(app.config.get('RANDOM_SEED')),
    )
    app.extensions['pong'] = game

    @app.route('/')
    def index():
        return render_template('index.html')

    if app.config.get('START_TICK_LOOP'):
        socketio.start_background_task(
            run_tick_loop, game, SocketIOTransport(socketio), app.config['TICK_MS'] / 1000.0
        )
    return app


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    try:
        app = create_app()
        host, port = app.config['HOST'], app.config['PORT']
        logger.info('Pong server running on http://%s:%s', host, port)
        logger.info('WebSocket endpoint: ws://%s:%s%s', host, port, WS_NAMESPACE)
        socketio.run(app, host=host, port=port, allow_unsafe_werkzeug=True)
    except (OSError, ValueError) as exc:
        logger.error('Error starting server: %s', exc)
        sys.exit(1)


if __name__ == '__main__':
    main()
