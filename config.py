import os

# Game constants
CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400
PADDLE_WIDTH = 10
PADDLE_HEIGHT = 80
PADDLE_OFFSET = 20  # distance from each side wall
BALL_RADIUS = 8
BALL_SPEED = 3
BALL_RESET_VY_RANGE = 4  # reset vy is drawn from [-2, 2)
SPIN_FACTOR = 2
PADDLE_MAX_Y = CANVAS_HEIGHT - PADDLE_HEIGHT

SIDES = ('left', 'right')
TICK_MS = 16
WS_NAMESPACE = '/ws'


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'pong-dev-secret'
    HOST = os.environ.get('PONG_HOST', '127.0.0.1')
    PORT = int(os.environ.get('PONG_PORT', '3000'))
    TICK_MS = int(os.environ.get('PONG_TICK_MS', str(TICK_MS)))
    # 'overflow-to-left' (third player co-controls left) or 'spectator'
    SIDE_POLICY = os.environ.get('PONG_SIDE_POLICY', 'overflow-to-left')
    RANDOM_SEED = _optional_int('PONG_RANDOM_SEED')
    CORS_ALLOWED_ORIGINS = os.environ.get('PONG_CORS_ORIGINS', '*')
    START_TICK_LOOP = True
