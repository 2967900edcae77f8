from config import BALL_SPEED, CANVAS_HEIGHT, CANVAS_WIDTH, PADDLE_MAX_Y


class GameState:
    def __init__(self):
        self.ball = {'x': CANVAS_WIDTH / 2, 'y': CANVAS_HEIGHT / 2, 'vx': BALL_SPEED, 'vy': 2}
        self.paddles = {
            'left': {'y': PADDLE_MAX_Y / 2},
            'right': {'y': PADDLE_MAX_Y / 2},
        }
        self.score = {'left': 0, 'right': 0}

    def to_dict(self):
        """Copy of the state in the wire shape of a snapshot."""
        return {
            'ball': dict(self.ball),
            'paddles': {side: dict(paddle) for side, paddle in self.paddles.items()},
            'score': dict(self.score),
        }


class Connection:
    def __init__(self, sid, seq):
        self.sid = sid
        self.seq = seq  # order of arrival, unique per process
