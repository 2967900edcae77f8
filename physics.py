"""
One physics step of the ball: move, bounce, paddle hits, scoring.

Collision is checked per tick on discrete positions, so a ball moving
faster than a paddle is wide can pass straight through it.
"""

import random

from config import (
    BALL_RADIUS, BALL_RESET_VY_RANGE, BALL_SPEED, CANVAS_HEIGHT, CANVAS_WIDTH,
    PADDLE_HEIGHT, PADDLE_MAX_Y, PADDLE_OFFSET, PADDLE_WIDTH, SPIN_FACTOR,
)


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def clamp_paddle(y):
    # clamp before float() so huge ints never overflow
    return float(clamp(y, 0, PADDLE_MAX_Y))


def reset_ball(state, rng=random):
    ball = state.ball
    ball['x'] = CANVAS_WIDTH / 2
    ball['y'] = CANVAS_HEIGHT / 2
    ball['vx'] = (1 if rng.random() > 0.5 else -1) * BALL_SPEED
    ball['vy'] = (rng.random() - 0.5) * BALL_RESET_VY_RANGE


def _spin(ball, paddle_y):
    # -1 at the top edge, 0 at the center, +1 at the bottom edge
    hit_pos = (ball['y'] - paddle_y - PADDLE_HEIGHT / 2) / (PADDLE_HEIGHT / 2)
    return hit_pos * SPIN_FACTOR


def _within_paddle(ball, paddle_y):
    return paddle_y <= ball['y'] <= paddle_y + PADDLE_HEIGHT


def step(state, rng=random):
    """Advance the state by one tick, in place. Returns the side that scored, if any."""
    ball = state.ball

    ball['x'] += ball['vx']
    ball['y'] += ball['vy']

    # Top/bottom walls
    if ball['y'] - BALL_RADIUS < 0 or ball['y'] + BALL_RADIUS > CANVAS_HEIGHT:
        ball['vy'] *= -1

    left_y = state.paddles['left']['y']
    if (ball['x'] - BALL_RADIUS <= PADDLE_OFFSET + PADDLE_WIDTH
            and _within_paddle(ball, left_y)
            and ball['vx'] < 0):
        ball['vx'] *= -1
        ball['vy'] += _spin(ball, left_y)

    right_y = state.paddles['right']['y']
    if (ball['x'] + BALL_RADIUS >= CANVAS_WIDTH - PADDLE_OFFSET - PADDLE_WIDTH
            and _within_paddle(ball, right_y)
            and ball['vx'] > 0):
        ball['vx'] *= -1
        ball['vy'] += _spin(ball, right_y)

    scorer = None
    if ball['x'] < 0:
        scorer = 'right'
    elif ball['x'] > CANVAS_WIDTH:
        scorer = 'left'

    if scorer:
        state.score[scorer] += 1
        reset_ball(state, rng)
    return scorer
