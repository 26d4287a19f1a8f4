"""One tick of the Pong simulation.

Everything here is pure: the caller passes the current game, the geometry
read from the page and gets a new game back. The loop driver in server.py
owns the single long-lived instance and threads it through successive calls.
"""
from dataclasses import dataclass, replace

from models import RACKET_STEP, Keys, Pong, Status


@dataclass(frozen=True)
class StepResult:
    pong: Pong
    racket_left: int
    hit: bool = False


def next_position(current_position, speed, direction):
    return current_position + speed * direction


def move_ball_direction(position, speed, direction, limit):
    """Resolve the direction on one axis, bouncing off 0 and ``limit``."""
    next_pos = next_position(position, speed, direction)
    if next_pos > limit:
        direction = -1
    if next_pos < 0:
        direction = 1
    return direction


def move_ball_position(ball, direction):
    return ball.speed * direction


def change_ball_position(ball, direction_x, position_x, direction_y, position_y):
    return replace(
        ball,
        direction_x=direction_x,
        direction_y=direction_y,
        x=ball.x + position_x,
        y=ball.y + position_y,
    )


def move_racket(racket, pressed_keys, step=RACKET_STEP):
    # Left wins when both keys are held; the racket is not kept inside the playground
    if Keys.LEFT.value in pressed_keys:
        return racket.left - step
    elif Keys.RIGHT.value in pressed_keys:
        return racket.left + step
    return racket.left


def racket_position_y(racket, ball_height):
    # Subtracting the ball size to avoid passing through the racket
    return racket.top - ball_height


def is_racket_hit(racket, racket_left, ball_height, ball):
    pos_x = next_position(ball.x, ball.speed, ball.direction_x)
    pos_y = next_position(ball.y, ball.speed, ball.direction_y)
    racket_border_left = racket_left
    racket_border_right = racket_border_left + racket.width
    return (
        racket_border_left <= pos_x <= racket_border_right
        and pos_y >= racket_position_y(racket, ball_height)
    )


def compute_score(score, hit):
    if hit:
        return score + 1
    return score


def change_direction_y(ball, hit):
    if hit:
        return replace(ball, direction_y=-1)
    return ball


def is_game_over(racket, ball_height, ball):
    # Looks ahead from the already moved ball, past the racket's own height
    pos_y = next_position(ball.y, ball.speed, ball.direction_y) - racket.height
    return pos_y > racket_position_y(racket, ball_height)


def step(pong, playground, racket, ball_height):
    """Advance the game by one tick.

    Only a running game moves. The two look-ahead computations (racket hit
    and game over) are deliberately separate: the hit fires one tick before
    the ball would pass the racket, game over fires when the ball is about to
    overshoot it.
    """
    if not pong.is_running():
        return StepResult(pong=pong, racket_left=racket.left)

    ball = pong.ball
    direction_x = move_ball_direction(ball.x, ball.speed, ball.direction_x, playground.width)
    direction_y = move_ball_direction(ball.y, ball.speed, ball.direction_y, playground.height)
    pos_x = move_ball_position(ball, direction_x)
    pos_y = move_ball_position(ball, direction_y)
    ball = change_ball_position(ball, direction_x, pos_x, direction_y, pos_y)

    racket_left = move_racket(racket, pong.pressed_keys)

    hit = is_racket_hit(racket, racket_left, ball_height, ball)
    score = compute_score(pong.score, hit)
    ball = change_direction_y(ball, hit)

    status = pong.status
    if is_game_over(racket, ball_height, ball):
        status = Status.GAMEOVER

    pong = replace(pong, ball=ball, score=score, status=status)
    return StepResult(pong=pong, racket_left=racket_left, hit=hit)
