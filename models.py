from dataclasses import dataclass, field, replace
from enum import Enum

# Game constants
BALL_SPEED = 5
BALL_START_X = 135
BALL_START_Y = 100
RACKET_STEP = 5
LOOP_INTERVAL = 16  # ms


class Status(Enum):
    STOPPED = 'stopped'
    RUNNING = 'running'
    GAMEOVER = 'gameover'


class Keys(Enum):
    LEFT = 37
    RIGHT = 39


class GeometryError(ValueError):
    pass


@dataclass(frozen=True)
class Ball:
    speed: int = BALL_SPEED
    x: int = BALL_START_X
    y: int = BALL_START_Y
    direction_x: int = -1  # -1 | 1
    direction_y: int = -1  # -1 | 1

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'speed': self.speed,
            'direction_x': self.direction_x,
            'direction_y': self.direction_y,
        }


@dataclass(frozen=True)
class Pong:
    status: Status = Status.STOPPED
    ball: Ball = field(default_factory=Ball)
    score: int = 0
    loop_interval: int = LOOP_INTERVAL
    pressed_keys: frozenset = frozenset()

    def is_running(self):
        return self.status == Status.RUNNING

    def is_stopped(self):
        return self.status == Status.STOPPED

    def is_game_over(self):
        return self.status == Status.GAMEOVER

    def to_dict(self):
        # What should be sent to the client
        return {
            'status': self.status.value,
            'ball': self.ball.to_dict(),
            'score': self.score,
        }


@dataclass(frozen=True)
class Playground:
    width: int
    height: int


@dataclass(frozen=True)
class Racket:
    left: int
    top: int
    width: int
    height: int


def press_key(pong, code):
    """Hold a key down. The first key press starts a stopped game."""
    pong = replace(pong, pressed_keys=pong.pressed_keys | {code})
    if pong.is_stopped():
        pong = replace(pong, status=Status.RUNNING)
    return pong


def release_key(pong, code):
    return replace(pong, pressed_keys=pong.pressed_keys - {code})


def _read_int(data, section, name):
    try:
        value = data[section][name]
    except (KeyError, TypeError):
        raise GeometryError(f"Missing {section}.{name}")
    # bool is an int subclass, a checkbox value is not a size
    if isinstance(value, bool) or not isinstance(value, int):
        raise GeometryError(f"{section}.{name} must be an integer, got {value!r}")
    return value


def parse_geometry(data):
    """Read the geometry payload reported by the browser.

    Expected shape::

        {
            'playground': {'width': 300, 'height': 200},
            'racket': {'left': 100, 'top': 190, 'width': 70, 'height': 10},
            'ball': {'height': 10},
        }

    Returns a ``(Playground, Racket, ball_height)`` tuple.
    Raises GeometryError on missing fields or sizes the step cannot work with.
    """
    playground = Playground(
        width=_read_int(data, 'playground', 'width'),
        height=_read_int(data, 'playground', 'height'),
    )
    racket = Racket(
        left=_read_int(data, 'racket', 'left'),
        top=_read_int(data, 'racket', 'top'),
        width=_read_int(data, 'racket', 'width'),
        height=_read_int(data, 'racket', 'height'),
    )
    ball_height = _read_int(data, 'ball', 'height')

    if playground.width <= 0 or playground.height <= 0:
        raise GeometryError("Playground must have a positive width and height")
    if racket.width < 0:
        raise GeometryError("Racket width can't be negative")
    if ball_height < 0:
        raise GeometryError("Ball height can't be negative")

    return playground, racket, ball_height
