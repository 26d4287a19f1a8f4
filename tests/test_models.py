import pytest

from models import (
    GeometryError,
    Keys,
    Playground,
    Pong,
    Racket,
    Status,
    parse_geometry,
    press_key,
    release_key,
)


def geometry(**overrides):
    data = {
        'playground': {'width': 300, 'height': 200},
        'racket': {'left': 100, 'top': 190, 'width': 70, 'height': 10},
        'ball': {'height': 10},
    }
    for section, values in overrides.items():
        data[section] = {**data[section], **values}
    return data


def test_new_game_defaults():
    pong = Pong()

    assert pong.is_stopped()
    assert pong.score == 0
    assert pong.loop_interval == 16
    assert pong.pressed_keys == frozenset()
    assert (pong.ball.x, pong.ball.y, pong.ball.speed) == (135, 100, 5)
    assert (pong.ball.direction_x, pong.ball.direction_y) == (-1, -1)


def test_any_key_starts_a_stopped_game():
    pong = press_key(Pong(), 65)

    assert pong.is_running()
    assert pong.pressed_keys == {65}


def test_press_key_keeps_a_running_game_running():
    pong = press_key(press_key(Pong(), Keys.LEFT.value), Keys.RIGHT.value)

    assert pong.is_running()
    assert pong.pressed_keys == {Keys.LEFT.value, Keys.RIGHT.value}


def test_press_key_does_not_leave_game_over():
    pong = press_key(Pong(status=Status.GAMEOVER), Keys.LEFT.value)

    assert pong.is_game_over()


def test_release_key():
    pong = press_key(Pong(), Keys.LEFT.value)

    pong = release_key(pong, Keys.LEFT.value)
    assert pong.pressed_keys == frozenset()

    # Releasing a key that is not held changes nothing
    assert release_key(pong, Keys.RIGHT.value) == pong


def test_to_dict():
    assert Pong().to_dict() == {
        'status': 'stopped',
        'ball': {'x': 135, 'y': 100, 'speed': 5, 'direction_x': -1, 'direction_y': -1},
        'score': 0,
    }


def test_parse_geometry():
    playground, racket, ball_height = parse_geometry(geometry())

    assert playground == Playground(width=300, height=200)
    assert racket == Racket(left=100, top=190, width=70, height=10)
    assert ball_height == 10


def test_parse_geometry_allows_racket_outside_the_playground():
    _, racket, _ = parse_geometry(geometry(racket={'left': -20}))

    assert racket.left == -20


def test_parse_geometry_missing_section():
    data = geometry()
    del data['ball']

    with pytest.raises(GeometryError, match='ball.height'):
        parse_geometry(data)


@pytest.mark.parametrize('data', [
    None,
    geometry(playground={'width': '300'}),
    geometry(racket={'top': 190.5}),
    geometry(ball={'height': True}),
])
def test_parse_geometry_rejects_malformed_payload(data):
    with pytest.raises(GeometryError):
        parse_geometry(data)


@pytest.mark.parametrize('overrides', [
    {'playground': {'width': 0}},
    {'playground': {'height': -1}},
    {'racket': {'width': -70}},
    {'ball': {'height': -10}},
])
def test_parse_geometry_rejects_impossible_sizes(overrides):
    with pytest.raises(GeometryError):
        parse_geometry(geometry(**overrides))


def test_geometry_error_is_a_value_error():
    assert issubclass(GeometryError, ValueError)
