import pytest

import server


@pytest.fixture(autouse=True)
def _clean_sessions():
    server.sessions.clear()
    yield
    server.sessions.clear()


@pytest.fixture()
def started_loops(monkeypatch):
    """Replace the background game loop; tests drive ticks themselves."""
    started = []
    monkeypatch.setattr(server, 'start_loop', started.append)
    return started


@pytest.fixture()
def client(started_loops):
    c = server.socketio.test_client(server.app)
    yield c
    if c.is_connected():
        c.disconnect()


@pytest.fixture()
def geometry_payload():
    return {
        'playground': {'width': 300, 'height': 200},
        'racket': {'left': 100, 'top': 190, 'width': 70, 'height': 10},
        'ball': {'height': 10},
    }
