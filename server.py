import logging
import os
import threading
import time
from dataclasses import replace

from flask import Flask, render_template, request
from flask_socketio import SocketIO, emit

from game import step
from models import GeometryError, Pong, parse_geometry, press_key, release_key

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('PONG_SECRET_KEY', 'your-secret-key')
socketio = SocketIO(
    app,
    engineio_logger=os.environ.get('PONG_ENGINEIO_LOGGER') == '1',
    ping_timeout=60,
    ping_interval=25,
)

HOST = os.environ.get('PONG_HOST', '0.0.0.0')
PORT = int(os.environ.get('PONG_PORT', '5000'))

# Session management
sessions = {}  # {socket_id: session}


def create_session(sid):
    sessions[sid] = {
        'lock': threading.Lock(),
        'thread': None,
        'pong': Pong(),
        # Reported by the page, racket left is written back every tick
        'playground': None,
        'racket': None,
        'ball_height': None,
    }
    return sessions[sid]


def remove_session(sid):
    # A running loop notices the missing session and stops
    sessions.pop(sid, None)


def read_key(data):
    key = data.get('key') if isinstance(data, dict) else None
    if isinstance(key, bool) or not isinstance(key, int):
        return None
    return key


def tick(sid):
    """Run one simulation step for a session and push the result to its page.

    Returns the StepResult, or None when the session is gone or the page has
    not reported its geometry yet.
    """
    session = sessions.get(sid)
    if not session:
        return None

    with session['lock']:
        if session['racket'] is None:
            return None

        was_running = session['pong'].is_running()
        result = step(
            session['pong'],
            session['playground'],
            session['racket'],
            session['ball_height'],
        )
        session['pong'] = result.pong
        session['racket'] = replace(session['racket'], left=result.racket_left)

    socketio.emit('game_update', {
        'state': result.pong.to_dict(),
        'racket': {'left': result.racket_left},
        'hit': result.hit,
    }, to=sid)

    if was_running and result.pong.is_game_over():
        logger.info("Game over for %s with score %d", sid, result.pong.score)
        socketio.emit('game_over', {'score': result.pong.score}, to=sid)

    return result


# Game loop
def game_loop(sid):
    logger.info("Game loop start for session: %s", sid)
    while True:
        session = sessions.get(sid)
        if not session or not session['pong'].is_running():
            break
        tick(sid)
        time.sleep(session['pong'].loop_interval / 1000)
    logger.info("Game loop end for session: %s", sid)


def start_loop(sid):
    session = sessions[sid]
    session['thread'] = threading.Thread(
        target=game_loop,
        args=(sid,),
        daemon=True
    )
    session['thread'].start()


# Socket events
@socketio.on('connect')
def handle_connect():
    logger.info("Client connected: %s", request.sid)
    session = create_session(request.sid)
    emit('connected', {'sid': request.sid, 'state': session['pong'].to_dict()})


@socketio.on('disconnect')
def handle_disconnect():
    logger.info("Client disconnected: %s", request.sid)
    remove_session(request.sid)


@socketio.on('geometry')
def handle_geometry(data):
    session = sessions.get(request.sid)
    if not session:
        logger.warning("Geometry from unknown session: %s", request.sid)
        return

    try:
        playground, racket, ball_height = parse_geometry(data)
    except GeometryError as e:
        logger.warning("Rejected geometry from %s: %s", request.sid, e)
        emit('pong_error', {'error': str(e)})
        return

    with session['lock']:
        session['playground'] = playground
        session['racket'] = racket
        session['ball_height'] = ball_height


@socketio.on('keydown')
def handle_keydown(data):
    session = sessions.get(request.sid)
    if not session:
        logger.warning("Key from unknown session: %s", request.sid)
        return

    key = read_key(data)
    if key is None:
        logger.debug("Ignoring malformed key payload: %r", data)
        return

    with session['lock']:
        was_stopped = session['pong'].is_stopped()
        session['pong'] = press_key(session['pong'], key)
        started = was_stopped and session['pong'].is_running()

    if started:
        logger.info("Starting game for session: %s", request.sid)
        emit('game_started')
        start_loop(request.sid)


@socketio.on('keyup')
def handle_keyup(data):
    session = sessions.get(request.sid)
    if not session:
        return

    key = read_key(data)
    if key is None:
        logger.debug("Ignoring malformed key payload: %r", data)
        return

    with session['lock']:
        session['pong'] = release_key(session['pong'], key)


@socketio.on('restart')
def handle_restart():
    session = sessions.get(request.sid)
    if not session or not session['pong'].is_game_over():
        return

    logger.info("Restarting game for session: %s", request.sid)
    with session['lock']:
        session['pong'] = Pong()
        # The page puts the racket back where it started and reports it again
        session['racket'] = None
    emit('game_reset', {'state': session['pong'].to_dict()})


@app.route('/')
def index():
    return render_template('index.html')


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    logger.info("starting pong game...")
    socketio.run(app, host=HOST, port=PORT, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
