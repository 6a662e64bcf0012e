from flask_socketio import join_room, leave_room, emit
from app import socketio
from flask import current_app, request
from app.services.smite.registry import discard_session, get_session
from typing import Dict, Any
import time


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # If this socket owned a run and no other owner remains, end the session
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    run_code = ctx.get('run_code')
    if ctx.get('is_session_owner') and run_code:
        _owner_count[run_code] = max(0, _owner_count.get(run_code, 0) - 1)
        # In tests, end immediately for determinism; in prod, allow grace period
        if current_app and current_app.config.get('TESTING'):
            if _owner_count.get(run_code, 0) == 0:
                _end_session(run_code)
            return
        _schedule_end_if_no_owner(run_code)


def _run_code_from(data):
    run_code = data.get('run_code') if isinstance(data, dict) else None
    if not run_code or not isinstance(run_code, str):
        emit('error', {'message': 'run_code is required'})
        return None
    return run_code.upper()


def handle_join_run(data):
    run_code = _run_code_from(data)
    if not run_code:
        return
    if get_session(run_code) is None:
        emit('error', {'message': 'Run not found'})
        return
    is_session_owner = data.get('is_session_owner') is True
    room = f"run:{run_code}"
    join_room(room)
    _sid_to_ctx[_get_sid()] = {'run_code': run_code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[run_code] = _owner_count.get(run_code, 0) + 1
        _cancel_scheduled_end(run_code)
    emit('joined', {'room': room})


def handle_leave_run(data):
    run_code = _run_code_from(data)
    if not run_code:
        return
    room = f"run:{run_code}"
    leave_room(room)
    emit('left', {'room': room})
    # Explicit quit by the owner ends the session immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('run_code') == run_code:
        _sid_to_ctx.pop(_get_sid(), None)
        if ctx.get('is_session_owner'):
            _end_session(run_code)


def handle_hover(data):
    run_code = _run_code_from(data)
    if not run_code:
        return
    game = get_session(run_code)
    if game is None:
        emit('error', {'message': 'Run not found'})
        return
    hovering = data.get('hovering')
    if not isinstance(hovering, bool):
        emit('error', {'message': 'hovering must be true or false'})
        return
    game.set_hovering(hovering)


def handle_smite(data):
    run_code = _run_code_from(data)
    if not run_code:
        return
    game = get_session(run_code)
    if game is None:
        emit('error', {'message': 'Run not found'})
        return
    emit('smite_ack', {'run_code': run_code, 'scheduled': game.request_smite()})


def handle_ping(data=None):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _end_session(run_code: str) -> None:
    """End the session: notify clients and drop the run from the registry."""
    # Use socketio.emit since this may be called from a background task
    socketio.emit('session_ended', {'run_code': run_code}, to=f"run:{run_code}", namespace='/ws')
    discard_session(run_code)
    _owner_count.pop(run_code, None)
    _end_deadline.pop(run_code, None)

def _schedule_end_if_no_owner(run_code: str, delay_sec: float = 2.0) -> None:
    if _owner_count.get(run_code, 0) > 0:
        return
    _end_deadline[run_code] = time.time() + delay_sec

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            _end_session(code)

    socketio.start_background_task(_runner, run_code, _end_deadline[run_code])

def _cancel_scheduled_end(run_code: str) -> None:
    _end_deadline.pop(run_code, None)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join_run': handle_join_run,
        'leave_run': handle_leave_run,
        'hover': handle_hover,
        'smite': handle_smite,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
