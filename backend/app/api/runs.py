from flask import Blueprint, jsonify, request, current_app
from app import socketio
from app.services.smite import UnknownDifficulty
from app.services.smite.registry import create_session, discard_session, get_session


runs = Blueprint('runs', __name__)


def _session_or_404(run_code):
    game = get_session(run_code)
    if game is None:
        return None, (jsonify({'error': 'Run not found'}), 404)
    return game, None


def _state_payload(run_code, game):
    payload = game.snapshot()
    payload['run_code'] = run_code.upper()
    payload['best_scores'] = game.best_scores()
    return payload


@runs.route('', methods=['POST'])
def create_run():
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty')
    if not difficulty or not isinstance(difficulty, str):
        return jsonify({'error': 'difficulty must be one of easy, normal, hard'}), 400
    app = current_app._get_current_object()
    code, game = create_session(app, socketio)
    try:
        game.start_run(difficulty)
    except UnknownDifficulty as exc:
        discard_session(code)
        return jsonify({'error': str(exc)}), 404
    return jsonify(_state_payload(code, game)), 201


@runs.route('/<string:run_code>/state', methods=['GET'])
def get_run_state(run_code):
    game, error = _session_or_404(run_code)
    if error:
        return error
    return jsonify(_state_payload(run_code, game))


@runs.route('/<string:run_code>/start', methods=['POST'])
def start_run(run_code):
    game, error = _session_or_404(run_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty')
    if not difficulty or not isinstance(difficulty, str):
        return jsonify({'error': 'difficulty must be one of easy, normal, hard'}), 400
    try:
        game.start_run(difficulty)
    except UnknownDifficulty as exc:
        return jsonify({'error': str(exc)}), 404
    return jsonify(_state_payload(run_code, game))


@runs.route('/<string:run_code>/restart', methods=['POST'])
def restart_run(run_code):
    game, error = _session_or_404(run_code)
    if error:
        return error
    if game.difficulty is None:
        return jsonify({'error': 'No difficulty selected for this run'}), 400
    game.restart()
    return jsonify(_state_payload(run_code, game))


@runs.route('/<string:run_code>/hover', methods=['POST'])
def set_hover(run_code):
    game, error = _session_or_404(run_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    hovering = data.get('hovering')
    if not isinstance(hovering, bool):
        return jsonify({'error': 'hovering must be true or false'}), 400
    game.set_hovering(hovering)
    return jsonify({'hovering': game.hovering})


@runs.route('/<string:run_code>/smite', methods=['POST'])
def smite(run_code):
    game, error = _session_or_404(run_code)
    if error:
        return error
    # Ignored smites are part of normal play, not an error
    scheduled = game.request_smite()
    return jsonify({'scheduled': scheduled}), 202


@runs.route('/<string:run_code>', methods=['DELETE'])
def end_run(run_code):
    if not discard_session(run_code):
        return jsonify({'error': 'Run not found'}), 404
    current_app.logger.info(f"[session-end] run_code={run_code.upper()}")
    socketio.emit('session_ended', {'run_code': run_code.upper()}, to=f"run:{run_code.upper()}", namespace='/ws')
    return jsonify({'ok': True})
