from flask import Blueprint, jsonify, request, current_app
from app.services.smite import UnknownDifficulty, get_profile
from app.services.smite.preferences import InvalidPreference, PreferencesStore


settings = Blueprint('settings', __name__)


def _store():
    return PreferencesStore(current_app._get_current_object())


@settings.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(_store().to_dict())


@settings.route('/settings', methods=['PUT'])
def update_settings():
    data = request.get_json(silent=True) or {}
    if 'latency_ms' not in data and 'smite_key' not in data:
        return jsonify({'error': 'latency_ms or smite_key is required'}), 400
    try:
        saved = _store().update(
            latency_ms=data.get('latency_ms'),
            smite_key=data.get('smite_key'),
        )
    except InvalidPreference as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify(saved)


@settings.route('/scores/<string:difficulty>', methods=['GET'])
def get_best_scores(difficulty):
    try:
        tier = get_profile(difficulty).name
    except UnknownDifficulty as exc:
        return jsonify({'error': str(exc)}), 404
    scores = _store().get_best_scores(tier)
    return jsonify({
        'difficulty': tier,
        'best_scores': scores,
        'best': scores[0] if scores else None,
    })


@settings.route('/scores', methods=['DELETE'])
def reset_scores():
    _store().reset_all_scores()
    return jsonify({'message': 'All scores have been reset!'})
