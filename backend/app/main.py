from flask import Blueprint, jsonify
from app.services.smite import DIFFICULTIES, MAX_HP
from app.services.smite.scoring import SMITE_TARGET_HP

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Smite Trainer server!'})

@main.route('/difficulties')
def list_difficulties():
    return jsonify({
        'max_hp': MAX_HP,
        'target_hp': SMITE_TARGET_HP,
        'difficulties': [profile.to_dict() for profile in DIFFICULTIES.values()],
    })
