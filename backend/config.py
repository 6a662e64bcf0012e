import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///smite.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
    ).split(',') if o.strip()]
    # Simulated input lag applied to every smite (milliseconds)
    DEFAULT_LATENCY_MS = int(os.environ.get('DEFAULT_LATENCY_MS', '1'))
    MAX_LATENCY_MS = int(os.environ.get('MAX_LATENCY_MS', '1000'))
    DEFAULT_SMITE_KEY = os.environ.get('DEFAULT_SMITE_KEY', 'F')
    BEST_SCORES_LIMIT = int(os.environ.get('BEST_SCORES_LIMIT', '5'))
    # 'socketio' runs timers as background tasks; 'manual' needs explicit advance()
    SMITE_TIMELINE = os.environ.get('SMITE_TIMELINE', 'socketio')
    # Optional: fixed seed for decay randomness. Unset uses system entropy.
    SMITE_RNG_SEED = int(os.environ['SMITE_RNG_SEED']) if os.environ.get('SMITE_RNG_SEED') else None
