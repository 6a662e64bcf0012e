from app import db
import time
from app.services.smite.scoring import score_for


class Preferences(db.Model):
    """Single-row table holding the player's input settings."""
    __tablename__ = 'preferences'
    id = db.Column(db.Integer, primary_key=True)
    latency_ms = db.Column(db.Integer, nullable=False, default=1)
    smite_key = db.Column(db.String(16), nullable=False, default='F')

    def to_dict(self):
        return {
            'latency_ms': self.latency_ms,
            'smite_key': self.smite_key,
        }


class BestScore(db.Model):
    __tablename__ = 'best_score'
    id = db.Column(db.Integer, primary_key=True)
    difficulty = db.Column(db.String(16), nullable=False, index=True)
    hp = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.Float, nullable=False, default=time.time)

    @property
    def distance(self):
        return score_for(self.hp)

    def to_dict(self):
        return {
            'id': self.id,
            'difficulty': self.difficulty,
            'hp': self.hp,
            'score': self.distance,
        }
