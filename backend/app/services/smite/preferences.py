import threading
from typing import List, Optional

from app import db
from app.models import BestScore, Preferences
from .difficulty import DIFFICULTIES, get_profile
from .scoring import is_successful_smite, rank_best_scores


class InvalidPreference(ValueError):
    pass


# Keys that navigate dialogs and cannot be bound to smite
RESERVED_KEYS = {'ESCAPE', 'ENTER'}

# Serializes creation of the single preferences row
_row_lock = threading.Lock()

# A smite never lands in the same instant it is requested
MIN_LATENCY_MS = 1


class PreferencesStore:
    """Latency, smite key and best scores persisted through SQLAlchemy.

    Every call opens its own app context so the store can be used from
    Socket.IO background tasks as well as from request handlers.
    """

    def __init__(self, app):
        self.app = app

    @property
    def _limit(self) -> int:
        return int(self.app.config.get('BEST_SCORES_LIMIT', 5))

    def _row(self) -> Preferences:
        with _row_lock:
            prefs = Preferences.query.order_by(Preferences.id).first()
            if prefs is None:
                prefs = Preferences(
                    latency_ms=self.validate_latency(self.app.config.get('DEFAULT_LATENCY_MS', 1)),
                    smite_key=self.validate_smite_key(self.app.config.get('DEFAULT_SMITE_KEY', 'F')),
                )
                db.session.add(prefs)
                db.session.commit()
                db.session.refresh(prefs)
            return prefs

    def to_dict(self) -> dict:
        with self.app.app_context():
            return self._row().to_dict()

    def get_latency(self) -> int:
        with self.app.app_context():
            return self._row().latency_ms

    def get_smite_key(self) -> str:
        with self.app.app_context():
            return self._row().smite_key

    def update(self, latency_ms: Optional[int] = None, smite_key: Optional[str] = None) -> dict:
        """Validate and save whichever settings are given; returns the saved values."""
        if latency_ms is not None:
            latency_ms = self.validate_latency(latency_ms)
        if smite_key is not None:
            smite_key = self.validate_smite_key(smite_key)
        with self.app.app_context():
            prefs = self._row()
            if latency_ms is not None:
                prefs.latency_ms = latency_ms
            if smite_key is not None:
                prefs.smite_key = smite_key
            db.session.add(prefs)
            db.session.commit()
            self.app.logger.info(f"[prefs-update] latency={prefs.latency_ms}ms key={prefs.smite_key}")
            return prefs.to_dict()

    def validate_latency(self, value) -> int:
        if isinstance(value, bool):
            raise InvalidPreference('latency_ms must be an integer')
        try:
            latency = int(value)
        except (TypeError, ValueError):
            raise InvalidPreference('latency_ms must be an integer') from None
        max_latency = int(self.app.config.get('MAX_LATENCY_MS', 1000))
        if latency < MIN_LATENCY_MS or latency > max_latency:
            raise InvalidPreference(f'latency_ms must be between {MIN_LATENCY_MS} and {max_latency}')
        return latency

    @staticmethod
    def validate_smite_key(value) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidPreference('smite_key must be a non-empty key name')
        key = value.strip().upper()
        if key in RESERVED_KEYS:
            raise InvalidPreference(f'{value} cannot be used as the smite key')
        if len(key) > 16:
            raise InvalidPreference('smite_key is too long')
        return key

    def get_best_scores(self, difficulty: str) -> List[float]:
        tier = get_profile(difficulty).name
        with self.app.app_context():
            rows = BestScore.query.filter_by(difficulty=tier).order_by(BestScore.id).all()
            return rank_best_scores([r.hp for r in rows], self._limit)

    def add_best_score(self, difficulty: str, hp: float) -> bool:
        """Record a successful smite HP; failed smites are not kept."""
        tier = get_profile(difficulty).name
        if not is_successful_smite(hp):
            return False
        with self.app.app_context():
            entry = BestScore(difficulty=tier, hp=float(hp))
            db.session.add(entry)
            db.session.flush()
            rows = BestScore.query.filter_by(difficulty=tier).order_by(BestScore.id).all()
            ranked = sorted(rows, key=lambda r: r.distance)
            kept = any(row is entry for row in ranked[:self._limit])
            for row in ranked[self._limit:]:
                db.session.delete(row)
            db.session.commit()
            return kept

    def reset_all_scores(self) -> None:
        with self.app.app_context():
            deleted = BestScore.query.filter(BestScore.difficulty.in_(list(DIFFICULTIES))).delete(
                synchronize_session=False
            )
            db.session.commit()
            self.app.logger.info(f"[scores-reset] deleted={deleted}")
