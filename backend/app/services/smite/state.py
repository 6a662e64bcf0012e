from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .difficulty import DifficultyProfile
from .scoring import is_successful_smite, score_for

MAX_HP = 5000


class OutcomeReason(str, Enum):
    DIED = 'died'
    BELOW_THRESHOLD = 'below_threshold'
    TOO_EARLY = 'too_early'
    SMITED = 'smited'


@dataclass(frozen=True)
class RunOutcome:
    success: bool
    reason: OutcomeReason
    hp: float
    score: float
    difficulty: str
    fail_threshold: float = 0

    @classmethod
    def from_smite(cls, hp: float, profile: DifficultyProfile) -> 'RunOutcome':
        success = is_successful_smite(hp)
        return cls(
            success=success,
            reason=OutcomeReason.SMITED if success else OutcomeReason.TOO_EARLY,
            hp=hp,
            score=score_for(hp),
            difficulty=profile.name,
            fail_threshold=profile.fail_threshold,
        )

    @classmethod
    def from_decay(cls, reason: OutcomeReason, hp: float, profile: DifficultyProfile) -> 'RunOutcome':
        return cls(
            success=False,
            reason=reason,
            hp=hp,
            score=score_for(hp),
            difficulty=profile.name,
            fail_threshold=profile.fail_threshold,
        )

    def message(self) -> str:
        if self.reason is OutcomeReason.SMITED:
            return f"You smited at {round(self.hp)} HP!"
        if self.reason is OutcomeReason.DIED:
            return 'Baron Nashor died before you could smite!'
        if self.reason is OutcomeReason.BELOW_THRESHOLD:
            return f"HP dropped below {self.fail_threshold:g}! You must smite before this happens."
        return f"You smited at {round(self.hp)} HP (too early!)"

    def to_dict(self):
        return {
            'success': self.success,
            'reason': self.reason.value,
            'hp': self.hp,
            'score': self.score,
            'difficulty': self.difficulty,
            'message': self.message(),
        }


@dataclass
class RunState:
    """Mutable state of a single run.

    ``run_id`` identifies the run within its session; scheduled callbacks
    carry the id they were created for and must match it before acting.
    """
    run_id: int
    profile: DifficultyProfile
    monster_hp: float = MAX_HP
    max_hp: float = MAX_HP
    active: bool = True
    hovering: bool = False
    smite_pending: bool = False
    outcome: Optional[RunOutcome] = field(default=None)

    @property
    def difficulty(self) -> str:
        return self.profile.name

    def apply_damage(self, amount: float) -> float:
        self.monster_hp = min(self.max_hp, max(0, self.monster_hp - amount))
        return self.monster_hp

    def finish(self, outcome: RunOutcome) -> bool:
        """Deactivate the run and record ``outcome`` if none was reported yet.

        Returns False when another terminal event already ended the run.
        """
        self.active = False
        if self.outcome is not None:
            return False
        self.outcome = outcome
        return True

    def to_dict(self):
        return {
            'run_id': self.run_id,
            'difficulty': self.difficulty,
            'monster_hp': self.monster_hp,
            'max_hp': self.max_hp,
            'active': self.active,
            'hovering': self.hovering,
            'smite_pending': self.smite_pending,
            'outcome': self.outcome.to_dict() if self.outcome else None,
        }
