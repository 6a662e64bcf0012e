from dataclasses import dataclass, asdict
from typing import Dict, Tuple


class UnknownDifficulty(ValueError):
    """Raised when a run is requested for a tier outside the rule table."""


@dataclass(frozen=True)
class DifficultyProfile:
    """Decay rules for one difficulty tier.

    Zero disables a threshold: ``fail_threshold == 0`` never fails early and
    ``speed_increase_threshold == 0`` never speeds the decay up.
    """
    name: str
    fail_threshold: float = 0
    speed_increase_threshold: float = 0
    big_damage_chance: float = 0.0
    big_damage_min_hp: float = 0

    @property
    def fast_delay_range(self) -> Tuple[float, float]:
        return FAST_DELAY_RANGES.get(self.name, DEFAULT_FAST_DELAY_RANGE)

    def to_dict(self):
        data = asdict(self)
        data['fast_delay_range'] = list(self.fast_delay_range)
        return data


# Decay interval (ms) once HP is under speed_increase_threshold
FAST_DELAY_RANGES: Dict[str, Tuple[float, float]] = {
    'normal': (100, 300),
    'hard': (75, 225),
}
DEFAULT_FAST_DELAY_RANGE = (50, 200)

DIFFICULTIES: Dict[str, DifficultyProfile] = {
    'easy': DifficultyProfile('easy'),
    'normal': DifficultyProfile(
        'normal',
        fail_threshold=1000,
        speed_increase_threshold=2000,
    ),
    'hard': DifficultyProfile(
        'hard',
        fail_threshold=1000,
        speed_increase_threshold=2000,
        big_damage_chance=0.2,
        big_damage_min_hp=1400,
    ),
}


def get_profile(difficulty: str) -> DifficultyProfile:
    if not isinstance(difficulty, str):
        raise UnknownDifficulty(f"Unknown difficulty: {difficulty!r}")
    try:
        return DIFFICULTIES[difficulty.lower()]
    except KeyError:
        raise UnknownDifficulty(f"Unknown difficulty: {difficulty!r}") from None
