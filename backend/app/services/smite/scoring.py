from typing import Iterable, List

# A smite landing at or below this HP kills the monster
SMITE_TARGET_HP = 1200


def score_for(hp: float) -> float:
    """Distance from the smite target; 0 is a perfect smite, lower is better."""
    return abs(SMITE_TARGET_HP - hp)


def is_successful_smite(hp: float) -> bool:
    return hp <= SMITE_TARGET_HP


def rank_best_scores(hps: Iterable[float], limit: int = 5) -> List[float]:
    """Keep successful smite HPs, closest to the target first, at most ``limit``.

    ``sorted`` is stable, so ties keep their insertion order.
    """
    kept = [hp for hp in hps if is_successful_smite(hp)]
    kept.sort(key=score_for)
    return kept[:max(0, limit)]
