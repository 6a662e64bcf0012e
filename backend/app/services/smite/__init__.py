"""Smite domain services: decay scheduling, smite resolution and scoring.

This package contains the game engine that HTTP routes and socket handlers
drive, keeping transport and persistence concerns separated from the
timing mechanics.
"""

from .difficulty import DIFFICULTIES, DifficultyProfile, UnknownDifficulty, get_profile
from .game import SmiteGame
from .hooks import GameHooks
from .state import MAX_HP, OutcomeReason, RunOutcome, RunState
from .timeline import ManualTimeline, SocketIOTimeline

__all__ = [
    'DIFFICULTIES',
    'DifficultyProfile',
    'GameHooks',
    'MAX_HP',
    'ManualTimeline',
    'OutcomeReason',
    'RunOutcome',
    'RunState',
    'SmiteGame',
    'SocketIOTimeline',
    'UnknownDifficulty',
    'get_profile',
]
