"""Game logic."""

from .capture import CaptureEvent, CaptureResolver, CaptureResult, CaptureSource
from .dealer import Deal, deal
from .engine import GameEngine, TurnOutcome
from .go import can_declare_go, final_score
from .scoring import ScoreBreakdown, ScoreCalculator, score
from .validator import MoveValidator, ValidationResult

__all__ = [
    "CaptureEvent",
    "CaptureResolver",
    "CaptureResult",
    "CaptureSource",
    "Deal",
    "deal",
    "GameEngine",
    "TurnOutcome",
    "can_declare_go",
    "final_score",
    "ScoreBreakdown",
    "ScoreCalculator",
    "score",
    "MoveValidator",
    "ValidationResult",
]
