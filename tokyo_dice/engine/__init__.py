"""
Tokyo Dice Decision Engine.

Pure Python decision logic with zero UI/storage dependencies.
Scores dice, tracks set-completion odds, and decides what to keep.
"""

from tokyo_dice.engine.ai_engine import DiceDecisionEngine, RollAnalysis, create_engine
from tokyo_dice.engine.base import (
    Decision,
    DecisionAction,
    DiceEvaluation,
    DieResult,
    Face,
    GamePhase,
    GameStateSnapshot,
    Goal,
    Opportunity,
    OpportunityType,
    Personality,
    PlayerSnapshot,
    SetCompletion,
    Situation,
    Threat,
)
from tokyo_dice.engine.validators import InvalidInputError

__all__ = [
    # Data Classes
    "Decision",
    "DiceEvaluation",
    "DieResult",
    "GameStateSnapshot",
    "Goal",
    "Opportunity",
    "Personality",
    "PlayerSnapshot",
    "RollAnalysis",
    "SetCompletion",
    "Situation",
    "Threat",
    # Enums
    "DecisionAction",
    "Face",
    "GamePhase",
    "OpportunityType",
    # Engine
    "DiceDecisionEngine",
    "create_engine",
    # Errors
    "InvalidInputError",
]
