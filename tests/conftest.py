"""
Tokyo Dice - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

from typing import Any, Callable

import pytest

from tokyo_dice.config.ai_config import AIConfig, default_ai_config
from tokyo_dice.engine.base import (
    DiceEvaluation,
    DieResult,
    Face,
    GameStateSnapshot,
    Personality,
    PlayerSnapshot,
)


# =============================================================================
# SNAPSHOT FACTORIES
# =============================================================================

@pytest.fixture
def make_player() -> Callable[..., PlayerSnapshot]:
    """
    Factory for player snapshots.

    Defaults describe a healthy, neutral monster outside Tokyo.
    """
    def _make(
        player_id: str = "p1",
        *,
        aggression: float = 3,
        strategy: float = 3,
        risk: float = 3,
        **stats: Any
    ) -> PlayerSnapshot:
        stats.setdefault("health", 10)
        return PlayerSnapshot(
            id=player_id,
            personality=Personality(aggression=aggression, strategy=strategy, risk=risk),
            **stats,
        )
    return _make


@pytest.fixture
def make_game(make_player) -> Callable[..., GameStateSnapshot]:
    """
    Factory for a game state around an acting player.

    Three healthy opponents are added unless others are given, so the
    game stays in its early phase by default.
    """
    def _make(player: PlayerSnapshot, *opponents: PlayerSnapshot) -> GameStateSnapshot:
        if not opponents:
            opponents = tuple(make_player(f"p{i}") for i in range(2, 5))
        return GameStateSnapshot(players=(player, *opponents))
    return _make


@pytest.fixture
def make_dice() -> Callable[..., tuple[DieResult, ...]]:
    """Factory turning face names into a roll; ``kept`` lists kept indices."""
    def _make(*faces: str, kept: tuple[int, ...] = ()) -> tuple[DieResult, ...]:
        return tuple(
            DieResult(face=Face(face), index=i, kept=i in kept)
            for i, face in enumerate(faces)
        )
    return _make


@pytest.fixture
def make_evaluations() -> Callable[..., tuple[DiceEvaluation, ...]]:
    """
    Factory for synthetic evaluations.

    Takes (face name, should_keep) pairs; scores are placeholders.
    """
    def _make(*entries: tuple[str, bool]) -> tuple[DiceEvaluation, ...]:
        return tuple(
            DiceEvaluation(
                index=i,
                face=Face(face),
                base_value=1.0,
                situational_value=0.0,
                personality_value=0.0,
                set_completion_value=0.0,
                total_value=5.0 if keep else 1.0,
                should_keep=keep,
            )
            for i, (face, keep) in enumerate(entries)
        )
    return _make


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture
def ai_config() -> AIConfig:
    """Built-in configuration."""
    return default_ai_config()


@pytest.fixture
def config_document() -> dict[str, Any]:
    """A complete configuration document in its JSON shape."""
    return {
        "diceEvaluation": {
            "attack": {"baseValue": 4, "situationalMultiplier": 1.5},
            "energy": {"baseValue": 1},
            "heal": {"baseValue": 2, "situationalMultiplier": 1.0},
            "one": {"baseValue": 1},
            "two": {"baseValue": 2},
            "three": {"baseValue": 3},
        },
        "personalities": {
            "aggression": {"attack": 0.6, "heal": -0.2},
            "strategy": {"numeric": 0.4, "threshold": 0.1},
            "risk": {"threshold": 0.25},
            "threshold": {"base": 3.5, "endgameBonus": 0.75},
        },
        "threats": {
            "victoryPointThreat": 12,
            "healthThreat": 4,
            "energyThreat": 6,
            "tokyoThreat": False,
        },
        "monsterSpecificAdjustments": {
            "thekraken": {"risk": 5},
        },
    }
