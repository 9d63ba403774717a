"""
Tokyo Dice - Personality Model

Maps the aggression/strategy/risk dials into per-face bonuses and the keep
threshold. Traits are used as given: callers clamp them into [1, 5], and an
out-of-range trait simply extends the linear formulas.
"""

from dataclasses import replace

from tokyo_dice.config.ai_config import AIConfig, PersonalitiesConfig
from tokyo_dice.engine.base import Face, GamePhase, Personality, PlayerSnapshot, Situation

NEUTRAL_TRAIT = 3
MAX_TRAIT = 5


class PersonalityModel:
    """Linear trait adjustments driven by the `personalities` tables."""

    def __init__(self, tables: PersonalitiesConfig | None = None) -> None:
        self.tables = tables or PersonalitiesConfig()

    def adjust(self, face: Face, personality: Personality) -> float:
        """
        Bonus added to a die of ``face`` for this personality.

        Aggression favours attack and devalues healing; strategy favours
        the numeric (victory point) faces. Energy is trait-neutral.
        """
        aggression = personality.aggression - NEUTRAL_TRAIT
        strategy = personality.strategy - NEUTRAL_TRAIT

        if face is Face.ATTACK:
            return aggression * self.tables.aggression.attack
        if face is Face.HEAL:
            return aggression * self.tables.aggression.heal
        if face.is_numeric:
            return strategy * self.tables.strategy.numeric
        return 0.0

    def threshold(self, personality: Personality, situation: Situation) -> float:
        """
        Total score a die must exceed to be worth keeping.

        Cautious (low risk) and strategic personalities raise the bar; the
        end game raises it for everyone.
        """
        tables = self.tables
        value = (
            tables.threshold.base
            + (MAX_TRAIT - personality.risk) * tables.risk.threshold
            + (personality.strategy - NEUTRAL_TRAIT) * tables.strategy.threshold
        )
        if situation.game_phase is GamePhase.END:
            value += tables.threshold.endgame_bonus
        return value


def resolve_personality(player: PlayerSnapshot, config: AIConfig) -> Personality:
    """Apply any per-monster trait overrides to the player's personality."""
    adjustment = config.monster_adjustment(player.name)
    if adjustment is None:
        return player.personality
    overrides = {
        trait: value
        for trait, value in adjustment.model_dump().items()
        if value is not None
    }
    return replace(player.personality, **overrides)
