"""
Tokyo Dice - Dice Decision Engine

Entry point used by the turn controller once per roll:

    situation analysis -> dice evaluation -> decision assembly

The engine holds only its frozen configuration and read-only collaborators,
so independently configured instances can run side by side and a single
instance can serve several CPU players at once.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from tokyo_dice.config.ai_config import AIConfig, ConfigurationUnavailableError, load_ai_config
from tokyo_dice.config.settings import Settings, get_settings
from tokyo_dice.engine.base import (
    Decision,
    DiceEvaluation,
    DieResult,
    GameStateSnapshot,
    Goal,
    Personality,
    PlayerSnapshot,
    SetCompletion,
    Situation,
)
from tokyo_dice.engine.decision import DecisionAssembler, fallback_decision
from tokyo_dice.engine.evaluator import DiceEvaluator, count_faces
from tokyo_dice.engine.face_values import FaceValueTable
from tokyo_dice.engine.goals import select_goal
from tokyo_dice.engine.personality import PersonalityModel, resolve_personality
from tokyo_dice.engine.probability import improvement_chance
from tokyo_dice.engine.situation import SituationAnalyzer
from tokyo_dice.engine.validators import (
    InvalidInputError,
    validate_dice,
    validate_game_state,
    validate_player,
    validate_rolls_remaining,
)

logger = logging.getLogger(__name__)

CONFIG_UNAVAILABLE_REASON = "config unavailable"


@dataclass(frozen=True)
class RollAnalysis:
    """
    Everything the engine worked out for one roll.

    Only ``decision`` matters to the turn controller; the rest exists for
    inspector and explain views.
    """
    decision: Decision
    situation: Situation
    personality: Personality
    threshold: float
    evaluations: tuple[DiceEvaluation, ...] = field(default_factory=tuple)
    set_completions: tuple[SetCompletion, ...] = field(default_factory=tuple)
    goal: Goal | None = None
    improvement_chance: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Render for display in the host's camelCase shape."""
        return {
            "decision": self.decision.to_dict(),
            "gamePhase": self.situation.game_phase.value,
            "threshold": round(self.threshold, 3),
            "threats": [
                {
                    "player": threat.player.id,
                    "level": threat.level,
                    "reasons": list(threat.reasons),
                }
                for threat in self.situation.threats
            ],
            "opportunities": [
                {
                    "type": opportunity.type.value,
                    "value": opportunity.value,
                    "description": opportunity.description,
                }
                for opportunity in self.situation.opportunities
            ],
            "dice": [
                {
                    "index": e.index,
                    "face": e.face.value,
                    "baseValue": e.base_value,
                    "situationalValue": e.situational_value,
                    "personalityValue": round(e.personality_value, 3),
                    "setCompletionValue": round(e.set_completion_value, 3),
                    "totalValue": round(e.total_value, 3),
                    "shouldKeep": e.should_keep,
                }
                for e in self.evaluations
            ],
            "sets": [
                {
                    "face": c.face.value,
                    "held": c.held,
                    "needed": c.needed,
                    "probComplete": round(c.prob_complete, 3),
                    "evGain": c.ev_gain,
                    "contribution": round(c.contribution, 3),
                }
                for c in self.set_completions
            ],
            "goal": self.goal.face.value if self.goal else None,
            "improvementChance": round(self.improvement_chance, 3),
        }


class DiceDecisionEngine:
    """
    Keep/re-roll advisor for a computer-controlled player.

    Args:
        config: Loaded configuration, or None when loading has not finished;
            without one every call degrades to a re-roll-everything decision
    """

    def __init__(self, config: AIConfig | None) -> None:
        self.config = config
        if config is None:
            self._analyzer = None
            self._personality_model = None
            self._evaluator = None
        else:
            self._analyzer = SituationAnalyzer(config.threats, config.opportunities)
            self._personality_model = PersonalityModel(config.personalities)
            self._evaluator = DiceEvaluator(
                FaceValueTable(config.dice_evaluation),
                self._personality_model,
            )
        self._assembler = DecisionAssembler()

    @property
    def is_configured(self) -> bool:
        return self.config is not None

    def make_roll_decision(
        self,
        current_dice: Sequence[DieResult | Any],
        rolls_remaining: int,
        player: PlayerSnapshot | Mapping[str, Any],
        game_state: GameStateSnapshot | Mapping[str, Any]
    ) -> Decision:
        """
        Decide what to do with the current roll.

        Never raises: invalid input, a missing configuration or an internal
        error all produce a re-roll-everything decision.

        Args:
            current_dice: Current roll, one entry per dice slot
            rolls_remaining: Rolls left in this dice phase (>= 0)
            player: Acting player
            game_state: Every player, in turn order

        Returns:
            Decision for the turn controller
        """
        if not self.is_configured:
            logger.warning("Roll decision requested before configuration was loaded")
            return fallback_decision(CONFIG_UNAVAILABLE_REASON)

        try:
            return self.analyze_roll(current_dice, rolls_remaining, player, game_state).decision
        except InvalidInputError as exc:
            logger.warning("Invalid roll decision input: %s", exc)
            return fallback_decision(f"invalid input: {exc}")
        except Exception:
            logger.exception("Roll decision failed, falling back to reroll")
            return fallback_decision("engine error fallback")

    def analyze_roll(
        self,
        current_dice: Sequence[DieResult | Any],
        rolls_remaining: int,
        player: PlayerSnapshot | Mapping[str, Any],
        game_state: GameStateSnapshot | Mapping[str, Any]
    ) -> RollAnalysis:
        """
        Run the full pipeline and keep every intermediate result.

        Raises:
            ConfigurationUnavailableError: If the engine has no configuration
            InvalidInputError: If any input fails validation
        """
        if not self.is_configured:
            raise ConfigurationUnavailableError(CONFIG_UNAVAILABLE_REASON)

        dice = validate_dice(current_dice)
        rolls_remaining = validate_rolls_remaining(rolls_remaining)
        player = validate_player(player)
        game_state = validate_game_state(game_state)

        personality = resolve_personality(player, self.config)
        situation = self._analyzer.analyze(player, game_state)
        threshold = self._personality_model.threshold(personality, situation)
        set_completions = self._evaluator.set_completions(dice, rolls_remaining)
        evaluations = self._evaluator.evaluate(
            dice, player, situation, rolls_remaining, personality=personality
        )
        goal = select_goal(count_faces(dice), rolls_remaining)

        decision, evaluations = self._assembler.assemble(
            evaluations,
            rolls_remaining,
            personality,
            goal=goal,
            yield_suggestion=self._assembler.should_yield(player, game_state),
        )

        return RollAnalysis(
            decision=decision,
            situation=situation,
            personality=personality,
            threshold=threshold,
            evaluations=evaluations,
            set_completions=set_completions,
            goal=goal,
            improvement_chance=improvement_chance(set_completions),
        )


def create_engine(settings: Settings | None = None) -> DiceDecisionEngine:
    """Build an engine from process settings, loading the configured document."""
    settings = settings or get_settings()
    return DiceDecisionEngine(load_ai_config(settings.ai_config_path))
