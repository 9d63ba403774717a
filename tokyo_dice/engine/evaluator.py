"""
Tokyo Dice - Dice Evaluator

Scores each die as the sum of four components:

    total = base + situational + personality + set completion

and flags it for keeping when the total clears the personality threshold.
"""

from collections import Counter
from typing import Sequence

from tokyo_dice.engine.base import (
    DiceEvaluation,
    DieResult,
    Face,
    GamePhase,
    OpportunityType,
    Personality,
    PlayerSnapshot,
    SetCompletion,
    Situation,
)
from tokyo_dice.engine.face_values import FaceValueTable
from tokyo_dice.engine.personality import PersonalityModel
from tokyo_dice.engine.probability import evaluate_sets, free_dice_for


def count_faces(dice: Sequence[DieResult]) -> Counter[Face]:
    """Number of dice showing each face."""
    return Counter(die.face for die in dice)


class DiceEvaluator:
    """
    Per-die scoring service.

    Holds only read-only collaborators, so one instance can evaluate any
    number of rolls concurrently.
    """

    # Attack
    THREAT_ATTACK_BONUS = 2.0
    ELIMINATE_ATTACK_BONUS = 2.0
    TOKYO_ATTACK_PENALTY = -3.0

    # Heal
    LOW_HEALTH = 5
    CRITICAL_HEALTH = 3
    LOW_HEALTH_HEAL_BONUS = 3.0
    CRITICAL_HEALTH_HEAL_BONUS = 2.0
    WASTED_HEAL_PENALTY = -5.0

    # Energy
    MIDGAME_ENERGY_BONUS = 1.0
    ENDGAME_ENERGY_BONUS = 2.0

    # Numeric
    ENDGAME_NUMERIC_BONUS = 2.0
    NEAR_WIN_VICTORY_POINTS = 15
    NEAR_WIN_NUMERIC_BONUS = 3.0

    def __init__(
        self,
        face_values: FaceValueTable | None = None,
        personality_model: PersonalityModel | None = None
    ) -> None:
        self.face_values = face_values or FaceValueTable()
        self.personality_model = personality_model or PersonalityModel()

    def evaluate(
        self,
        dice: Sequence[DieResult],
        player: PlayerSnapshot,
        situation: Situation,
        rolls_remaining: int,
        personality: Personality | None = None
    ) -> tuple[DiceEvaluation, ...]:
        """
        Score every die of the current roll.

        Args:
            dice: Current roll
            player: Acting player
            situation: Output of the situation analysis
            rolls_remaining: Re-roll budget, for set completion odds
            personality: Traits to use (defaults to the player's own)

        Returns:
            One DiceEvaluation per die, in input order
        """
        personality = personality or player.personality
        threshold = self.personality_model.threshold(personality, situation)
        contributions = {
            completion.face: completion.contribution
            for completion in self.set_completions(dice, rolls_remaining)
        }

        evaluations: list[DiceEvaluation] = []
        for die in dice:
            base = self.face_values.base_value(die.face)
            situational = self.situational_value(die.face, player, situation)
            personality_value = self.personality_model.adjust(die.face, personality)
            set_value = 0.0 if die.kept else contributions.get(die.face, 0.0)
            total = base + situational + personality_value + set_value
            evaluations.append(DiceEvaluation(
                index=die.index,
                face=die.face,
                base_value=base,
                situational_value=situational,
                personality_value=personality_value,
                set_completion_value=set_value,
                total_value=total,
                should_keep=total > threshold,
            ))

        return tuple(evaluations)

    def set_completions(
        self,
        dice: Sequence[DieResult],
        rolls_remaining: int
    ) -> tuple[SetCompletion, ...]:
        """Set-completion odds for every numeric face in the roll."""
        counts = count_faces(dice)
        free = {face: free_dice_for(face, counts, len(dice)) for face in counts}
        return evaluate_sets(counts, free, rolls_remaining, self.face_values)

    def situational_value(
        self,
        face: Face,
        player: PlayerSnapshot,
        situation: Situation
    ) -> float:
        """Face-specific adjustment for the current situation, scaled by the face multiplier."""
        if face is Face.ATTACK:
            value = self._attack_adjustment(player, situation)
        elif face is Face.HEAL:
            value = self._heal_adjustment(player)
        elif face is Face.ENERGY:
            value = self._energy_adjustment(situation)
        else:
            value = self._numeric_adjustment(player, situation)
        return value * self.face_values.multiplier(face)

    def _attack_adjustment(self, player: PlayerSnapshot, situation: Situation) -> float:
        value = 0.0
        if situation.has_threats:
            value += self.THREAT_ATTACK_BONUS
        if situation.has_opportunity(OpportunityType.ELIMINATE):
            value += self.ELIMINATE_ATTACK_BONUS
        enter_tokyo = situation.opportunity(OpportunityType.ENTER_TOKYO)
        if enter_tokyo is not None:
            value += enter_tokyo.value
        # Attacking from Tokyo hurts the occupant too
        if player.is_in_tokyo:
            value += self.TOKYO_ATTACK_PENALTY
        return value

    def _heal_adjustment(self, player: PlayerSnapshot) -> float:
        value = 0.0
        if player.health <= self.LOW_HEALTH:
            value += self.LOW_HEALTH_HEAL_BONUS
            if player.health <= self.CRITICAL_HEALTH:
                value += self.CRITICAL_HEALTH_HEAL_BONUS
        # No healing inside Tokyo, nothing to heal at full health
        if player.at_full_health or player.is_in_tokyo:
            value += self.WASTED_HEAL_PENALTY
        return value

    def _energy_adjustment(self, situation: Situation) -> float:
        if situation.game_phase is GamePhase.MID:
            return self.MIDGAME_ENERGY_BONUS
        if situation.game_phase is GamePhase.END:
            return self.ENDGAME_ENERGY_BONUS
        return 0.0

    def _numeric_adjustment(self, player: PlayerSnapshot, situation: Situation) -> float:
        value = 0.0
        if situation.game_phase is GamePhase.END:
            value += self.ENDGAME_NUMERIC_BONUS
        if player.victory_points >= self.NEAR_WIN_VICTORY_POINTS:
            value += self.NEAR_WIN_NUMERIC_BONUS
        return value
