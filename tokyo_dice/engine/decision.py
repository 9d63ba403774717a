"""
Tokyo Dice - Decision Assembler

Turns per-die evaluations into the final action for this roll.

While more than one roll remains, a numeric pair with only one die flagged
is first kept whole, as long as one die stays free to re-roll.

Transition policy (first match wins):
    1. Last roll: endRoll, keep every flagged die
    2. Risk >= 4 with fewer than 4 flagged dice and rolls to spare: reroll
    3. Risk <= 2 with at least 2 flagged dice: keep
    4. At least 3 flagged dice: keep
    5. Otherwise: reroll

A reroll with no die left to re-roll becomes keep.
"""

import logging
from collections import Counter
from dataclasses import replace
from typing import Sequence

from tokyo_dice.engine.base import (
    NUMERIC_FACES,
    Decision,
    DecisionAction,
    DiceEvaluation,
    Face,
    GameStateSnapshot,
    Goal,
    Personality,
    PlayerSnapshot,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.3


def fallback_decision(reason: str) -> Decision:
    """Maximally conservative answer: re-roll everything."""
    return Decision(
        action=DecisionAction.REROLL,
        keep_dice=(),
        reason=reason,
        confidence=FALLBACK_CONFIDENCE,
    )


class DecisionAssembler:
    """
    Stateless policy over one roll's evaluations.

    All methods read their arguments only; evaluations are replaced, never
    mutated.
    """

    # Policy thresholds
    HIGH_RISK = 4
    HIGH_RISK_MIN_KEEP = 4
    LOW_RISK = 2
    LOW_RISK_MIN_KEEP = 2
    MIN_KEEP = 3

    # Yield advisory
    YIELD_HEALTH = 4
    YIELD_MIN_OPPONENTS = 2

    CONFIDENCE = {
        DecisionAction.END_ROLL: 0.92,
        DecisionAction.KEEP: 0.8,
        DecisionAction.REROLL: 0.6,
    }

    def assemble(
        self,
        evaluations: Sequence[DiceEvaluation],
        rolls_remaining: int,
        personality: Personality,
        goal: Goal | None = None,
        yield_suggestion: bool = False
    ) -> tuple[Decision, tuple[DiceEvaluation, ...]]:
        """
        Build the decision for this roll.

        Args:
            evaluations: Per-die scores from the evaluator
            rolls_remaining: Rolls left at call time
            personality: Traits of the acting player
            goal: Numeric face being collected, if any
            yield_suggestion: Advisory flag carried onto the decision

        Returns:
            Tuple of (decision, evaluations with invariant-adjusted flags)
        """
        evaluations = tuple(evaluations)
        notes: list[str] = []
        if rolls_remaining > 1:
            evaluations, protected = self.protect_pairs(evaluations)
            notes.extend(f"protecting pair of {face.value}s" for face in protected)

        flagged = sum(1 for e in evaluations if e.should_keep)
        action, reason = self.choose_action(flagged, rolls_remaining, personality.risk)

        if action is DecisionAction.REROLL and flagged == len(evaluations):
            action = DecisionAction.KEEP
            reason = f"all {flagged} dice worth keeping, nothing to re-roll"

        if goal is not None:
            if goal.provisional:
                notes.append(f"eyeing a set of {goal.face.value}s")
            else:
                notes.append(f"pursuing a set of {goal.face.value}s")
        if yield_suggestion:
            notes.append("consider yielding Tokyo")

        keep_dice = tuple(sorted(e.index for e in evaluations if e.should_keep))
        if notes:
            reason = f"{reason}; {'; '.join(notes)}"

        logger.debug("Decision %s keeping %s: %s", action.value, keep_dice, reason)

        decision = Decision(
            action=action,
            keep_dice=keep_dice,
            reason=reason,
            confidence=self.CONFIDENCE[action],
            yield_suggestion=yield_suggestion,
        )
        return decision, evaluations

    def choose_action(
        self,
        flagged: int,
        rolls_remaining: int,
        risk: float
    ) -> tuple[DecisionAction, str]:
        """Apply the transition policy to the number of flagged dice."""
        if rolls_remaining == 1:
            return DecisionAction.END_ROLL, f"final roll, keeping {flagged} dice"

        if risk >= self.HIGH_RISK and rolls_remaining > 1 and flagged < self.HIGH_RISK_MIN_KEEP:
            return DecisionAction.REROLL, f"gambling for more with only {flagged} dice worth keeping"

        if risk <= self.LOW_RISK and flagged >= self.LOW_RISK_MIN_KEEP:
            return DecisionAction.KEEP, f"locking in {flagged} dice early"

        if flagged >= self.MIN_KEEP:
            return DecisionAction.KEEP, f"{flagged} dice worth keeping"

        return DecisionAction.REROLL, f"only {flagged} dice worth keeping, rolling again"

    def protect_pairs(
        self,
        evaluations: tuple[DiceEvaluation, ...]
    ) -> tuple[tuple[DiceEvaluation, ...], tuple[Face, ...]]:
        """
        Keep every split numeric pair whole.

        A pair is split when exactly two dice show the face and only one is
        flagged. Never flags the last unflagged die, so a re-roll always has
        at least one die to throw.

        Returns:
            Tuple of (adjusted evaluations, faces whose pair was restored)
        """
        counts = Counter(e.face for e in evaluations)
        free = sum(1 for e in evaluations if not e.should_keep)
        to_flag: set[int] = set()
        protected: list[Face] = []

        for face in NUMERIC_FACES:
            if counts[face] != 2:
                continue
            pair = [e for e in evaluations if e.face is face]
            missing = [e.index for e in pair if not e.should_keep]
            if len(missing) != 1 or free - len(missing) < 1:
                continue
            to_flag.update(missing)
            free -= len(missing)
            protected.append(face)

        if not to_flag:
            return evaluations, ()

        adjusted = tuple(
            replace(e, should_keep=True) if e.index in to_flag else e
            for e in evaluations
        )
        return adjusted, tuple(protected)

    @classmethod
    def should_yield(cls, player: PlayerSnapshot, game_state: GameStateSnapshot) -> bool:
        """Advise leaving Tokyo when low on health with several live opponents."""
        if not player.is_in_tokyo or player.health > cls.YIELD_HEALTH:
            return False
        return len(game_state.opponents_of(player)) >= cls.YIELD_MIN_OPPONENTS
