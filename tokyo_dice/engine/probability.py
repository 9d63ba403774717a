"""
Tokyo Dice - Set-Completion Probability Model

Combinatorial odds of completing or improving a numeric set before the
re-roll budget runs out.

Every remaining (free die x roll) slot is treated as an independent trial
that shows the wanted face with probability 1/6. Dice reserved for other
faces are not modelled; the engine is a heuristic, not an optimal policy.

Set Steps:
    - Single held: two more matches complete the set (base value)
    - Pair held: one more match completes the set (base value)
    - Three or more held: each extra match adds 1 point
"""

import math
from typing import Mapping

from tokyo_dice.engine.base import NUMERIC_FACES, Face, SetCompletion
from tokyo_dice.engine.face_values import FaceValueTable

MATCH_PROBABILITY = 1 / 6
SET_SIZE = 3
EXTRA_DIE_POINTS = 1.0


def combinations(n: int, k: int) -> int:
    """
    Exact binomial coefficient C(n, k).

    Returns 0 instead of raising for negative n or k, or k > n.
    """
    if n < 0 or k < 0 or k > n:
        return 0
    return math.comb(n, k)


def binomial_tail(trials: int, needed: int, p: float = MATCH_PROBABILITY) -> float:
    """
    P(X >= needed) for X ~ Binomial(trials, p).

    Args:
        trials: Number of independent trials
        needed: Minimum number of successes
        p: Success probability per trial

    Returns:
        Probability in [0, 1]
    """
    if needed <= 0:
        return 1.0
    if trials < needed:
        return 0.0

    q = 1.0 - p
    miss = 0.0
    for successes in range(needed):
        miss += combinations(trials, successes) * p ** successes * q ** (trials - successes)
    return max(0.0, min(1.0, 1.0 - miss))


def matches_needed(held: int) -> int:
    """Matches required for the next scoring step from ``held`` dice."""
    return max(1, SET_SIZE - held)


def completion_probability(held: int, free_dice: int, rolls_remaining: int) -> float:
    """
    Probability of reaching the next scoring step for a face.

    With a pair held this is ``1 - (5/6) ** (free_dice * rolls_remaining)``.
    Zero when nothing is held or no free die or roll is left.
    """
    if held <= 0 or free_dice <= 0 or rolls_remaining <= 0:
        return 0.0
    return binomial_tail(free_dice * rolls_remaining, matches_needed(held))


def free_dice_for(face: Face, counts: Mapping[Face, int], total_dice: int) -> int:
    """
    Dice available to chase ``face``.

    Excludes dice already showing the face and dice committed to another
    formed set.
    """
    committed = sum(
        count for other, count in counts.items()
        if other is not face and other.is_numeric and count >= SET_SIZE
    )
    return max(0, total_dice - counts.get(face, 0) - committed)


def evaluate_sets(
    held_counts: Mapping[Face, int],
    free_dice_count: int | Mapping[Face, int],
    rolls_remaining: int,
    face_values: FaceValueTable | None = None
) -> tuple[SetCompletion, ...]:
    """
    Evaluate every numeric face that has at least one die held.

    Args:
        held_counts: Dice showing each face
        free_dice_count: Re-rollable dice, shared or per face
        rolls_remaining: Re-roll budget
        face_values: Source of the set values (defaults to built-in table)

    Returns:
        SetCompletion per pursuable face, in face order (one, two, three)
    """
    face_values = face_values or FaceValueTable()
    results: list[SetCompletion] = []

    for face in NUMERIC_FACES:
        held = held_counts.get(face, 0)
        if held <= 0:
            continue

        if isinstance(free_dice_count, Mapping):
            free = free_dice_count.get(face, 0)
        else:
            free = free_dice_count

        if free <= 0 or rolls_remaining <= 0:
            continue

        probability = completion_probability(held, free, rolls_remaining)
        ev_gain = face_values.set_value(face) if held < SET_SIZE else EXTRA_DIE_POINTS
        results.append(SetCompletion(
            face=face,
            held=held,
            needed=matches_needed(held),
            prob_complete=probability,
            ev_gain=ev_gain,
            contribution=probability * ev_gain,
        ))

    return tuple(results)


def improvement_chance(completions: tuple[SetCompletion, ...]) -> float:
    """Chance that at least one tracked set improves, assuming independence."""
    miss = 1.0
    for completion in completions:
        miss *= 1.0 - completion.prob_complete
    return 1.0 - miss
