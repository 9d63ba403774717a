"""
Tokyo Dice - Goal Selection

Picks the numeric face worth collecting this roll. The goal is derived from
the dice alone on every call; nothing is remembered between rolls.
"""

from typing import Mapping

from tokyo_dice.engine.base import NUMERIC_FACES, Face, Goal

# Rolls needed to justify switching or chasing from a single die
MIN_ROLLS_TO_CHASE = 2


def select_goal(counts: Mapping[Face, int], rolls_remaining: int) -> Goal | None:
    """
    Choose the numeric face to pursue.

    Rules, in order:
        - Highest count of at least two wins, ties go to the higher face
        - A bare triple of ones gives way to a pair of threes (or twos)
          while two or more rolls remain
        - With no pair, a single three is a provisional goal while two or
          more rolls remain

    Args:
        counts: Dice showing each face
        rolls_remaining: Re-roll budget

    Returns:
        The goal, or None when nothing is worth chasing
    """
    candidates = [face for face in NUMERIC_FACES if counts.get(face, 0) >= 2]
    if candidates:
        candidates.sort(key=lambda face: (counts[face], face.points), reverse=True)
        chosen = candidates[0]

        if chosen is Face.ONE and counts[Face.ONE] == 3 and rolls_remaining >= MIN_ROLLS_TO_CHASE:
            for better in (Face.THREE, Face.TWO):
                if counts.get(better, 0) >= 2:
                    return Goal(face=better, count=counts[better], fostered_from=Face.ONE)

        return Goal(face=chosen, count=counts[chosen])

    if rolls_remaining >= MIN_ROLLS_TO_CHASE and counts.get(Face.THREE, 0) == 1:
        return Goal(face=Face.THREE, count=1, provisional=True)

    return None
