"""
Tokyo Dice - Face Value Table

Static base value and situational multiplier for each die face, read from
the `diceEvaluation` section of the AI configuration.
"""

from tokyo_dice.config.ai_config import DiceEvaluationConfig
from tokyo_dice.engine.base import Face


class FaceValueTable:
    """
    Lookup table of per-face values.

    For numeric faces the base value doubles as the victory points unlocked
    by completing a set of three.
    """

    def __init__(self, config: DiceEvaluationConfig | None = None) -> None:
        config = config or DiceEvaluationConfig()
        self._entries = {face: config.for_face(face) for face in Face}

    def base_value(self, face: Face) -> float:
        return self._entries[face].base_value

    def multiplier(self, face: Face) -> float:
        return self._entries[face].situational_multiplier

    def set_value(self, face: Face) -> float:
        """Victory points for completing a set of ``face``."""
        if not face.is_numeric:
            raise ValueError(f"{face.value} is not a numeric face.")
        return self._entries[face].base_value
