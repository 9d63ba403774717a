"""
Tokyo Dice - Input Validation Utilities

Validation for everything that crosses the engine boundary. All validators
either return normalized data or raise InvalidInputError with a descriptive
message; the engine facade turns that into a safe fallback decision.
"""

from typing import Any, Mapping, Sequence

from tokyo_dice.engine.base import (
    DieResult,
    Face,
    GameStateSnapshot,
    PlayerSnapshot,
)

TRAIT_MIN = 1
TRAIT_MAX = 5

# Host spellings of each face
_FACE_ALIASES: dict[str, Face] = {
    "attack": Face.ATTACK,
    "claw": Face.ATTACK,
    "energy": Face.ENERGY,
    "heal": Face.HEAL,
    "heart": Face.HEAL,
    "one": Face.ONE,
    "1": Face.ONE,
    "two": Face.TWO,
    "2": Face.TWO,
    "three": Face.THREE,
    "3": Face.THREE,
}


class InvalidInputError(ValueError):
    """Malformed dice, rolls remaining, or snapshot passed to the engine."""


def canonicalize_face(value: Face | str | int) -> Face:
    """
    Map a host face spelling to a Face.

    Args:
        value: Face, name/alias string ("claw", "heart", "2"), or int 1-3

    Returns:
        The canonical Face

    Raises:
        InvalidInputError: If the value names no known face
    """
    if isinstance(value, Face):
        return value
    if isinstance(value, bool):
        raise InvalidInputError(f"Unknown die face {value!r}.")
    key = str(value).strip().lower()
    try:
        return _FACE_ALIASES[key]
    except KeyError:
        raise InvalidInputError(f"Unknown die face {value!r}.") from None


def validate_dice(
    dice: Sequence[Any],
    min_count: int = 1,
    max_count: int | None = None
) -> tuple[DieResult, ...]:
    """
    Validate and normalize the current roll.

    Items may be DieResult records, bare faces (kept=False, index=position),
    or mappings with ``face`` (or ``value``), optional ``index`` and ``kept``.

    Args:
        dice: Current roll
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated dice as a tuple of DieResult

    Raises:
        InvalidInputError: If validation fails
    """
    if dice is None or isinstance(dice, (str, bytes)):
        raise InvalidInputError(f"Dice must be a sequence, got {type(dice).__name__}.")

    items = tuple(dice)
    count = len(items)

    if count < min_count:
        raise InvalidInputError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise InvalidInputError(f"At most {max_count} dice allowed, got {count}.")

    results: list[DieResult] = []
    for position, item in enumerate(items):
        if isinstance(item, DieResult):
            die = item
        elif isinstance(item, Mapping):
            raw_face = item.get("face", item.get("value"))
            if raw_face is None:
                raise InvalidInputError(f"Die at position {position} has no face.")
            die = DieResult(
                face=canonicalize_face(raw_face),
                index=item.get("index", position),
                kept=bool(item.get("kept", False)),
            )
        else:
            die = DieResult(face=canonicalize_face(item), index=position)
        results.append(die)

    seen: set[int] = set()
    for die in results:
        if not isinstance(die.index, int) or isinstance(die.index, bool):
            raise InvalidInputError(
                f"Die index must be an integer, got {type(die.index).__name__}."
            )
        if not (0 <= die.index < count):
            raise InvalidInputError(
                f"Die index {die.index} is out of range. Must be between 0 and {count - 1}."
            )
        if die.index in seen:
            raise InvalidInputError(f"Duplicate die index {die.index}.")
        seen.add(die.index)

    return tuple(results)


def validate_rolls_remaining(rolls_remaining: int) -> int:
    """
    Validate the number of rolls left in the dice phase.

    Raises:
        InvalidInputError: If not a non-negative integer
    """
    if not isinstance(rolls_remaining, int) or isinstance(rolls_remaining, bool):
        raise InvalidInputError(
            f"Rolls remaining must be an integer, got {type(rolls_remaining).__name__}."
        )

    if rolls_remaining < 0:
        raise InvalidInputError(f"Rolls remaining cannot be negative, got {rolls_remaining}.")

    return rolls_remaining


def validate_player(player: PlayerSnapshot | Mapping[str, Any]) -> PlayerSnapshot:
    """Return a PlayerSnapshot, building one from a host mapping if needed."""
    if isinstance(player, PlayerSnapshot):
        return player
    if isinstance(player, Mapping):
        try:
            return PlayerSnapshot.from_mapping(player)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInputError(f"Invalid player snapshot: {exc}") from exc
    raise InvalidInputError(f"Player must be a snapshot, got {type(player).__name__}.")


def validate_game_state(
    game_state: GameStateSnapshot | Mapping[str, Any] | Sequence[Any]
) -> GameStateSnapshot:
    """Return a GameStateSnapshot from a snapshot, mapping, or player list."""
    if isinstance(game_state, GameStateSnapshot):
        return game_state
    try:
        if isinstance(game_state, Mapping):
            return GameStateSnapshot.from_mapping(game_state)
        if isinstance(game_state, Sequence) and not isinstance(game_state, (str, bytes)):
            return GameStateSnapshot.from_mapping({"players": game_state})
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid game state snapshot: {exc}") from exc
    raise InvalidInputError(f"Game state must be a snapshot, got {type(game_state).__name__}.")


def clamp_trait(value: float, low: float = TRAIT_MIN, high: float = TRAIT_MAX) -> float:
    """Clamp a personality trait into [low, high]."""
    return max(low, min(high, value))
