"""
Tokyo Dice - Decision Engine Base Classes

This module defines the data structures and enums shared by every stage of
the dice decision pipeline. All classes are immutable (frozen dataclasses)
so a snapshot can be handed to several engine instances at once without
locking.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence


class Face(Enum):
    """Symbol shown on one rolled die."""
    ATTACK = "attack"
    ENERGY = "energy"
    HEAL = "heal"
    ONE = "one"
    TWO = "two"
    THREE = "three"

    @property
    def is_numeric(self) -> bool:
        """Returns True for the victory point faces (one, two, three)."""
        return self in NUMERIC_FACES

    @property
    def points(self) -> int:
        """Printed number on a numeric face, 0 for the symbol faces."""
        return _FACE_POINTS.get(self, 0)


NUMERIC_FACES: tuple[Face, ...] = (Face.ONE, Face.TWO, Face.THREE)

_FACE_POINTS = {Face.ONE: 1, Face.TWO: 2, Face.THREE: 3}


class GamePhase(Enum):
    """Coarse progress of the game, derived from victory points and survivors."""
    EARLY = "earlygame"
    MID = "midgame"
    END = "endgame"


class OpportunityType(Enum):
    """Kinds of opportunity the situation analysis can detect."""
    ENTER_TOKYO = "enterTokyo"
    ELIMINATE = "eliminate"


class DecisionAction(Enum):
    """Actions the engine can recommend for the current roll."""
    REROLL = "reroll"
    KEEP = "keep"
    END_ROLL = "endRoll"


@dataclass(frozen=True)
class DieResult:
    """
    One rolled face.

    Attributes:
        face: Symbol shown on the die
        index: Position in the roll, stable for the whole roll
        kept: Whether the die is currently retained across re-rolls
    """
    face: Face
    index: int
    kept: bool = False


@dataclass(frozen=True)
class Personality:
    """
    Trait dials of a computer player, nominally on a 1-5 scale.

    Values are not range-checked here; callers clamp with
    ``validators.clamp_trait`` when they need to.
    """
    aggression: float = 3
    strategy: float = 3
    risk: float = 3

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Personality":
        """Build from a host mapping; missing traits default to 3."""
        data = data or {}
        return cls(
            aggression=data.get("aggression", 3),
            strategy=data.get("strategy", 3),
            risk=data.get("risk", 3),
        )


@dataclass(frozen=True)
class PlayerSnapshot:
    """
    Read-only view of one player.

    Attributes:
        id: Stable player identifier
        health: Current health (0..max_health)
        energy: Energy cubes held
        victory_points: Victory points scored
        is_in_tokyo: Whether the player occupies Tokyo
        is_eliminated: Whether the player is out of the game
        personality: Trait dials driving the engine for this player
        name: Monster name, used for per-monster adjustments
        max_health: Health cap
    """
    id: str
    health: int
    energy: int = 0
    victory_points: int = 0
    is_in_tokyo: bool = False
    is_eliminated: bool = False
    personality: Personality = field(default_factory=Personality)
    name: str = ""
    max_health: int = 10

    def __post_init__(self) -> None:
        """Validate the visible stats."""
        if self.max_health <= 0:
            raise ValueError(f"Max health must be positive, got {self.max_health}.")
        if not (0 <= self.health <= self.max_health):
            raise ValueError(
                f"Health {self.health} out of range for player {self.id}. "
                f"Must be between 0 and {self.max_health}."
            )
        if self.energy < 0:
            raise ValueError(f"Energy cannot be negative, got {self.energy}.")
        if self.victory_points < 0:
            raise ValueError(f"Victory points cannot be negative, got {self.victory_points}.")

    @property
    def is_alive(self) -> bool:
        return not self.is_eliminated

    @property
    def at_full_health(self) -> bool:
        return self.health >= self.max_health

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlayerSnapshot":
        """
        Create a snapshot from a host mapping.

        Accepts both snake_case and the camelCase keys used by the game
        state store (``victoryPoints``, ``isInTokyo``, ``isEliminated``,
        ``maxHealth``). The personality may sit on the player or under
        ``monster.personality``. The id falls back to the name.

        Raises:
            ValueError: If the mapping has neither an id nor a name
        """
        player_id = data.get("id")
        if player_id is None or player_id == "":
            player_id = data.get("name")
        if player_id is None or player_id == "":
            raise ValueError("Player needs an id or a name.")

        personality = data.get("personality")
        if personality is None:
            personality = (data.get("monster") or {}).get("personality")
        return cls(
            id=str(player_id),
            name=str(data.get("name", "")),
            health=data["health"],
            max_health=data.get("max_health", data.get("maxHealth", 10)),
            energy=data.get("energy", 0),
            victory_points=data.get("victory_points", data.get("victoryPoints", 0)),
            is_in_tokyo=bool(data.get("is_in_tokyo", data.get("isInTokyo", False))),
            is_eliminated=bool(data.get("is_eliminated", data.get("isEliminated", False))),
            personality=(
                personality if isinstance(personality, Personality)
                else Personality.from_mapping(personality)
            ),
        )


@dataclass(frozen=True)
class GameStateSnapshot:
    """
    Read-only view of every player in turn order.

    Attributes:
        players: Player snapshots, in turn order
    """
    players: tuple[PlayerSnapshot, ...] = field(default_factory=tuple)

    @property
    def max_victory_points(self) -> int:
        """Highest victory point total across all players."""
        return max((p.victory_points for p in self.players), default=0)

    @property
    def alive_count(self) -> int:
        """Number of players not eliminated."""
        return sum(1 for p in self.players if p.is_alive)

    @property
    def tokyo_occupant(self) -> PlayerSnapshot | None:
        """Live player currently in Tokyo, if any."""
        for player in self.players:
            if player.is_in_tokyo and player.is_alive:
                return player
        return None

    @property
    def tokyo_occupied(self) -> bool:
        return self.tokyo_occupant is not None

    def opponents_of(self, player: PlayerSnapshot) -> tuple[PlayerSnapshot, ...]:
        """Live players other than ``player``, in turn order."""
        return tuple(
            p for p in self.players
            if p.id != player.id and p.is_alive
        )

    @classmethod
    def from_players(cls, players: Sequence[PlayerSnapshot]) -> "GameStateSnapshot":
        return cls(players=tuple(players))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameStateSnapshot":
        """Create from a host mapping with a ``players`` list."""
        return cls(players=tuple(
            p if isinstance(p, PlayerSnapshot) else PlayerSnapshot.from_mapping(p)
            for p in data.get("players", ())
        ))


@dataclass(frozen=True)
class Threat:
    """
    Danger posed by one opponent.

    Attributes:
        player: The threatening opponent
        level: Accumulated threat score
        reasons: Contributing factors, in scoring order
    """
    player: PlayerSnapshot
    level: int
    reasons: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Opportunity:
    """
    Advantage visible in the shared state.

    Attributes:
        type: Kind of opportunity
        value: Weight added to dice that can exploit it
        description: Human-readable summary
    """
    type: OpportunityType
    value: float
    description: str


@dataclass(frozen=True)
class Situation:
    """Result of the situation analysis for one call."""
    threats: tuple[Threat, ...] = field(default_factory=tuple)
    opportunities: tuple[Opportunity, ...] = field(default_factory=tuple)
    game_phase: GamePhase = GamePhase.EARLY

    @property
    def has_threats(self) -> bool:
        return len(self.threats) > 0

    def opportunity(self, kind: OpportunityType) -> Opportunity | None:
        """Return the opportunity of the given kind, if detected."""
        for opportunity in self.opportunities:
            if opportunity.type is kind:
                return opportunity
        return None

    def has_opportunity(self, kind: OpportunityType) -> bool:
        return self.opportunity(kind) is not None


@dataclass(frozen=True)
class SetCompletion:
    """
    Chance of completing or improving a numeric set.

    Attributes:
        face: Numeric face being collected
        held: Dice currently showing the face
        needed: Matches still required for the next scoring step
        prob_complete: Probability of getting them before rolls run out
        ev_gain: Victory points unlocked by that step
        contribution: prob_complete * ev_gain
    """
    face: Face
    held: int
    needed: int
    prob_complete: float
    ev_gain: float
    contribution: float


@dataclass(frozen=True)
class DiceEvaluation:
    """
    Score breakdown for one die.

    total_value is the sum of the four components; should_keep compares it
    against the personality threshold.
    """
    index: int
    face: Face
    base_value: float
    situational_value: float
    personality_value: float
    set_completion_value: float
    total_value: float
    should_keep: bool


@dataclass(frozen=True)
class Goal:
    """
    Numeric face the engine is collecting this roll.

    Attributes:
        face: Target numeric face
        count: Dice currently showing it
        provisional: Chasing from a single die
        fostered_from: Face abandoned in favour of this one
    """
    face: Face
    count: int
    provisional: bool = False
    fostered_from: Face | None = None


@dataclass(frozen=True)
class Decision:
    """
    The engine's answer for one roll.

    Attributes:
        action: What the turn controller should do next
        keep_dice: Sorted indices of dice to retain
        reason: Human-readable rationale
        confidence: Rough confidence in the action (0-1)
        yield_suggestion: Advisory flag to leave Tokyo, never affects dice
    """
    action: DecisionAction
    keep_dice: tuple[int, ...] = field(default_factory=tuple)
    reason: str = ""
    confidence: float | None = None
    yield_suggestion: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Render in the host's camelCase decision shape."""
        result: dict[str, Any] = {
            "action": self.action.value,
            "keepDice": list(self.keep_dice),
            "reason": self.reason,
        }
        if self.confidence is not None:
            result["confidence"] = self.confidence
        if self.yield_suggestion:
            result["yieldSuggestion"] = True
        return result
