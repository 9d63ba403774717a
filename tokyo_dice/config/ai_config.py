"""
Tokyo Dice - AI Configuration Document

Pydantic models mirroring the JSON configuration consumed by the engine:
face values, personality coefficient tables, threat thresholds and
opportunity weights. Models are frozen once loaded; an engine receives one
instance in its constructor and never mutates it.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

if TYPE_CHECKING:
    from tokyo_dice.engine.base import Face

logger = logging.getLogger(__name__)

_MODEL_CONFIG = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class ConfigurationUnavailableError(Exception):
    """The configuration document could not be read or parsed."""


class FaceValue(BaseModel):
    """Base value and situational multiplier for one face."""

    base_value: float = Field(alias="baseValue")
    situational_multiplier: float = Field(default=1.0, alias="situationalMultiplier")

    model_config = _MODEL_CONFIG


class DiceEvaluationConfig(BaseModel):
    """Mirrors the `diceEvaluation` section."""

    attack: FaceValue = Field(default_factory=lambda: FaceValue(base_value=3.0))
    energy: FaceValue = Field(default_factory=lambda: FaceValue(base_value=2.0))
    heal: FaceValue = Field(default_factory=lambda: FaceValue(base_value=2.0))
    one: FaceValue = Field(default_factory=lambda: FaceValue(base_value=1.0))
    two: FaceValue = Field(default_factory=lambda: FaceValue(base_value=2.0))
    three: FaceValue = Field(default_factory=lambda: FaceValue(base_value=3.0))

    model_config = _MODEL_CONFIG

    def for_face(self, face: "Face") -> FaceValue:
        return getattr(self, face.value)


class AggressionTable(BaseModel):
    """Per-point-of-aggression adjustments (relative to the neutral 3)."""

    attack: float = 0.5
    heal: float = -0.3

    model_config = _MODEL_CONFIG


class StrategyTable(BaseModel):
    """Per-point-of-strategy adjustments."""

    numeric: float = 0.3
    threshold: float = 0.2

    model_config = _MODEL_CONFIG


class RiskTable(BaseModel):
    """Per-point-of-caution threshold increase, counted down from risk 5."""

    threshold: float = 0.3

    model_config = _MODEL_CONFIG


class ThresholdTable(BaseModel):
    """Keep-threshold base and end-game surcharge."""

    base: float = 3.0
    endgame_bonus: float = Field(default=0.5, alias="endgameBonus")

    model_config = _MODEL_CONFIG


class PersonalitiesConfig(BaseModel):
    """Mirrors the `personalities` section."""

    aggression: AggressionTable = Field(default_factory=AggressionTable)
    strategy: StrategyTable = Field(default_factory=StrategyTable)
    risk: RiskTable = Field(default_factory=RiskTable)
    threshold: ThresholdTable = Field(default_factory=ThresholdTable)

    model_config = _MODEL_CONFIG


class ThreatThresholds(BaseModel):
    """Mirrors the `threats` section."""

    victory_point_threat: int = Field(default=15, alias="victoryPointThreat")
    health_threat: int = Field(default=3, alias="healthThreat")
    energy_threat: int = Field(default=8, alias="energyThreat")
    tokyo_threat: bool = Field(default=True, alias="tokyoThreat")

    model_config = _MODEL_CONFIG


class OpportunitySettings(BaseModel):
    """Mirrors the `opportunities` section."""

    tokyo_entry_health: int = Field(default=5, alias="tokyoEntryHealth")
    enter_tokyo_value: float = Field(default=2.0, alias="enterTokyoValue")
    eliminate_value: float = Field(default=3.0, alias="eliminateValue")

    model_config = _MODEL_CONFIG


class MonsterAdjustment(BaseModel):
    """Trait overrides for one monster; unset traits keep the player's own."""

    aggression: float | None = None
    strategy: float | None = None
    risk: float | None = None

    model_config = _MODEL_CONFIG


class AIConfig(BaseModel):
    """Root of the configuration document."""

    dice_evaluation: DiceEvaluationConfig = Field(
        default_factory=DiceEvaluationConfig, alias="diceEvaluation"
    )
    personalities: PersonalitiesConfig = Field(default_factory=PersonalitiesConfig)
    threats: ThreatThresholds = Field(default_factory=ThreatThresholds)
    opportunities: OpportunitySettings = Field(default_factory=OpportunitySettings)
    monster_specific_adjustments: dict[str, MonsterAdjustment] = Field(
        default_factory=dict, alias="monsterSpecificAdjustments"
    )

    model_config = _MODEL_CONFIG

    def monster_adjustment(self, name: str) -> MonsterAdjustment | None:
        """Look up overrides by monster name, ignoring case and whitespace."""
        if not name:
            return None
        return self.monster_specific_adjustments.get(normalize_monster_key(name))


def normalize_monster_key(name: str) -> str:
    """Lowercase a monster name and strip all whitespace."""
    return "".join(name.lower().split())


def default_ai_config() -> AIConfig:
    """Built-in configuration, identical in shape to the JSON document."""
    return AIConfig()


def read_ai_config(path: str | Path) -> AIConfig:
    """
    Read and validate a configuration document.

    Args:
        path: Location of the JSON document

    Returns:
        Parsed configuration

    Raises:
        ConfigurationUnavailableError: If the file is missing, unreadable,
            not JSON, or fails validation
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationUnavailableError(f"Cannot read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationUnavailableError(f"{path} must contain a JSON object.")

    try:
        return AIConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationUnavailableError(f"Invalid configuration in {path}: {exc}") from exc


def load_ai_config(path: str | Path | None = None) -> AIConfig:
    """
    Load the configuration, falling back to the built-in default.

    A missing or broken document is logged as a warning and never raised;
    the game stays playable on defaults.
    """
    if path is None:
        logger.debug("No AI configuration path set, using built-in defaults")
        return default_ai_config()

    try:
        config = read_ai_config(path)
    except ConfigurationUnavailableError as exc:
        logger.warning("AI configuration unavailable, using built-in defaults: %s", exc)
        return default_ai_config()

    logger.info("Loaded AI configuration from %s", path)
    return config
