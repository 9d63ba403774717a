"""
Tokyo Dice - AI Configuration Tests

Tests for parsing, validating and loading the configuration document.
"""

import json
import logging

import pytest
from pydantic import ValidationError
from tokyo_dice.config.ai_config import (
    AIConfig,
    ConfigurationUnavailableError,
    default_ai_config,
    load_ai_config,
    normalize_monster_key,
    read_ai_config,
)
from tokyo_dice.engine.base import Face


class TestDefaults:
    """Tests for the built-in configuration."""

    def test_face_values(self, ai_config):
        values = ai_config.dice_evaluation
        assert values.attack.base_value == 3
        assert values.energy.base_value == 2
        assert values.heal.base_value == 2
        assert [values.for_face(f).base_value for f in (Face.ONE, Face.TWO, Face.THREE)] == [1, 2, 3]
        assert values.attack.situational_multiplier == 1.0

    def test_personality_tables(self, ai_config):
        tables = ai_config.personalities
        assert tables.aggression.attack == 0.5
        assert tables.aggression.heal == -0.3
        assert tables.strategy.numeric == 0.3
        assert tables.strategy.threshold == 0.2
        assert tables.risk.threshold == 0.3
        assert tables.threshold.base == 3.0
        assert tables.threshold.endgame_bonus == 0.5

    def test_threats_and_opportunities(self, ai_config):
        assert ai_config.threats.victory_point_threat == 15
        assert ai_config.threats.health_threat == 3
        assert ai_config.threats.energy_threat == 8
        assert ai_config.threats.tokyo_threat is True
        assert ai_config.opportunities.tokyo_entry_health == 5

    def test_frozen(self, ai_config):
        with pytest.raises(ValidationError):
            ai_config.threats.health_threat = 1


class TestDocumentParsing:
    """Tests for parsing the camelCase document."""

    def test_full_document(self, config_document):
        config = AIConfig.model_validate(config_document)
        assert config.dice_evaluation.attack.base_value == 4
        assert config.dice_evaluation.attack.situational_multiplier == 1.5
        assert config.dice_evaluation.energy.situational_multiplier == 1.0
        assert config.personalities.threshold.endgame_bonus == 0.75
        assert config.threats.tokyo_threat is False

    def test_partial_document_keeps_defaults(self):
        config = AIConfig.model_validate({"threats": {"healthThreat": 2}})
        assert config.threats.health_threat == 2
        assert config.threats.victory_point_threat == 15
        assert config.dice_evaluation.three.base_value == 3

    def test_unknown_keys_ignored(self):
        config = AIConfig.model_validate({"powerCards": {"enabled": True}})
        assert config == default_ai_config()

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            AIConfig.model_validate({"threats": {"healthThreat": "lots"}})

    @pytest.mark.parametrize("name", ["The Kraken", "the kraken", "THEKRAKEN"])
    def test_monster_adjustment_lookup(self, config_document, name):
        config = AIConfig.model_validate(config_document)
        adjustment = config.monster_adjustment(name)
        assert adjustment.risk == 5
        assert adjustment.aggression is None

    def test_unknown_monster(self, config_document):
        config = AIConfig.model_validate(config_document)
        assert config.monster_adjustment("Meka Dragon") is None
        assert config.monster_adjustment("") is None

    def test_normalize_monster_key(self):
        assert normalize_monster_key("  Cyber\tKitty ") == "cyberkitty"


class TestReadAIConfig:
    """Tests for read_ai_config()."""

    def test_reads_file(self, tmp_path, config_document):
        path = tmp_path / "ai-config.json"
        path.write_text(json.dumps(config_document), encoding="utf-8")
        assert read_ai_config(path).threats.energy_threat == 6

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationUnavailableError, match="Cannot read"):
            read_ai_config(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "ai-config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationUnavailableError, match="Cannot read"):
            read_ai_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "ai-config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ConfigurationUnavailableError, match="must contain a JSON object"):
            read_ai_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "ai-config.json"
        path.write_text(json.dumps({"diceEvaluation": {"attack": {}}}), encoding="utf-8")
        with pytest.raises(ConfigurationUnavailableError, match="Invalid configuration"):
            read_ai_config(path)


class TestLoadAIConfig:
    """Tests for load_ai_config() fallbacks."""

    def test_no_path(self):
        assert load_ai_config() == default_ai_config()

    def test_loads(self, tmp_path, config_document, caplog):
        path = tmp_path / "ai-config.json"
        path.write_text(json.dumps(config_document), encoding="utf-8")
        with caplog.at_level(logging.INFO, logger="tokyo_dice.config.ai_config"):
            config = load_ai_config(str(path))
        assert config.threats.victory_point_threat == 12
        assert "Loaded AI configuration" in caplog.text

    def test_broken_file_falls_back(self, tmp_path, caplog):
        path = tmp_path / "ai-config.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="tokyo_dice.config.ai_config"):
            config = load_ai_config(path)
        assert config == default_ai_config()
        assert "using built-in defaults" in caplog.text
