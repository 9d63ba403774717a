"""
Tokyo Dice Configuration.

Environment settings, logging configuration, and the AI configuration document.
"""

from tokyo_dice.config.ai_config import (
    AIConfig,
    ConfigurationUnavailableError,
    default_ai_config,
    load_ai_config,
    read_ai_config,
)
from tokyo_dice.config.settings import Settings, configure_logging, get_settings

__all__ = [
    "AIConfig",
    "ConfigurationUnavailableError",
    "Settings",
    "configure_logging",
    "default_ai_config",
    "get_settings",
    "load_ai_config",
    "read_ai_config",
]
