"""
Configuration management for TaleWeaver.

Parser settings live in a YAML file in the user's config directory:

    introduction_max_words: 145
    description_max_words: 600
    continuation_marker: "..."
    default_stats: [10, 2, 0]

A missing file means defaults. TALEWEAVER_CONFIG overrides the location.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TALEWEAVER_CONFIG"


@dataclass
class ParserSettings:
    """Limits and defaults applied while parsing."""
    introduction_max_words: int = 145
    description_max_words: int = 600
    continuation_marker: str = "..."
    default_stats: tuple[int, int, int] = (10, 2, 0)  # health, luck, skill modifier


def get_config_dir() -> Path:
    """Get the configuration directory."""
    # Use XDG_CONFIG_HOME if set, otherwise ~/.config
    config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(config_home) / "taleweaver"


def get_config_path() -> Path:
    """Get the path to the parser config file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "parser.yaml"


def load_config(path: Optional[Path] = None) -> dict:
    """Load the raw config mapping, returning empty dict if not found."""
    config_path = Path(path) if path else get_config_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", config_path)
        return {}
    return data


def save_config(config: dict, path: Optional[Path] = None) -> Path:
    """Save the config mapping to disk."""
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    return config_path


def settings_from_dict(raw: dict) -> ParserSettings:
    """Build ParserSettings from a config mapping. Unknown keys are ignored."""
    defaults = ParserSettings()
    try:
        stats = defaults.default_stats
        raw_stats = raw.get("default_stats")
        if raw_stats is not None:
            # A partial list only overrides the leading values; the snapshot stays a 3-tuple
            raw_stats = list(raw_stats)[:3]
            padded = raw_stats + list(stats[len(raw_stats):])
            stats = tuple(int(v) for v in padded)
        return ParserSettings(
            introduction_max_words=int(raw.get("introduction_max_words", defaults.introduction_max_words)),
            description_max_words=int(raw.get("description_max_words", defaults.description_max_words)),
            continuation_marker=str(raw.get("continuation_marker", defaults.continuation_marker)),
            default_stats=stats,
        )
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring invalid parser settings: %s", e)
        return defaults


def load_parser_settings(path: Optional[Path] = None) -> ParserSettings:
    """Load ParserSettings from the config file, or defaults."""
    return settings_from_dict(load_config(path))
