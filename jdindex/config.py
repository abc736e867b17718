"""
User configuration for jd.

Settings live in a YAML file and are merged over the defaults below:

    index_filename: .JdIndex   # name of the index file at the system root
    color: true                # colour "Error:", "Indexing" etc.
    separator: "_"             # put between number and title by `jd add`

Resolution:
    1. JD_CONFIG env var (path to a config file)
    2. $XDG_CONFIG_HOME/jd/config.yaml, or ~/.config/jd/config.yaml
    3. No file = defaults

JD_INDEX_FILENAME overrides index_filename from any source.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULTS = {
    "index_filename": ".JdIndex",
    "color": True,
    "separator": "_",
}

CONFIG_FILENAME = "config.yaml"


def find_config_file() -> Optional[Path]:
    """Find the config file, if any."""
    env_path = os.environ.get("JD_CONFIG")
    if env_path:
        p = Path(env_path).expanduser()
        if p.exists():
            return p
        return None

    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    p = base / "jd" / CONFIG_FILENAME
    if p.exists():
        return p
    return None


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dicts. Override values win.
    Lists are replaced, not appended.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_file: Optional[Path] = None) -> dict:
    """Load settings, falling back to the defaults if the file is unreadable."""
    if config_file is None:
        config_file = find_config_file()

    config = DEFAULTS.copy()
    if config_file is not None:
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Ignoring config file %s: %s", config_file, e)
            data = {}
        if isinstance(data, dict):
            config = deep_merge(config, data)
        else:
            logger.warning("Ignoring config file %s: not a mapping", config_file)

    env_name = os.environ.get("JD_INDEX_FILENAME")
    if env_name:
        config["index_filename"] = env_name
    return config


def get_setting(config: dict, key: str, default: Any = None) -> Any:
    """Get a setting, supporting dotted keys for nested values."""
    current = config
    for part in key.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(part)
    return current if current is not None else default
