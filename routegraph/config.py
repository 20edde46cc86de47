"""
Configuration management for RouteGraph.

Settings come from three layers, later ones winning:
1. EditorConfig defaults
2. config.json next to the project root / executable
3. ROUTEGRAPH_* environment variables (app.py loads .env into the environment)

Bad values never stop the editor: they are logged and the default is kept.
"""

import json
import logging
import math
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from routegraph.paths import get_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ROUTEGRAPH_"

# Fields that must be strictly greater than zero
POSITIVE_FIELDS = ("node_radius", "canvas_width", "canvas_height")


@dataclass
class EditorConfig:
    node_radius: float = 20.0
    edge_tolerance: float = 1.0
    canvas_width: int = 1000
    canvas_height: int = 640
    # 0 runs the search inside the click handler; > 0 animates one node per tick
    animation_step_ms: int = 0
    port: int = 8081
    log_level: str = "INFO"

    @property
    def animation_step_seconds(self) -> float:
        return self.animation_step_ms / 1000.0


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load raw settings from config.json. Missing or unreadable files give {}."""
    config_path = path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config {config_path}: expected a JSON object")
            return {}
        return data
    return {}


def save_config(config: EditorConfig, path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(asdict(config), f, indent=2)


def _coerce(name: str, raw: Any, default: Any) -> Any:
    kind = type(default)
    if kind is int and isinstance(raw, float) and not raw.is_integer():
        logger.warning(f"Expected a whole number for {name}: {raw!r}, keeping {default!r}")
        return default
    try:
        value = kind(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid value for {name}: {raw!r}, keeping {default!r}")
        return default
    if kind is float and not math.isfinite(value):
        logger.warning(f"Non-finite value for {name}: {raw!r}, keeping {default!r}")
        return default
    if kind in (int, float) and value < 0:
        logger.warning(f"Negative value for {name}: {raw!r}, keeping {default!r}")
        return default
    if name in POSITIVE_FIELDS and value == 0:
        logger.warning(f"{name} must be positive, keeping {default!r}")
        return default
    return value


def load_config(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> EditorConfig:
    """
    Build the effective configuration.

    Args:
        path: config.json location (defaults to the app directory)
        environ: Environment mapping (defaults to os.environ)
    """
    env = os.environ if environ is None else environ
    file_values = load_config_file(path)
    config = EditorConfig()

    for f in fields(EditorConfig):
        default = getattr(config, f.name)
        raw = file_values.get(f.name)
        env_key = ENV_PREFIX + f.name.upper()
        if env.get(env_key):
            raw = env[env_key]
        if raw is not None:
            setattr(config, f.name, _coerce(f.name, raw, default))

    level = str(config.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Unknown log_level {config.log_level!r}, keeping {EditorConfig.log_level!r}")
        level = EditorConfig.log_level
    config.log_level = level
    return config
