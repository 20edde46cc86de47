"""
Locations of the files RouteGraph reads at startup.

config.json and .env sit beside the project root in a source checkout and
beside the executable in a frozen build, never inside the bundle.
"""

import sys
from pathlib import Path

CONFIG_FILENAME = "config.json"
ENV_FILENAME = ".env"


def get_app_dir() -> Path:
    """Directory holding config.json and .env."""
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


def get_config_path() -> Path:
    return get_app_dir() / CONFIG_FILENAME


def get_env_path() -> Path:
    return get_app_dir() / ENV_FILENAME
