"""
Configuration Module

Loads society and report settings from YAML, falling back to built-in
defaults for anything the file does not set.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"
CONFIG_FILENAME = "society_config.yaml"

DEFAULTS: dict[str, Any] = {
    "society": {
        "name": "Society Fund",
    },
    "reports": {
        "file_prefix": "society-fund",
        "output_dir": "output",
        "currency_prefix": "Rs ",
        "status_tokens": {
            "paid": "Yes",
            "unpaid": "No",
        },
    },
    "excel": {
        "currency_format": "#,##0",
        "currency_decimal_format": "#,##0.00",
        "styles": {
            "title": {"font": "Arial", "font_size": 14, "bold": True, "fill_color": "2980B9", "font_color": "FFFFFF"},
            "heading": {"font": "Arial", "font_size": 11, "bold": True, "fill_color": "D9E1F2"},
            "header": {"font": "Arial", "font_size": 10, "bold": True, "fill_color": "D9E1F2"},
            "footer": {"font": "Arial", "font_size": 10, "bold": True, "fill_color": "D9D9D9"},
        },
        "status_colors": {
            "paid": "008000",
            "unpaid": "FF0000",
        },
    },
    "pdf": {
        "page_size": "A4",
        "accent_color": [41, 128, 185],
        "footer_color": [169, 169, 169],
        "stripe_color": [245, 245, 245],
        "status_colors": {
            "paid": [0, 128, 0],
            "unpaid": [255, 0, 0],
        },
    },
}


def _merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_database_url() -> str:
    """Build the database URL from the environment.

    Returns:
        SQLAlchemy database URL
    """
    return os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg://{os.getenv('POSTGRES_USER', 'society')}:"
        f"{os.getenv('POSTGRES_PASSWORD', 'password')}@"
        f"{os.getenv('POSTGRES_HOST', 'localhost')}:"
        f"{os.getenv('POSTGRES_PORT', '5432')}/"
        f"{os.getenv('POSTGRES_DB', 'society_fund')}"
    )


class SocietyConfig:
    """Society and report configuration loaded from society_config.yaml."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize configuration.

        Args:
            config_dir: Path to configuration directory
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML."""
        config_file = self.config_dir / CONFIG_FILENAME
        if config_file.exists():
            with open(config_file) as f:
                loaded = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from {config_file}")
        else:
            loaded = {}
        self.config = _merge(DEFAULTS, loaded)

    @property
    def society_name(self) -> str:
        return self.config["society"]["name"]

    @property
    def reports(self) -> dict:
        return self.config["reports"]

    @property
    def excel(self) -> dict:
        return self.config["excel"]

    @property
    def pdf(self) -> dict:
        return self.config["pdf"]

    @property
    def output_dir(self) -> Path:
        output_dir = Path(self.reports["output_dir"])
        if not output_dir.is_absolute():
            output_dir = self.config_dir.parent / output_dir
        return output_dir
