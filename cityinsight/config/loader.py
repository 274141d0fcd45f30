"""Load and validate threshold configs from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from cityinsight.config.thresholds import InsightConfig
from cityinsight.exceptions import ConfigurationError

# Default directory for threshold config files
_CONFIG_DIR = Path(__file__).parent / "configs"
_DEFAULT_FILE = "default_thresholds.json"


def load_insight_config(file_path: Path | str | None = None) -> InsightConfig:
    """Load and validate a threshold config from a JSON file.

    If no path is provided, loads the packaged default config.
    """
    if file_path is None:
        file_path = _CONFIG_DIR / _DEFAULT_FILE
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Threshold config not found: {file_path}")

    try:
        with open(file_path, "r") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON: {exc}", config_path=str(file_path)) from exc

    try:
        return InsightConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Config failed validation with {exc.error_count()} error(s): {exc}",
            config_path=str(file_path),
        ) from exc


def get_default_config() -> InsightConfig:
    """Load the packaged default thresholds."""
    return load_insight_config()
