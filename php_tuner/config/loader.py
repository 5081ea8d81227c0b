"""Settings loading from YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import SettingsError
from .settings import TunerSettings

SETTINGS_ENV_VAR = "PHP_TUNER_SETTINGS"


def load_settings(path: Optional[Union[str, Path]] = None) -> TunerSettings:
    """Load settings from ``path``, then ``$PHP_TUNER_SETTINGS``, else defaults.

    Raises:
        SettingsError: file missing, not valid YAML, or failing validation
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        if not env_path:
            return TunerSettings()
        path = env_path

    settings_path = Path(path)
    if not settings_path.is_file():
        raise SettingsError(f"settings file not found: {settings_path}")

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"invalid YAML in {settings_path}: {e}", original_exception=e) from e

    if not isinstance(raw, dict):
        raise SettingsError(f"settings file must contain a mapping: {settings_path}")

    try:
        return TunerSettings(**raw)
    except ValidationError as e:
        raise SettingsError(f"invalid settings in {settings_path}: {e}", original_exception=e) from e
