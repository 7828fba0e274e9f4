from __future__ import annotations

import logging
import os
from pathlib import Path

import tomlkit

from domain.models import ServiceSettings
from shared.constants import SETTINGS_DIR_NAME, SETTINGS_FILE_NAME

logger = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """
    Location of the settings file.

    $XDG_CONFIG_HOME/navprovider/settings.toml, or ~/.config/... when the
    variable is not set.
    """
    base = os.getenv('XDG_CONFIG_HOME') or str(Path.home() / '.config')
    return Path(base) / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


def load_settings(path: str | Path | None = None) -> ServiceSettings:
    """
    Load and validate TOML settings.

    A missing file is not an error: defaults are returned.
    """
    settings_path = Path(path) if path is not None else default_settings_path()
    if not settings_path.exists():
        logger.info('Settings file %s not found, using defaults', settings_path)
        return ServiceSettings()
    text = settings_path.read_text(encoding='utf-8')
    data = tomlkit.parse(text).unwrap()
    settings = ServiceSettings.model_validate(data)
    logger.info(
        'Settings loaded from %s: provider=%s cache_dir=%s',
        settings_path,
        settings.provider_url,
        settings.cache_path,
    )
    return settings


def save_settings(settings: ServiceSettings, path: str | Path | None = None) -> Path:
    """Write settings as TOML, creating the parent directory if needed."""
    settings_path = Path(path) if path is not None else default_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    text = tomlkit.dumps(settings.model_dump())
    settings_path.write_text(text, encoding='utf-8')
    return settings_path
