"""TOML profiles for enrichment settings."""

from __future__ import annotations

import logging
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError
from pydantic import ValidationError

from domain.errors import ConfigurationError
from domain.models import EnrichmentSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat

logger = logging.getLogger(__name__)


def load_profile(path: str | Path, **overrides) -> EnrichmentSettings:
    """
    Load and validate a TOML profile into EnrichmentSettings.

    Both sectioned (``[dataset]``, ``[query]``, ...) and flat layouts are
    accepted. Keyword ``overrides`` whose value is not None replace profile
    values (command-line arguments take precedence over the file).

    Raises:
        ConfigurationError: the file is missing, not valid TOML, or fails
            validation.
    """
    p = Path(path)
    if not p.exists():
        msg = f'Profile not found: {p}'
        raise ConfigurationError(msg)
    try:
        data = tomlkit.parse(p.read_text(encoding='utf-8')).unwrap()
    except TOMLKitError as e:
        msg = f'Profile {p} is not valid TOML: {e}'
        raise ConfigurationError(msg) from e

    flat = sectioned_to_flat(data)
    logger.info('Profile %s loaded: %s', p, sorted(flat))
    return build_settings(flat, **overrides)


def build_settings(base: dict | None = None, **overrides) -> EnrichmentSettings:
    """Validate ``base`` merged with non-None ``overrides``."""
    merged = dict(base or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return EnrichmentSettings.model_validate(merged)
    except ValidationError as e:
        msg = f'Invalid settings: {e}'
        raise ConfigurationError(msg) from e


def save_profile(path: str | Path, settings: EnrichmentSettings) -> Path:
    """Save settings as a sectioned TOML profile."""
    p = Path(path)
    data = flat_to_sectioned(settings.model_dump(mode='json'))
    p.write_text(tomlkit.dumps(data), encoding='utf-8')
    return p
