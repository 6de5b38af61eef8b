"""Settings file loading and application.

Loads a YAML settings file, validates it against
:class:`~audit_sentinel.config.schema.AuditSettingsConfig` and pushes the
values through a :class:`~audit_sentinel.config.registry.SettingsRegistry`
so that every change takes the validate/commit path.

The public API is :func:`load_audit_settings`, :func:`apply_audit_settings`
and :func:`reload_audit_settings`.
"""

import logging
import os
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from audit_sentinel.config.registry import SettingsRegistry
from audit_sentinel.config.schema import AuditSettingsConfig
from audit_sentinel.constants import LOG_CATALOG_SETTING, LOG_SETTING, SETTINGS_SECTION
from audit_sentinel.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised settings file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML settings file from *cfg_fpath*.

    A top-level ``pgaudit:`` mapping, when present, is used as the
    settings body.  Raises :class:`ConfigurationError` on I/O or parse
    errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported settings file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except Exception as exc:
        raise ConfigurationError(f"Error reading settings file: {cfg_fpath}\n  {exc}") from exc

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError("Top-level settings content must be a YAML mapping (dictionary).")

    section = raw_data.get(SETTINGS_SECTION, raw_data)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"The '{SETTINGS_SECTION}' section must be a YAML mapping.")
    return section


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


# ── Public API ───────────────────────────────────────────────────────────


def load_audit_settings(cfg_fpath: str) -> AuditSettingsConfig:
    """Load and validate a settings file.

    Raises:
        ConfigurationError: On file I/O errors, parse errors, or
            validation failures (all errors reported at once).
    """
    logger.debug("Loading settings file: %s", cfg_fpath)

    if not os.path.exists(cfg_fpath):
        raise ConfigurationError(f"Settings file does not exist: {cfg_fpath}")

    raw_data = _read_config_file(cfg_fpath)

    try:
        settings = AuditSettingsConfig.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Settings validation failed ({len(exc.errors())} error(s)):\n{error_summary}"
        ) from exc

    logger.info("Settings file loaded: log='%s', log_catalog=%s", settings.log, settings.log_catalog)
    return settings


def apply_audit_settings(settings: AuditSettingsConfig, registry: SettingsRegistry) -> None:
    """Push validated settings through *registry*.

    Both values are checked before either is assigned, so a rejected
    value leaves both settings untouched.
    """
    pending = [
        registry.prepare(LOG_SETTING, settings.log),
        registry.prepare(LOG_CATALOG_SETTING, settings.log_catalog),
    ]
    for assignment in pending:
        registry.apply(assignment)


def reload_audit_settings(cfg_fpath: str, registry: SettingsRegistry) -> bool:
    """Load *cfg_fpath* and apply it, keeping the current values on error.

    Returns ``True`` when the new settings were applied.
    """
    try:
        settings = load_audit_settings(cfg_fpath)
        apply_audit_settings(settings, registry)
    except ConfigurationError as exc:
        logger.error("Settings reload rejected, keeping previous values: %s", exc)
        return False
    return True
