"""Settings definition, loading and hot reload for Audit Sentinel."""

from audit_sentinel.config.literals import format_bool, parse_bool
from audit_sentinel.config.loader import (
    apply_audit_settings,
    load_audit_settings,
    reload_audit_settings,
)
from audit_sentinel.config.registry import (
    BoolSetting,
    PendingAssignment,
    SettingContext,
    SettingFlag,
    SettingsRegistry,
    StringSetting,
    register_audit_settings,
)
from audit_sentinel.config.schema import AuditSettingsConfig
from audit_sentinel.config.watcher import SettingsWatcher

__all__ = [
    "AuditSettingsConfig",
    "BoolSetting",
    "PendingAssignment",
    "SettingContext",
    "SettingFlag",
    "SettingsRegistry",
    "SettingsWatcher",
    "StringSetting",
    "apply_audit_settings",
    "format_bool",
    "load_audit_settings",
    "parse_bool",
    "register_audit_settings",
    "reload_audit_settings",
]
