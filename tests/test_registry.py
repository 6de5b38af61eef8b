"""Tests for the settings registry and the audit setting definitions."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from audit_sentinel.classes import LOG_ALL, LogClass
from audit_sentinel.config.registry import (
    SettingContext,
    SettingFlag,
    SettingsRegistry,
    register_audit_settings,
)
from audit_sentinel.constants import LOG_CATALOG_SETTING, LOG_SETTING
from audit_sentinel.errors import (
    ConfigurationError,
    InvalidBooleanError,
    ListSyntaxError,
    UnknownClassError,
    UnknownSettingError,
)
from audit_sentinel.state import CurrentConfig
from audit_sentinel.validator import LogCandidate


@pytest.fixture
def config():
    return CurrentConfig()


@pytest.fixture
def registry(config):
    reg = SettingsRegistry()
    register_audit_settings(reg, config)
    return reg


# ── Generic registry behaviour ──────────────────────────────────────────


class TestDefinitions:
    def test_boot_value_goes_through_hooks(self):
        check = MagicMock(return_value="extra")
        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_string("x.y", "desc", "boot", check_hook=check, assign_hook=assign)
        check.assert_called_once_with("boot")
        assign.assert_called_once_with("boot", "extra")
        assert reg.get("x.y") == "boot"

    def test_duplicate_definition_rejected(self):
        reg = SettingsRegistry()
        reg.define_bool("x.flag", "desc", True)
        with pytest.raises(ConfigurationError, match="already defined"):
            reg.define_bool("X.FLAG", "desc", False)

    def test_invalid_boot_value_leaves_no_definition(self):
        reg = SettingsRegistry()
        with pytest.raises(ValueError):
            reg.define_string("x.y", "desc", "bad", check_hook=MagicMock(side_effect=ValueError))
        assert not reg.is_defined("x.y")

    def test_unknown_setting(self):
        reg = SettingsRegistry()
        with pytest.raises(UnknownSettingError, match="nope"):
            reg.get("nope")
        with pytest.raises(UnknownSettingError):
            reg.set("nope", "1")

    def test_names_are_case_insensitive(self):
        reg = SettingsRegistry()
        reg.define_bool("x.flag", "desc", True)
        assert reg.get("X.Flag") == "on"

    def test_string_setting_rejects_non_string(self):
        reg = SettingsRegistry()
        reg.define_string("x.s", "desc", "a")
        with pytest.raises(ConfigurationError, match="requires a string"):
            reg.set("x.s", 5)


class TestTwoPhase:
    def test_prepare_has_no_visible_effect(self):
        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_string("x.s", "desc", "a", check_hook=str.upper, assign_hook=assign)
        assign.reset_mock()
        reg.prepare("x.s", "b")
        assign.assert_not_called()
        assert reg.get("x.s") == "a"

    def test_apply_passes_extra(self):
        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_string("x.s", "desc", "a", check_hook=str.upper, assign_hook=assign)
        assert reg.apply(reg.prepare("x.s", "b")) is True
        assign.assert_called_with("b", "B")
        assert reg.get("x.s") == "b"

    def test_superseded_assignment_gets_none(self):
        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_string("x.s", "desc", "a", check_hook=str.upper, assign_hook=assign)
        older = reg.prepare("x.s", "b")
        newer = reg.prepare("x.s", "c")
        assert reg.apply(older) is False
        assign.assert_called_with("b", None)
        assert reg.get("x.s") == "a"
        assert reg.apply(newer) is True
        assign.assert_called_with("c", "C")
        assert reg.get("x.s") == "c"

    def test_superseded_without_check_hook_skips_assign(self):
        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_bool("x.flag", "desc", True, assign_hook=assign)
        assign.reset_mock()
        older = reg.prepare("x.flag", False)
        reg.prepare("x.flag", True)
        assert reg.apply(older) is False
        assign.assert_not_called()
        assert reg.get("x.flag") == "on"

    def test_failed_check_changes_nothing(self):
        def only_ok(value):
            if value != "ok":
                raise ValueError(value)
            return value

        assign = MagicMock()
        reg = SettingsRegistry()
        reg.define_string("x.s", "desc", "ok", check_hook=only_ok, assign_hook=assign)
        assign.reset_mock()
        with pytest.raises(ValueError):
            reg.set("x.s", "bad")
        assign.assert_not_called()
        assert reg.get("x.s") == "ok"

    def test_reset_restores_boot_value(self):
        reg = SettingsRegistry()
        reg.define_bool("x.flag", "desc", True)
        reg.set("x.flag", "off")
        reg.reset("x.flag")
        assert reg.get("x.flag") == "on"


# ── Audit settings ──────────────────────────────────────────────────────


class TestAuditSettings:
    def test_defaults(self, registry, config):
        assert registry.get(LOG_SETTING) == "none"
        assert registry.get(LOG_CATALOG_SETTING) == "on"
        assert config.log_bitmap == 0
        assert config.log_catalog is True

    def test_set_log(self, registry, config):
        registry.set(LOG_SETTING, "all,-write")
        assert config.log_bitmap == LOG_ALL & ~int(LogClass.WRITE)
        assert registry.get(LOG_SETTING) == "all,-write"

    def test_invalid_log_keeps_previous(self, registry, config):
        registry.set(LOG_SETTING, "read")
        with pytest.raises(UnknownClassError):
            registry.set(LOG_SETTING, "read,bogus")
        with pytest.raises(ListSyntaxError):
            registry.set(LOG_SETTING, "")
        assert config.log_bitmap == LogClass.READ
        assert registry.get(LOG_SETTING) == "read"

    def test_check_hook_returns_candidate(self, registry):
        pending = registry.prepare(LOG_SETTING, "ddl")
        assert isinstance(pending.extra, LogCandidate)
        assert pending.extra.bits == LogClass.DDL

    def test_superseded_log_assignment_is_suppressed(self, registry, config):
        older = registry.prepare(LOG_SETTING, "ddl")
        newer = registry.prepare(LOG_SETTING, "role")
        registry.apply(older)
        assert config.log_bitmap == 0
        registry.apply(newer)
        assert config.log_bitmap == LogClass.ROLE

    def test_set_log_catalog(self, registry, config):
        registry.set(LOG_CATALOG_SETTING, "off")
        assert config.log_catalog is False
        assert registry.get(LOG_CATALOG_SETTING) == "off"
        registry.set(LOG_CATALOG_SETTING, True)
        assert config.log_catalog is True

    def test_invalid_log_catalog(self, registry, config):
        with pytest.raises(InvalidBooleanError):
            registry.set(LOG_CATALOG_SETTING, "sometimes")
        assert config.log_catalog is True

    def test_set_log_catalog_integer(self, registry, config):
        registry.set(LOG_CATALOG_SETTING, 0)
        assert config.log_catalog is False
        registry.set(LOG_CATALOG_SETTING, 1)
        assert config.log_catalog is True

    @pytest.mark.parametrize("raw", [2, 1.5, None])
    def test_log_catalog_non_boolean_types(self, registry, config, raw):
        with pytest.raises(ConfigurationError):
            registry.set(LOG_CATALOG_SETTING, raw)
        assert config.log_catalog is True

    def test_register_twice_is_noop(self, registry, config):
        registry.set(LOG_SETTING, "read")
        register_audit_settings(registry, config)
        assert config.log_bitmap == LogClass.READ

    def test_describe(self, registry):
        rows = {row["name"]: row for row in registry.describe()}
        assert rows[LOG_SETTING]["vartype"] == "string"
        assert rows[LOG_SETTING]["context"] == SettingContext.SUSET.value
        assert rows[LOG_CATALOG_SETTING]["vartype"] == "bool"
        assert "comma-separated" in rows[LOG_SETTING]["short_desc"]

    def test_flags(self, registry):
        setting = registry._lookup(LOG_SETTING)
        assert setting.flags & SettingFlag.LIST_INPUT
        assert setting.flags & SettingFlag.NOT_IN_SAMPLE
        assert not registry._lookup(LOG_CATALOG_SETTING).flags & SettingFlag.LIST_INPUT
