"""In-process settings registry with check/assign hooks.

Models the host facility through which the audit settings are defined
and changed.  Every change is two-phase:

1. :meth:`SettingsRegistry.prepare` runs the setting's *check hook*,
   which validates the new value and returns an opaque *extra* (the
   candidate).  Nothing observable changes.
2. :meth:`SettingsRegistry.apply` runs the *assign hook* with that
   extra.  If another ``prepare`` for the same setting happened in
   between, the older assignment is suppressed and the hook receives
   ``None`` instead.

Usage::

    registry = SettingsRegistry()
    register_audit_settings(registry)
    registry.set("pgaudit.log", "read,write")
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Any, Callable, Dict, List, Optional, Union

from audit_sentinel.config.literals import format_bool, parse_bool
from audit_sentinel.constants import (
    DEFAULT_LOG,
    DEFAULT_LOG_CATALOG,
    LOG_CATALOG_SETTING,
    LOG_SETTING,
)
from audit_sentinel.errors import ConfigurationError, UnknownSettingError
from audit_sentinel.state import CurrentConfig, assign_log_catalog, commit_log, current_config
from audit_sentinel.validator import validate

logger = logging.getLogger(__name__)

CheckHook = Callable[[Any], Any]
AssignHook = Callable[[Any, Any], None]


class SettingContext(str, Enum):
    """Who may change a setting."""

    SUSET = "superuser"
    USERSET = "user"


class SettingFlag(IntFlag):
    NONE = 0
    LIST_INPUT = 1 << 0  # value is a comma-separated list
    NOT_IN_SAMPLE = 1 << 1  # left out of generated sample configs


@dataclass
class _Setting:
    name: str
    short_desc: str
    context: SettingContext = SettingContext.SUSET
    flags: SettingFlag = SettingFlag.NONE
    check_hook: Optional[CheckHook] = None
    assign_hook: Optional[AssignHook] = None
    value: Any = None
    generation: int = 0

    vartype = "unknown"

    def coerce(self, raw: Any) -> Any:
        return raw

    def show(self) -> str:
        return str(self.value)


@dataclass
class StringSetting(_Setting):
    boot_value: str = ""

    vartype = "string"

    def coerce(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise ConfigurationError(
                f"Parameter \"{self.name}\" requires a string value, got {type(raw).__name__}"
            )
        return raw


@dataclass
class BoolSetting(_Setting):
    boot_value: bool = False

    vartype = "bool"

    def coerce(self, raw: Union[str, bool, int]) -> bool:
        return parse_bool(raw, setting=self.name)

    def show(self) -> str:
        return format_bool(bool(self.value))


@dataclass(frozen=True)
class PendingAssignment:
    """A checked value waiting for :meth:`SettingsRegistry.apply`."""

    name: str
    value: Any
    extra: Any = field(repr=False)
    generation: int


class SettingsRegistry:
    """Named settings with two-phase updates."""

    def __init__(self) -> None:
        self._settings: Dict[str, _Setting] = {}
        self._generations = itertools.count(1)
        self._lock = threading.Lock()

    # ── Definition ───────────────────────────────────────────────────

    def define_string(
        self,
        name: str,
        short_desc: str,
        boot_value: str,
        *,
        context: SettingContext = SettingContext.SUSET,
        flags: SettingFlag = SettingFlag.NONE,
        check_hook: Optional[CheckHook] = None,
        assign_hook: Optional[AssignHook] = None,
    ) -> StringSetting:
        setting = StringSetting(
            name=name,
            short_desc=short_desc,
            context=context,
            flags=flags,
            check_hook=check_hook,
            assign_hook=assign_hook,
            boot_value=boot_value,
        )
        self._define(setting)
        return setting

    def define_bool(
        self,
        name: str,
        short_desc: str,
        boot_value: bool,
        *,
        context: SettingContext = SettingContext.SUSET,
        flags: SettingFlag = SettingFlag.NONE,
        check_hook: Optional[CheckHook] = None,
        assign_hook: Optional[AssignHook] = None,
    ) -> BoolSetting:
        setting = BoolSetting(
            name=name,
            short_desc=short_desc,
            context=context,
            flags=flags,
            check_hook=check_hook,
            assign_hook=assign_hook,
            boot_value=boot_value,
        )
        self._define(setting)
        return setting

    def _define(self, setting: _Setting) -> None:
        key = setting.name.lower()
        if key in self._settings:
            raise ConfigurationError(f"Parameter \"{setting.name}\" is already defined")
        # The boot value goes through the same hooks as any later change.
        self._settings[key] = setting
        try:
            self.set(setting.name, setting.boot_value)
        except Exception:
            del self._settings[key]
            raise
        logger.debug("Defined %s parameter '%s' = %s", setting.vartype, setting.name, setting.show())

    def is_defined(self, name: str) -> bool:
        return name.lower() in self._settings

    def _lookup(self, name: str) -> _Setting:
        try:
            return self._settings[name.lower()]
        except KeyError:
            raise UnknownSettingError(name) from None

    # ── Two-phase update ─────────────────────────────────────────────

    def prepare(self, name: str, raw: Any) -> PendingAssignment:
        """Check *raw* for setting *name* without changing anything visible."""
        setting = self._lookup(name)
        value = setting.coerce(raw)
        extra = setting.check_hook(value) if setting.check_hook is not None else None
        with self._lock:
            generation = next(self._generations)
            setting.generation = generation
        return PendingAssignment(name=setting.name, value=value, extra=extra, generation=generation)

    def apply(self, pending: PendingAssignment) -> bool:
        """Assign a prepared value.

        Returns ``False`` when the assignment was superseded by a newer
        :meth:`prepare`.  A superseded assignment calls the assign hook
        with ``None`` as extra if the setting has a check hook, and skips
        it otherwise.
        """
        setting = self._lookup(pending.name)
        with self._lock:
            current = pending.generation == setting.generation
            if current:
                setting.value = pending.value
            if setting.assign_hook is not None:
                if current:
                    setting.assign_hook(pending.value, pending.extra)
                elif setting.check_hook is not None:
                    setting.assign_hook(pending.value, None)
        if not current:
            logger.debug("Assignment to '%s' superseded; suppressed.", pending.name)
        return current

    def set(self, name: str, raw: Any) -> None:
        self.apply(self.prepare(name, raw))

    def get(self, name: str) -> str:
        """Return the displayed value of a setting."""
        return self._lookup(name).show()

    def reset(self, name: str) -> None:
        setting = self._lookup(name)
        self.set(setting.name, setting.boot_value)

    def describe(self) -> List[Dict[str, str]]:
        """Return one row per setting, sorted by name."""
        return [
            {
                "name": s.name,
                "setting": s.show(),
                "vartype": s.vartype,
                "context": s.context.value,
                "short_desc": s.short_desc,
            }
            for s in sorted(self._settings.values(), key=lambda s: s.name)
        ]


# ── Audit settings ──────────────────────────────────────────────────────

_LOG_DESC = (
    "Specifies which classes of statements will be logged by session audit "
    "logging. Multiple classes can be provided using a comma-separated "
    "list and classes can be subtracted by prefacing the class with a "
    "- sign."
)

_LOG_CATALOG_DESC = (
    "Specifies that session logging should be enabled in the case where "
    "all relations in a statement are in pg_catalog.  Disabling this "
    "setting will reduce noise in the log from tools like psql and PgAdmin "
    "that query the catalog heavily."
)


def register_audit_settings(
    registry: SettingsRegistry,
    config: Optional[CurrentConfig] = None,
) -> None:
    """Define ``pgaudit.log`` and ``pgaudit.log_catalog`` on *registry*.

    Both publish into *config* (the process-wide config by default).
    Registering twice on the same registry does nothing.
    """
    if registry.is_defined(LOG_SETTING):
        return

    target = config if config is not None else current_config

    registry.define_string(
        LOG_SETTING,
        _LOG_DESC,
        DEFAULT_LOG,
        context=SettingContext.SUSET,
        flags=SettingFlag.LIST_INPUT | SettingFlag.NOT_IN_SAMPLE,
        check_hook=lambda value: validate(value, setting=LOG_SETTING),
        assign_hook=lambda _value, candidate: commit_log(candidate, target),
    )
    registry.define_bool(
        LOG_CATALOG_SETTING,
        _LOG_CATALOG_DESC,
        DEFAULT_LOG_CATALOG,
        context=SettingContext.SUSET,
        flags=SettingFlag.NOT_IN_SAMPLE,
        assign_hook=lambda value, _extra: assign_log_catalog(value, target),
    )
    logger.info("Registered audit settings '%s' and '%s'", LOG_SETTING, LOG_CATALOG_SETTING)
