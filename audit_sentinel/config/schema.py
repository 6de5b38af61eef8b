"""Pydantic model for the audit settings file.

The file holds the operator's values for ``pgaudit.log`` and
``pgaudit.log_catalog``, either at the top level or under a
``pgaudit:`` section::

    pgaudit:
      log: "all, -misc_set"
      log_catalog: off
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from audit_sentinel.config.literals import parse_bool
from audit_sentinel.constants import DEFAULT_LOG, DEFAULT_LOG_CATALOG, LOG_SETTING
from audit_sentinel.errors import InvalidBooleanError, ValidationError
from audit_sentinel.validator import validate


def _quote_token(item: str) -> str:
    return '"' + item.replace('"', '""') + '"'


class AuditSettingsConfig(BaseModel):
    """Validated audit settings."""

    model_config = ConfigDict(extra="forbid")

    log: str = Field(
        default=DEFAULT_LOG,
        description="Comma-separated classes to log; prefix a class with '-' to subtract it.",
    )
    log_catalog: bool = Field(
        default=DEFAULT_LOG_CATALOG,
        description="Log statements whose relations are all in pg_catalog.",
    )

    @field_validator("log", mode="before")
    @classmethod
    def _validate_log(cls, v: object) -> object:
        if isinstance(v, (list, tuple)):
            # YAML sequence form: [read, write, -ddl]; one item is one token
            v = ",".join(_quote_token(str(item)) for item in v)
        if isinstance(v, str):
            try:
                validate(v, setting=LOG_SETTING)
            except ValidationError as exc:
                raise ValueError(exc.detail) from exc
        return v

    @field_validator("log_catalog", mode="before")
    @classmethod
    def _parse_log_catalog(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return parse_bool(v)
            except InvalidBooleanError as exc:
                raise ValueError(str(exc)) from exc
        return v
