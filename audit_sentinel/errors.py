"""
Defines project-specific exception classes.
"""
from typing import Optional


class AuditSentinelError(Exception):
    """Base class for all custom exceptions in Audit Sentinel."""
    pass


class ConfigurationError(AuditSentinelError):
    """Raised when loading, validating or assigning a setting fails."""
    pass


class ValidationError(ConfigurationError):
    """
    Raised when a class list is rejected during validation.

    ``detail`` carries the operator-facing diagnostic. Validation never
    touches live state, so the previous configuration stays in effect.
    """

    def __init__(self, detail: str, setting: Optional[str] = None):
        self.detail = detail
        self.setting = setting

        full_msg = "Invalid value"
        if setting:
            full_msg += f" for parameter \"{setting}\""
        full_msg += f": {detail}"
        super().__init__(full_msg)


class ListSyntaxError(ValidationError):
    """Raised when the raw value is not a well-formed comma-separated list."""

    def __init__(self, setting: Optional[str] = None, position: Optional[int] = None):
        self.position = position
        super().__init__("List syntax is invalid", setting=setting)


class UnknownClassError(ValidationError):
    """Raised when a token does not name a recognized log class."""

    def __init__(self, token: str, setting: Optional[str] = None):
        self.token = token
        super().__init__(f"Unrecognized log class: \"{token}\"", setting=setting)


class ResourceExhaustionError(ValidationError):
    """
    Raised when memory runs out while parsing a class list.

    Only the current validation call fails.
    """

    def __init__(self, setting: Optional[str] = None, orig_exc: Optional[BaseException] = None):
        self.orig_exc = orig_exc
        super().__init__("Out of memory while parsing the class list", setting=setting)


class InvalidBooleanError(ConfigurationError):
    """Raised when a value is not a recognized boolean literal."""

    def __init__(self, value: str, setting: Optional[str] = None):
        self.value = value
        self.setting = setting

        message = f"Invalid boolean value \"{value}\""
        if setting:
            message = f"Parameter \"{setting}\" requires a Boolean value, got \"{value}\""
        super().__init__(message)


class UnknownSettingError(ConfigurationError):
    """Raised when a setting name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unrecognized configuration parameter \"{name}\"")
