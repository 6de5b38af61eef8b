"""
Audit Sentinel - configuration core for database session audit logging.

Turns an operator-supplied class list such as ``"all,-misc_set"`` into a
validated bit-set and publishes it atomically to the process-wide
configuration consulted by audit decisions.
"""

from audit_sentinel.classes import LogClass
from audit_sentinel.constants import PACKAGE_NAME, PACKAGE_VERSION
from audit_sentinel.state import CurrentConfig, commit_log, current_config
from audit_sentinel.validator import LogCandidate, validate

__version__ = PACKAGE_VERSION
__app_name__ = PACKAGE_NAME

__all__ = [
    "CurrentConfig",
    "LogCandidate",
    "LogClass",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "__app_name__",
    "__version__",
    "commit_log",
    "current_config",
    "validate",
]
