"""Shared constants for Audit Sentinel."""

PACKAGE_NAME = "Audit Sentinel"
PACKAGE_VERSION = "0.1.0"

# Setting names (operator-facing, must stay stable)
LOG_SETTING = "pgaudit.log"
LOG_CATALOG_SETTING = "pgaudit.log_catalog"

# Setting defaults
DEFAULT_LOG = "none"
DEFAULT_LOG_CATALOG = True

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

# Settings file discovery
SETTINGS_ENV_VAR = "AUDIT_SENTINEL_CONFIG"
SETTINGS_SEARCH_ORDER = ("audit.yaml", "audit.yml")
SETTINGS_SECTION = "pgaudit"
