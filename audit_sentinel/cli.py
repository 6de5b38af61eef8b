"""CLI argument parsing and main entry point.

Provides three subcommands:

* ``audit-sentinel check VALUE``  — validate a ``pgaudit.log`` class list.
* ``audit-sentinel show``         — load the settings file and print the result.
* ``audit-sentinel watch``        — apply the settings file and hot-reload it.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from audit_sentinel.classes import describe
from audit_sentinel.config.loader import apply_audit_settings, load_audit_settings
from audit_sentinel.config.registry import SettingsRegistry, register_audit_settings
from audit_sentinel.config.watcher import DEFAULT_DEBOUNCE, DEFAULT_POLL_INTERVAL, SettingsWatcher
from audit_sentinel.constants import (
    DEFAULT_LOG_LEVEL,
    LOG_DIR,
    PACKAGE_NAME,
    PACKAGE_VERSION,
    SETTINGS_ENV_VAR,
    SETTINGS_SEARCH_ORDER,
)
from audit_sentinel.errors import ConfigurationError, ValidationError
from audit_sentinel.logging_config import setup_logging
from audit_sentinel.state import CurrentConfig
from audit_sentinel.validator import validate

module_logger = logging.getLogger(__name__)


def _find_settings_file() -> str:
    """Locate the settings file in the current directory.

    Falls back to ``CWD/audit.yaml`` if nothing exists (loader will error).
    """
    for name in SETTINGS_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return os.path.join(os.getcwd(), SETTINGS_SEARCH_ORDER[0])


def _resolve_settings_path(cli_path: Optional[str]) -> str:
    """CLI flag → env var → auto-detect."""
    path = cli_path or os.environ.get(SETTINGS_ENV_VAR) or _find_settings_file()
    return os.path.abspath(path)


def _print_settings(registry: SettingsRegistry) -> None:
    rows = registry.describe()
    width = max(len(row["name"]) for row in rows)
    for row in rows:
        print(f"{row['name']:<{width}}  {row['setting']}")


# ── Subcommands ─────────────────────────────────────────────────────────


def _cmd_check(args: argparse.Namespace) -> int:
    try:
        candidate = validate(args.value)
    except ValidationError as exc:
        print(f"invalid: {exc.detail}", file=sys.stderr)
        return 1
    print(f"{candidate.bits:#010x}  {describe(candidate.bits)}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    path = _resolve_settings_path(args.config)
    registry = SettingsRegistry()
    register_audit_settings(registry, CurrentConfig())
    try:
        apply_audit_settings(load_audit_settings(path), registry)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _print_settings(registry)
    return 0


async def _watch(path: str, registry: SettingsRegistry, poll_interval: float) -> None:
    watcher = SettingsWatcher(
        path,
        registry,
        poll_interval=poll_interval,
        debounce=min(DEFAULT_DEBOUNCE, poll_interval),
    )
    watcher.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await watcher.stop()


def _cmd_watch(args: argparse.Namespace) -> int:
    path = _resolve_settings_path(args.config)
    registry = SettingsRegistry()
    register_audit_settings(registry)
    try:
        apply_audit_settings(load_audit_settings(path), registry)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _print_settings(registry)
    module_logger.info("Watching %s for changes", path)
    try:
        asyncio.run(_watch(path, registry, args.poll_interval))
    except KeyboardInterrupt:
        module_logger.info("Watch interrupted by user.")
    return 0


# ── Argument parsing ────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audit-sentinel",
        description=f"{PACKAGE_NAME} v{PACKAGE_VERSION}: audit log class configuration.",
    )
    parser.add_argument(
        "--version", action="version", version=f"{PACKAGE_NAME} {PACKAGE_VERSION}"
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        help="Log level for the file log (default: %(default)s).",
    )
    parser.add_argument(
        "--log-dir",
        default=LOG_DIR,
        help="Directory for the timestamped log file (default: %(default)s).",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write a log file.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Validate a pgaudit.log class list.")
    p_check.add_argument("value", help='Class list, e.g. "all,-misc_set".')
    p_check.set_defaults(func=_cmd_check)

    p_show = sub.add_parser("show", help="Load the settings file and print the effective values.")
    p_show.add_argument("--config", default=None, help="Path to the YAML settings file.")
    p_show.set_defaults(func=_cmd_show)

    p_watch = sub.add_parser("watch", help="Apply the settings file and reload it on change.")
    p_watch.add_argument("--config", default=None, help="Path to the YAML settings file.")
    p_watch.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help="Seconds between file polls (default: %(default)s).",
    )
    p_watch.set_defaults(func=_cmd_watch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, log_dir=None if args.no_log_file else args.log_dir)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
