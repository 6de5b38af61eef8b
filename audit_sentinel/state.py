"""Process-wide audit configuration.

:class:`CurrentConfig` holds the live ``pgaudit.log`` bit-set and the
``pgaudit.log_catalog`` flag as one immutable :class:`AuditSnapshot`.
Publishing a new value replaces the snapshot reference in a single
assignment, so readers never take a lock and never see a mix of old and
new values.  Writers are serialized so the two settings cannot clobber
each other.

The committer functions are the second half of the validate/commit
protocol started by :func:`audit_sentinel.validator.validate`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Optional

from audit_sentinel.classes import LOG_NONE, LogClass, describe
from audit_sentinel.constants import DEFAULT_LOG_CATALOG
from audit_sentinel.validator import LogCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditSnapshot:
    """One consistent view of the live audit settings."""

    log_bitmap: int = LOG_NONE
    log_catalog: bool = DEFAULT_LOG_CATALOG

    def is_enabled(self, log_class: LogClass) -> bool:
        return bool(self.log_bitmap & log_class)


class CurrentConfig:
    """Single-writer / multi-reader holder of the live audit settings."""

    def __init__(self, snapshot: Optional[AuditSnapshot] = None) -> None:
        self._snapshot: AuditSnapshot = snapshot if snapshot is not None else AuditSnapshot()
        self._write_lock = threading.Lock()

    # ── Readers ──────────────────────────────────────────────────────

    def snapshot(self) -> AuditSnapshot:
        """Return the current snapshot.  Never blocks."""
        return self._snapshot

    @property
    def log_bitmap(self) -> int:
        return self._snapshot.log_bitmap

    @property
    def log_catalog(self) -> bool:
        return self._snapshot.log_catalog

    def is_enabled(self, log_class: LogClass) -> bool:
        return self._snapshot.is_enabled(log_class)

    # ── Writers ──────────────────────────────────────────────────────

    def publish_log_bitmap(self, bits: int) -> None:
        with self._write_lock:
            self._snapshot = replace(self._snapshot, log_bitmap=bits)

    def publish_log_catalog(self, value: bool) -> None:
        with self._write_lock:
            self._snapshot = replace(self._snapshot, log_catalog=value)

    def reset(self) -> None:
        """Restore the compiled-in defaults."""
        with self._write_lock:
            self._snapshot = AuditSnapshot()

    def __repr__(self) -> str:
        snap = self._snapshot
        return (
            f"CurrentConfig(log={describe(snap.log_bitmap)!r}, "
            f"log_catalog={snap.log_catalog})"
        )


# Module-level singleton consulted by audit decisions.
current_config = CurrentConfig()


def commit_log(
    candidate: Optional[LogCandidate],
    config: Optional[CurrentConfig] = None,
) -> None:
    """Publish a validated candidate as the live class bit-set.

    ``None`` means the assignment was suppressed (for example because a
    newer validation superseded this one); the live value is left alone.
    """
    if candidate is None:
        logger.debug("Class list assignment suppressed; keeping current value.")
        return
    target = config if config is not None else current_config
    target.publish_log_bitmap(candidate.bits)
    logger.info("Audit log classes set to '%s' (%#x)", describe(candidate.bits), candidate.bits)


def assign_log_catalog(value: bool, config: Optional[CurrentConfig] = None) -> None:
    """Publish a new ``log_catalog`` value.  Accepted unconditionally."""
    target = config if config is not None else current_config
    target.publish_log_catalog(bool(value))
    logger.info("Audit catalog logging %s", "enabled" if value else "disabled")
