"""Async settings file watcher with debounce.

Polls the settings file's modification time and re-applies it through
the settings registry after a debounce period.  A rejected file is
logged and the previous live values stay in effect until the next
change.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Callable, Optional

from audit_sentinel.config.loader import reload_audit_settings
from audit_sentinel.config.registry import SettingsRegistry

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL: float = 2.0
DEFAULT_DEBOUNCE: float = 1.0

ReloadFn = Callable[[str, SettingsRegistry], bool]


class SettingsWatcher:
    """Poll-based async watcher that hot-reloads audit settings.

    Parameters
    ----------
    settings_path:
        Path to the YAML settings file.
    registry:
        Registry the audit settings are defined on.
    poll_interval:
        Seconds between ``os.stat`` polls.
    debounce:
        Seconds the file must stay unchanged before it is reloaded, so a
        burst of editor writes produces one reload.
    reload:
        Function doing the reload; defaults to
        :func:`~audit_sentinel.config.loader.reload_audit_settings`.
    """

    def __init__(
        self,
        settings_path: str,
        registry: SettingsRegistry,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        debounce: float = DEFAULT_DEBOUNCE,
        reload: ReloadFn = reload_audit_settings,
    ) -> None:
        self._path = settings_path
        self._registry = registry
        self._poll_interval = poll_interval
        self._debounce = debounce
        self._reload = reload

        self._task: Optional[asyncio.Task[None]] = None
        self._last_mtime: float = 0.0
        self.reloads: int = 0
        self.rejected: int = 0

    def start(self) -> None:
        """Begin watching.  Calling it again while running does nothing."""
        if self.watching:
            return
        self._last_mtime = self._mtime()
        self._task = asyncio.create_task(self._run(), name="settings-watcher")
        logger.info("Settings watcher started: %s", self._path)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Settings watcher stopped.")

    @property
    def watching(self) -> bool:
        return self._task is not None and not self._task.done()

    def _mtime(self) -> float:
        try:
            return os.stat(self._path).st_mtime
        except OSError:
            return 0.0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)

            mtime = self._mtime()
            if mtime == 0.0 or mtime == self._last_mtime:
                continue

            logger.debug("Settings file changed (mtime %.3f → %.3f)", self._last_mtime, mtime)
            self._last_mtime = mtime
            await asyncio.sleep(self._debounce)
            settled = self._mtime()
            if settled != mtime:
                self._last_mtime = settled
                continue

            try:
                applied = self._reload(self._path, self._registry)
            except Exception:
                logger.exception("Unexpected error reloading settings file.")
                applied = False
            if applied:
                self.reloads += 1
            else:
                self.rejected += 1
