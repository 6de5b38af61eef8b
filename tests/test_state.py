"""Tests for the live configuration holder and the committer."""

from __future__ import annotations

import threading

import pytest

from audit_sentinel.classes import LOG_ALL, LOG_NONE, LogClass
from audit_sentinel.state import (
    AuditSnapshot,
    CurrentConfig,
    assign_log_catalog,
    commit_log,
    current_config,
)
from audit_sentinel.validator import validate


@pytest.fixture
def config():
    return CurrentConfig()


class TestDefaults:
    def test_log_nothing_by_default(self, config):
        assert config.log_bitmap == LOG_NONE
        for flag in LogClass:
            assert not config.is_enabled(flag)

    def test_log_catalog_on_by_default(self, config):
        assert config.log_catalog is True

    def test_module_singleton_exists(self):
        assert isinstance(current_config, CurrentConfig)

    def test_reset_restores_defaults(self, config):
        commit_log(validate("all"), config)
        assign_log_catalog(False, config)
        config.reset()
        assert config.snapshot() == AuditSnapshot()


class TestCommit:
    def test_commit_publishes_candidate(self, config):
        commit_log(validate("read,write"), config)
        assert config.log_bitmap == LogClass.READ | LogClass.WRITE
        assert config.is_enabled(LogClass.READ)
        assert not config.is_enabled(LogClass.DDL)

    def test_commit_none_is_noop(self, config):
        commit_log(validate("ddl"), config)
        before = config.snapshot()
        commit_log(None, config)
        assert config.snapshot() is before
        assert config.log_bitmap == LogClass.DDL

    def test_commit_replaces_not_merges(self, config):
        commit_log(validate("all"), config)
        commit_log(validate("role"), config)
        assert config.log_bitmap == LogClass.ROLE

    def test_commit_keeps_log_catalog(self, config):
        assign_log_catalog(False, config)
        commit_log(validate("all"), config)
        assert config.log_catalog is False
        assert config.log_bitmap == LOG_ALL

    def test_log_catalog_keeps_bitmap(self, config):
        commit_log(validate("ddl"), config)
        assign_log_catalog(False, config)
        assert config.log_bitmap == LogClass.DDL

    def test_snapshot_is_immutable(self, config):
        snap = config.snapshot()
        with pytest.raises(Exception):
            snap.log_bitmap = 5  # type: ignore[misc]

    def test_old_snapshot_unchanged_after_commit(self, config):
        snap = config.snapshot()
        commit_log(validate("all"), config)
        assert snap.log_bitmap == LOG_NONE
        assert config.log_bitmap == LOG_ALL

    def test_default_target_is_singleton(self):
        before = current_config.snapshot()
        try:
            commit_log(validate("function"), None)
            assert current_config.log_bitmap == LogClass.FUNCTION
        finally:
            current_config.publish_log_bitmap(before.log_bitmap)

    def test_repr(self, config):
        commit_log(validate("read"), config)
        assert repr(config) == "CurrentConfig(log='read', log_catalog=True)"


class TestConcurrentReaders:
    def test_readers_never_see_torn_values(self, config):
        old = validate("read,write,ddl")
        new = validate("all,-read,-write,-ddl")
        commit_log(old, config)

        stop = threading.Event()
        seen = set()
        errors = []

        def reader():
            while not stop.is_set():
                snap = config.snapshot()
                seen.add(snap.log_bitmap)
                if snap.log_bitmap not in (old.bits, new.bits):
                    errors.append(snap.log_bitmap)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        try:
            for _ in range(2000):
                commit_log(new, config)
                commit_log(old, config)
        finally:
            stop.set()
            for t in readers:
                t.join()

        assert errors == []
        assert seen <= {old.bits, new.bits}

    def test_concurrent_writers_do_not_lose_updates(self, config):
        bitmap_done = threading.Event()

        def flip_catalog():
            for i in range(2000):
                assign_log_catalog(i % 2 == 0, config)
            assign_log_catalog(False, config)

        def commit_bitmaps():
            for _ in range(2000):
                commit_log(validate("ddl"), config)
            commit_log(validate("write"), config)
            bitmap_done.set()

        threads = [threading.Thread(target=flip_catalog), threading.Thread(target=commit_bitmaps)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert bitmap_done.is_set()
        assert config.log_bitmap == LogClass.WRITE
        assert config.log_catalog is False
