"""Tests for logging setup"""
import logging

import pytest

from git_worktree_keeper.logging_config import debug_requested, get_logger, setup_logging

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def test_get_logger_strips_package_prefix():
    assert get_logger("git_worktree_keeper.services.lock_service").name == "lock_service"
    assert get_logger("git_worktree_keeper.core").name == "core"
    assert get_logger("other.module").name == "other.module"


def test_levels(monkeypatch):
    monkeypatch.delenv("WT_DEBUG", raising=False)

    setup_logging()
    assert logging.getLogger().level == logging.WARNING

    setup_logging(verbose=True)
    assert logging.getLogger().level == logging.INFO


def test_debug_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("WT_DEBUG", "1")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert debug_requested()

    setup_logging()

    assert logging.getLogger().level == logging.DEBUG
    assert (tmp_path / ".git-worktree-keeper" / "git-worktree-keeper.log").exists()


def test_debug_env_must_be_one(monkeypatch):
    monkeypatch.setenv("WT_DEBUG", "true")
    assert not debug_requested()
