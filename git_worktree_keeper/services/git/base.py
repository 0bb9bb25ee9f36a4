"""Shared plumbing for the GitPython-backed services."""

import time
from typing import Optional

import git

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def describe_git_error(e: git.exc.GitCommandError, command: str) -> str:
    """Build a readable message from a GitCommandError."""
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else "").strip()
    status = e.status if hasattr(e, "status") else "unknown"

    if stderr:
        return f"git {command} failed (exit {status}): {stderr}"
    return f"git {command} failed with exit code {status}"


class GitServiceBase:
    """Base class holding the repository path and the command helper."""

    def __init__(self, repo_path: str):
        self.repo_path = repo_path

    def _get_repo(self):
        """Get a fresh git.Repo instance.

        GitPython repos are lightweight - they don't clone, just open the existing repo.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(self.repo_path)

    def _git(self, operation: str, *args: str, branch: Optional[str] = None, cwd: Optional[str] = None) -> str:
        """Run a git command and return its stdout.

        Args:
            operation: git subcommand, e.g. "worktree"
            args: Arguments to the subcommand
            branch: Branch the command concerns, for error messages
            cwd: Run in this directory instead of the repository root

        Raises:
            GitOperationError: if the command exits non-zero
        """
        command = " ".join((operation,) + args)
        start = time.monotonic()
        try:
            if cwd is not None:
                return self._get_repo().git.execute(["git", "-C", cwd, operation, *args])
            return getattr(self._get_repo().git, operation.replace("-", "_"))(*args)
        except git.exc.GitCommandError as e:
            raise GitOperationError(command, branch, describe_git_error(e, command)) from e
        finally:
            logger.debug(f"git {command} (took {time.monotonic() - start:.3f}s)")
