"""Repository-wide advisory lock for mutating worktree operations."""

import fcntl
import os
import time
from typing import Optional, TextIO

import git

from git_worktree_keeper.constants import DEFAULT_LOCK_TIMEOUT, LOCK_FILE_NAME, LOCK_POLL_INTERVAL
from git_worktree_keeper.exceptions import FilesystemError, GitOperationError, LockTimeoutError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def get_lock_path(repo_root: str) -> str:
    """Lock file inside the repository's common git directory.

    The common directory is shared by all linked worktrees and is also
    correct when `.git` is a file (submodules, --separate-git-dir).

    Raises:
        GitOperationError: if repo_root is not a git repository
    """
    try:
        repo = git.Repo(repo_root)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise GitOperationError("rev-parse", message=f"not a git repository: {repo_root}") from e

    try:
        return os.path.join(os.path.realpath(repo.common_dir), LOCK_FILE_NAME)
    finally:
        repo.close()


class LockHandle:
    """An acquired repository lock.

    Use as a context manager; release() may be called any number of times.
    """

    def __init__(self, path: str, file_handle: TextIO):
        self.path = path
        self._file_handle: Optional[TextIO] = file_handle

    @property
    def held(self) -> bool:
        return self._file_handle is not None

    def release(self) -> None:
        """Release the lock if still held."""
        file_handle, self._file_handle = self._file_handle, None
        if file_handle is None:
            return
        try:
            fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)
            logger.debug(f"Released lock {self.path}")
        finally:
            file_handle.close()

    def __enter__(self) -> "LockHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class RepositoryLock:
    """Exclusive, non-reentrant file lock scoped to one repository."""

    def __init__(self, poll_interval: float = LOCK_POLL_INTERVAL):
        self.poll_interval = poll_interval

    def acquire(self, repo_root: str, timeout: float = DEFAULT_LOCK_TIMEOUT) -> LockHandle:
        """
        Acquire the repository lock, polling until timeout.

        Args:
            repo_root: Root of the main worktree
            timeout: Seconds to wait before giving up

        Returns:
            LockHandle that must be released by the caller

        Raises:
            LockTimeoutError: if another process holds the lock for longer than timeout
            FilesystemError: if the lock file cannot be opened
        """
        path = get_lock_path(repo_root)
        deadline = time.monotonic() + timeout
        try:
            file_handle = open(path, "a+")
        except OSError as e:
            raise FilesystemError("failed to open lock file", path, e) from e
        try:
            while True:
                try:
                    fcntl.flock(file_handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    if time.monotonic() >= deadline:
                        raise LockTimeoutError(path, timeout)
                    time.sleep(self.poll_interval)
        except BaseException:
            file_handle.close()
            raise

        logger.debug(f"Acquired lock {path}")
        return LockHandle(path, file_handle)
