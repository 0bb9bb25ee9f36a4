"""Custom exceptions for git-worktree-keeper"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from git_worktree_keeper.models.environment import RollbackOutcome


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(WorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConfigError(WorktreeKeeperError):
    """Exception raised when the configuration file cannot be read or parsed."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid config {path}: {message}")


class FilesystemError(WorktreeKeeperError):
    """Exception raised when a directory or file the tool manages cannot be created or opened."""

    def __init__(self, action: str, path: str, cause: OSError):
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(f"{action} {path}: {cause.strerror or cause}")


class InvalidBranchNameError(WorktreeKeeperError):
    """Exception raised when a branch name cannot be mapped to a directory name."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"branch name {branch!r} contains illegal characters for worktree mapping")


class CollisionError(WorktreeKeeperError):
    """Exception raised when a branch would alias another worktree's directory."""
    pass


class DirectoryAlreadyExistsError(CollisionError):
    """Exception raised when the target directory exists but is not a registered worktree."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"collision: directory {path} already exists")


class LockTimeoutError(WorktreeKeeperError):
    """Exception raised when the repository lock cannot be acquired in time."""

    def __init__(self, lock_path: str, timeout: float):
        self.lock_path = lock_path
        self.timeout = timeout
        super().__init__(
            f"another wt operation is in progress (failed to acquire lock at {lock_path} within {timeout}s)"
        )


class NoWorktreeFoundError(WorktreeKeeperError):
    """Exception raised when no worktree exists for a branch."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"no worktree exists for branch {branch!r}")


class NoDefaultBranchError(WorktreeKeeperError):
    """Exception raised when the default branch cannot be determined."""

    def __init__(self, message: str = "could not determine default branch"):
        super().__init__(message)


class DefaultBranchProtectedError(WorktreeKeeperError):
    """Exception raised when attempting to remove the main worktree."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"refusing to remove default branch/main worktree ({branch})")


class DirtyWorktreeError(WorktreeKeeperError):
    """Exception raised when a dirty worktree would be removed without consent."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"worktree for {branch} is dirty; use --force or confirm")


class PostCreationError(WorktreeKeeperError):
    """Exception raised when a copy step or post-create command fails."""

    def __init__(self, step: str, cause: object):
        self.step = step
        self.cause = cause
        super().__init__(f"post-create step '{step}' failed: {cause}")


class RollbackError(WorktreeKeeperError):
    """Exception raised when a creation failed after the worktree was materialized.

    Wraps the original failure together with the result of the compensating
    cleanup so callers can tell a clean rollback from a partial one.
    """

    def __init__(self, outcome: "RollbackOutcome"):
        self.outcome = outcome
        super().__init__(f"{outcome.original_error} (rollback: {outcome.status})")

    @property
    def original_error(self) -> BaseException:
        return self.outcome.original_error

    @property
    def rollback_error(self) -> Optional[Exception]:
        return self.outcome.rollback_error

    @property
    def status(self) -> str:
        return self.outcome.status

    @property
    def clean(self) -> bool:
        return self.outcome.clean
