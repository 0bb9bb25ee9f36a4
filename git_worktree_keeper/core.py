"""Core functionality for git-worktree-keeper"""

import os
from contextlib import nullcontext
from typing import Callable, List, Optional

from git_worktree_keeper.config import load_config
from git_worktree_keeper.constants import DEFAULT_LOCK_TIMEOUT
from git_worktree_keeper.exceptions import (
    DefaultBranchProtectedError,
    DirectoryAlreadyExistsError,
    DirtyWorktreeError,
    FilesystemError,
    GitOperationError,
    NoDefaultBranchError,
    NoWorktreeFoundError,
    PostCreationError,
    RollbackError,
)
from git_worktree_keeper.models.environment import (
    PruneOptions,
    PruneResult,
    RepositoryEnvironment,
    RollbackOutcome,
)
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.branch_mapping_service import BranchDirectoryMapper
from git_worktree_keeper.services.collision_service import CollisionDetector
from git_worktree_keeper.services.git.client import GitClient
from git_worktree_keeper.services.lock_service import RepositoryLock
from git_worktree_keeper.services.post_creation_service import PostCreationRunner
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

ConfirmFn = Callable[[str], bool]


def load_environment(git_client: GitClient) -> RepositoryEnvironment:
    """Load root, config and default branch for one command invocation."""
    root = git_client.repo_path
    config = load_config(root)

    default_branch = config.default_branch
    if not default_branch:
        default_branch = git_client.default_branch()
        if default_branch:
            logger.debug(f"Detected default branch {default_branch}")

    return RepositoryEnvironment(root=root, config=config, default_branch=default_branch)


class WorktreeKeeper:
    """Ensures, removes and prunes worktrees addressed by branch name."""

    def __init__(
        self,
        env: RepositoryEnvironment,
        git_client: GitClient,
        lock: Optional[RepositoryLock] = None,
        post_creation: Optional[PostCreationRunner] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        """Initialize WorktreeKeeper.

        Args:
            env: Repository environment for this invocation
            git_client: Git operations for the repository
            lock: Repository lock (default: file lock under .git)
            post_creation: Runner for copy patterns and post-create commands
            lock_timeout: Seconds to wait for the repository lock
        """
        self.env = env
        self.git = git_client
        self.lock = lock or RepositoryLock()
        self.post_creation = post_creation or PostCreationRunner()
        self.lock_timeout = lock_timeout
        self.collision_detector = CollisionDetector(git_client)

    @classmethod
    def from_path(cls, start_path: str = ".") -> "WorktreeKeeper":
        """Build a keeper for the repository containing start_path."""
        git_client = GitClient.discover(start_path)
        return cls(load_environment(git_client), git_client)

    @property
    def default_branch(self) -> Optional[str]:
        return self.env.default_branch

    def _acquire_lock(self):
        return self.lock.acquire(self.env.root, self.lock_timeout)

    def list_worktrees(self) -> List[WorktreeRecord]:
        """All registered worktrees, main worktree first."""
        return self.git.list_worktrees()

    def _lookup(self, branch: str, worktrees: List[WorktreeRecord]) -> Optional[WorktreeRecord]:
        for wt in worktrees:
            if wt.branch == branch:
                return wt
        return None

    def find_worktree(self, branch: str) -> str:
        """Return the path of the existing worktree for branch.

        The default branch always lives in the repository root.

        Raises:
            NoWorktreeFoundError: if branch has no worktree
        """
        if branch == self.default_branch:
            return self.env.root

        wt = self._lookup(branch, self.git.list_worktrees())
        if wt is None:
            raise NoWorktreeFoundError(branch)
        return os.path.normpath(wt.path)

    def ensure(self, branch: str, base: Optional[str] = None) -> str:
        """
        Return the worktree path for branch, creating the worktree if needed.

        Args:
            branch: Branch to get a worktree for
            base: Start point when branch does not exist locally or on the remote;
                defaults to the default branch, ignored for existing branches

        Returns:
            Absolute path of the worktree

        Raises:
            InvalidBranchNameError, CollisionError, DirectoryAlreadyExistsError,
            FilesystemError, LockTimeoutError, NoDefaultBranchError, GitOperationError: before any
                change was made
            RollbackError: if post-creation failed after the worktree was created
        """
        if branch == self.default_branch:
            return self.env.root

        worktrees = self.git.list_worktrees()
        existing = self._lookup(branch, worktrees)
        if existing is not None:
            return os.path.normpath(existing.path)

        dir_name = BranchDirectoryMapper.map(branch)
        self.collision_detector.check(branch, dir_name, worktrees)

        wt_root = self.env.worktree_base
        target_path = os.path.normpath(os.path.join(wt_root, dir_name))
        if os.path.lexists(target_path):
            raise DirectoryAlreadyExistsError(target_path)

        try:
            os.makedirs(wt_root, exist_ok=True)
        except OSError as e:
            raise FilesystemError("failed to create worktree root", wt_root, e) from e

        with self._acquire_lock():
            local, remote = self.git.branch_exists(branch)
            is_new_branch = not local and not remote

            if is_new_branch:
                if not base:
                    if not self.default_branch:
                        raise NoDefaultBranchError(
                            f"branch {branch} not found and no default branch detected. Use --from"
                        )
                    base = self.default_branch
                logger.info(f"Creating branch {branch} from {base}")
            else:
                # Checking out an existing ref, not creating from a base
                if base:
                    logger.debug(f"Branch {branch} exists, ignoring base {base}")
                base = None

            self.git.create_worktree(target_path, branch, base)

            try:
                self.post_creation.apply(self.env.root, target_path, self.env.config)
            except PostCreationError as e:
                outcome = self._rollback(target_path, branch, is_new_branch, e)
                raise RollbackError(outcome) from e
            except BaseException as e:
                # Interrupted or crashed mid-setup: undo, then let the original propagate
                self._rollback(target_path, branch, is_new_branch, e)
                raise

        return target_path

    def _rollback(
        self, target_path: str, branch: str, is_new_branch: bool, error: BaseException
    ) -> RollbackOutcome:
        """Undo a worktree creation, reporting which steps succeeded."""
        logger.warning(f"Post-create failed for {branch}, rolling back: {error or type(error).__name__}")
        rollback_error: Optional[Exception] = None

        try:
            self.git.remove_worktree(target_path, force=True)
        except GitOperationError as e:
            rollback_error = e
            status = f"failed to remove worktree: {e}"
        else:
            status = "worktree removed"
            if is_new_branch:
                try:
                    self.git.delete_branch(branch)
                except GitOperationError as e:
                    rollback_error = e
                    status += f", failed to delete branch: {e}"
                else:
                    status += ", branch deleted"

        if rollback_error is None:
            status = f"succeeded ({status})"
        else:
            logger.error(f"Rollback incomplete for {branch}: {status}")

        return RollbackOutcome(original_error=error, rollback_error=rollback_error, status=status)

    def _deletable_branch(self, branch: str, main_branch: Optional[str]) -> bool:
        return (
            self.env.config.delete_branch_with_worktree
            and branch != main_branch
            and branch != self.default_branch
        )

    def _delete_branch_quietly(self, branch: str) -> None:
        try:
            self.git.delete_branch(branch)
        except GitOperationError as e:
            logger.warning(f"failed to delete branch {branch}: {e}")

    def _main_branch(self) -> Optional[str]:
        """Branch checked out in the main worktree, if it can be read."""
        try:
            return self.git.current_branch(self.env.root)
        except GitOperationError as e:
            logger.debug(f"Could not read branch of main worktree: {e}")
            return None

    def remove(self, branch: str, force: bool = False, confirm: Optional[ConfirmFn] = None) -> None:
        """
        Remove the worktree for branch.

        Args:
            branch: Branch whose worktree to remove
            force: Remove even if the worktree has uncommitted changes
            confirm: Asked before removing a dirty worktree when not forced;
                accepting forces the removal, raising counts as declining

        Raises:
            NoDefaultBranchError, DefaultBranchProtectedError, NoWorktreeFoundError,
            DirtyWorktreeError, LockTimeoutError, FilesystemError, GitOperationError
        """
        if not self.default_branch:
            raise NoDefaultBranchError()
        if branch == self.default_branch:
            raise DefaultBranchProtectedError(branch)

        target = self._lookup(branch, self.git.list_worktrees())
        if target is None or target.is_main:
            raise NoWorktreeFoundError(branch)

        if not force and self.git.is_dirty(target.path):
            try:
                accepted = confirm is not None and confirm(f"Worktree {branch} is dirty. Remove anyway?")
            except Exception as e:
                logger.warning(f"Confirmation for {branch} failed, treating as declined: {e!r}")
                raise DirtyWorktreeError(branch) from e
            if not accepted:
                raise DirtyWorktreeError(branch)
            force = True

        with self._acquire_lock():
            self.git.remove_worktree(target.path, force=force)

            if self.env.config.delete_branch_with_worktree:
                if self._deletable_branch(branch, self._main_branch()):
                    self._delete_branch_quietly(branch)

    def prune(self, options: PruneOptions = PruneOptions()) -> PruneResult:
        """
        Remove worktrees whose branches are merged into the default branch.

        Args:
            options: dry_run collects candidates without removing anything;
                force also removes dirty worktrees; fetch runs `git fetch --prune` first

        Returns:
            PruneResult with the removed count (real run) or the candidates (dry run)

        Raises:
            NoDefaultBranchError, LockTimeoutError, GitOperationError
        """
        if options.fetch:
            try:
                self.git.fetch_prune()
            except GitOperationError as e:
                logger.warning(f"failed to fetch and prune: {e}")

        if not self.default_branch:
            raise NoDefaultBranchError()

        merged = set(self.git.merged_branches(self.default_branch))
        worktrees = self.git.list_worktrees()
        main_branch = self._main_branch()
        result = PruneResult()

        with nullcontext() if options.dry_run else self._acquire_lock():
            for wt in worktrees:
                if wt.is_main or wt.is_detached or wt.branch == self.default_branch:
                    continue
                if wt.branch not in merged:
                    continue

                try:
                    dirty = self.git.is_dirty(wt.path)
                except GitOperationError as e:
                    logger.warning(f"failed to check dirty status for {wt.branch}: {e}")
                    continue

                if dirty and not options.force:
                    logger.info(f"Skipping {wt.branch}: worktree is dirty (use --force to prune)")
                    continue

                if options.dry_run:
                    result.candidates.append(wt.branch)
                    continue

                try:
                    self.git.remove_worktree(wt.path, force=options.force)
                except GitOperationError as e:
                    logger.error(f"failed to remove worktree for {wt.branch}: {e}")
                    continue

                if self._deletable_branch(wt.branch, main_branch):
                    self._delete_branch_quietly(wt.branch)
                result.removed_count += 1

        return result
