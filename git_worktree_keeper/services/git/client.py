"""Single entry point to the git operations the worktree keeper needs."""

import os
from typing import Optional, List, Tuple

import git

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.branch_queries import BranchQueries
from git_worktree_keeper.services.git.worktrees import WorktreeService
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def find_repo_root(start_path: str) -> str:
    """Resolve the main worktree root for any path inside a repository.

    Linked worktrees resolve to the main checkout, whose `.git` directory is
    the repository's common directory.

    Raises:
        GitOperationError: if start_path is not inside a git repository
    """
    try:
        repo = git.Repo(start_path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise GitOperationError("rev-parse", message=f"not a git repository: {start_path}") from e

    try:
        common_dir = os.path.realpath(repo.common_dir)
        if os.path.basename(common_dir) == ".git":
            return os.path.dirname(common_dir)
        if repo.working_tree_dir is None:
            raise GitOperationError("rev-parse", message="bare repositories are not supported")
        return os.path.realpath(repo.working_tree_dir)
    finally:
        repo.close()


class GitClient:
    """Facade over the worktree and branch services for one repository."""

    def __init__(self, repo_path: str, remote_name: str = "origin"):
        """Initialize the client.

        Args:
            repo_path: Root of the main worktree
            remote_name: Remote consulted for branch existence and the default branch
        """
        self.repo_path = repo_path
        self.worktree_service = WorktreeService(repo_path)
        self.branch_queries = BranchQueries(repo_path, remote_name)

    @classmethod
    def discover(cls, start_path: str = ".") -> "GitClient":
        """Build a client for the repository containing start_path."""
        return cls(find_repo_root(start_path))

    # Worktrees

    def list_worktrees(self) -> List[WorktreeRecord]:
        return self.worktree_service.list_worktrees()

    def create_worktree(self, path: str, branch: str, base: Optional[str] = None) -> None:
        self.worktree_service.create_worktree(path, branch, base)

    def remove_worktree(self, path: str, force: bool = False) -> None:
        self.worktree_service.remove_worktree(path, force)

    def is_dirty(self, worktree_path: str) -> bool:
        return self.worktree_service.is_dirty(worktree_path)

    # Branches

    def list_local_branches(self) -> List[str]:
        return self.branch_queries.list_local_branches()

    def merged_branches(self, base: str) -> List[str]:
        return self.branch_queries.merged_branches(base)

    def branch_exists(self, branch: str) -> Tuple[bool, bool]:
        return self.branch_queries.branch_exists(branch)

    def default_branch(self) -> Optional[str]:
        return self.branch_queries.default_branch()

    def current_branch(self, worktree_path: str) -> Optional[str]:
        return self.branch_queries.current_branch(worktree_path)

    def delete_branch(self, branch: str) -> None:
        self.branch_queries.delete_branch(branch)

    def fetch_prune(self) -> None:
        self.branch_queries.fetch_prune()

    def is_tracked(self, rel_path: str) -> bool:
        return self.branch_queries.is_tracked(rel_path)
