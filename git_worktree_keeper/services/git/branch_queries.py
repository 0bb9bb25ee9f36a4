"""Branch query service for git-worktree-keeper."""

from typing import Optional, List, Tuple

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.services.git.base import GitServiceBase
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def _parse_lines(output: str) -> List[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class BranchQueries(GitServiceBase):
    """Service for querying and deleting branches."""

    def __init__(self, repo_path: str, remote_name: str = "origin"):
        super().__init__(repo_path)
        self.remote_name = remote_name

    def list_local_branches(self) -> List[str]:
        """Names of all local branches."""
        return _parse_lines(self._git("branch", "--format=%(refname:short)"))

    def merged_branches(self, base: str) -> List[str]:
        """Local branches whose history is contained in base."""
        return _parse_lines(self._git("branch", "--merged", base, "--format=%(refname:short)"))

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._git("show-ref", "--verify", "--quiet", ref)
            return True
        except GitOperationError:
            return False

    def branch_exists(self, branch: str) -> Tuple[bool, bool]:
        """Check whether a branch exists.

        Returns:
            Tuple of (exists locally, exists on the remote)
        """
        local = self._ref_exists(f"refs/heads/{branch}")
        remote = self._ref_exists(f"refs/remotes/{self.remote_name}/{branch}")
        return local, remote

    def default_branch(self) -> Optional[str]:
        """Default branch as advertised by the remote's symbolic HEAD.

        Returns:
            Branch name, or None if origin/HEAD is not set
        """
        prefix = f"refs/remotes/{self.remote_name}/"
        try:
            ref = self._git("symbolic-ref", f"{prefix}HEAD").strip()
        except GitOperationError as e:
            logger.debug(f"Could not determine default branch: {e}")
            return None

        if ref.startswith(prefix):
            return ref[len(prefix):]
        return ref.rsplit("/", 1)[-1]

    def current_branch(self, worktree_path: str) -> Optional[str]:
        """Branch checked out in worktree_path, or None when detached."""
        name = self._git("branch", "--show-current", cwd=worktree_path).strip()
        return name or None

    def delete_branch(self, branch: str) -> None:
        """Force-delete a local branch."""
        self._git("branch", "-D", branch, branch=branch)
        logger.info(f"Deleted branch {branch}")

    def fetch_prune(self) -> None:
        """Fetch from all remotes and prune stale remote-tracking refs."""
        self._git("fetch", "--prune")

    def is_tracked(self, rel_path: str) -> bool:
        """True if rel_path (relative to the repository root) is tracked."""
        try:
            self._git("ls-files", "--error-unmatch", rel_path)
            return True
        except GitOperationError:
            return False
