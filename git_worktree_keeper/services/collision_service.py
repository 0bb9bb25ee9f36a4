"""Collision detection between branch directory mappings."""

from typing import Iterable, List, Tuple, TYPE_CHECKING

from git_worktree_keeper.exceptions import CollisionError, GitOperationError
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.branch_mapping_service import BranchDirectoryMapper
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.services.git.client import GitClient

logger = get_logger(__name__)


def find_mapping_collisions(branches: Iterable[str]) -> List[Tuple[str, str, str]]:
    """Find pairs of branches that map to the same directory.

    Returns:
        List of (directory, branch, earlier branch with the same directory)
    """
    seen = {}
    collisions = []
    for branch in branches:
        dir_name = BranchDirectoryMapper.try_map(branch)
        if dir_name is None:
            continue
        if dir_name in seen:
            collisions.append((dir_name, branch, seen[dir_name]))
        else:
            seen[dir_name] = branch
    return collisions


class CollisionDetector:
    """Verifies a new worktree directory does not alias another branch."""

    def __init__(self, git_client: "GitClient"):
        self.git_client = git_client

    def check(self, branch: str, dir_name: str, existing: List[WorktreeRecord]) -> None:
        """
        Fail if dir_name is already used, or would be used, by another branch.

        Args:
            branch: Branch about to get a worktree
            dir_name: Directory name mapped from branch
            existing: Currently registered worktrees

        Raises:
            CollisionError: if an existing worktree or another local branch maps to dir_name
        """
        for wt in existing:
            if wt.dir_name == dir_name and wt.branch != branch:
                raise CollisionError(
                    f"collision: branch {branch!r} maps to same directory {dir_name!r} "
                    f"as existing worktree for branch {wt.branch!r}"
                )

        try:
            local_branches = self.git_client.list_local_branches()
        except GitOperationError as e:
            # Best effort: an unreadable branch list only skips this check
            logger.debug(f"Skipping branch collision check: {e}")
            return

        for other in local_branches:
            if other == branch:
                continue
            if BranchDirectoryMapper.try_map(other) == dir_name:
                raise CollisionError(
                    f"collision: branch {branch!r} maps to same directory {dir_name!r} "
                    f"as another local branch {other!r}"
                )
