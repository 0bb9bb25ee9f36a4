"""Git-related services for git-worktree-keeper."""

from .worktrees import WorktreeService
from .branch_queries import BranchQueries
from .client import GitClient

__all__ = [
    "WorktreeService",
    "BranchQueries",
    "GitClient",
]
