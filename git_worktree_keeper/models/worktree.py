"""Worktree data models."""

import os
from dataclasses import dataclass

from git_worktree_keeper.constants import DETACHED


@dataclass
class WorktreeRecord:
    """A worktree registered with git."""

    path: str
    branch: str  # DETACHED for a detached HEAD
    head: str = ""
    is_main: bool = False  # Is this the main working tree?

    @property
    def is_detached(self) -> bool:
        return self.branch == DETACHED

    @property
    def dir_name(self) -> str:
        """Basename of the worktree directory."""
        return os.path.basename(os.path.normpath(self.path))

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch} @ {self.path}{main_marker}"
