"""Worktree operations service for git-worktree-keeper."""

from typing import Optional, Dict, Any, List

from git_worktree_keeper.constants import DETACHED
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.base import GitServiceBase
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
        (blank line between worktrees)

    The first entry is always the main worktree. Entries without a branch
    line get the DETACHED sentinel.
    """
    records: List[WorktreeRecord] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch") or DETACHED,
                    head=current.get("HEAD", ""),
                    is_main=not records,
                )
            )

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if line.startswith("worktree "):
            flush()
            current = {"path": line.split(" ", 1)[1]}
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = branch_ref
        elif line.startswith("detached"):
            current["branch"] = DETACHED

    # Handle last entry if no trailing blank line
    flush()
    return records


class WorktreeService(GitServiceBase):
    """Service for managing git worktrees."""

    def list_worktrees(self) -> List[WorktreeRecord]:
        """List registered worktrees, main worktree first."""
        output = self._git("worktree", "list", "--porcelain")
        records = parse_worktree_porcelain(output)

        logger.debug(f"Found {len(records)} worktrees")
        for wt in records:
            logger.debug(f"  {wt}")
        return records

    def create_worktree(self, path: str, branch: str, base: Optional[str] = None) -> None:
        """Create a worktree at path.

        Args:
            path: Target directory (must not exist)
            branch: Branch to check out
            base: If given, create `branch` from this ref; otherwise check out
                the existing local or remote branch
        """
        if base:
            self._git("worktree", "add", "-b", branch, path, base, branch=branch)
        else:
            self._git("worktree", "add", path, branch, branch=branch)
        logger.info(f"Created worktree for {branch} at {path}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked
        """
        args = ["remove"]
        if force:
            args.append("--force")
        args.append(path)

        self._git("worktree", *args)
        logger.info(f"Removed worktree at {path}")

    def is_dirty(self, worktree_path: str) -> bool:
        """True if the worktree has staged, modified or untracked files."""
        status = self._git("status", "--porcelain", cwd=worktree_path)
        return bool(status.strip())
