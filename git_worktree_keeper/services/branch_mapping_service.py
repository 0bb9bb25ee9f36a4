"""Branch to directory name mapping for git-worktree-keeper."""

from typing import Optional

from git_worktree_keeper.constants import DIR_NAME_PATTERN
from git_worktree_keeper.exceptions import InvalidBranchNameError


class BranchDirectoryMapper:
    """Maps branch names to worktree directory names."""

    @staticmethod
    def map(branch: str) -> str:
        """
        Convert a branch name to a directory name.

        Every '/' becomes '-'; the result may only contain alphanumerics,
        '-', '_' and '.'.

        Args:
            branch: Branch name

        Returns:
            Directory name for the branch's worktree

        Raises:
            InvalidBranchNameError: if the branch contains other characters
        """
        sanitized = branch.replace("/", "-")
        if not DIR_NAME_PATTERN.fullmatch(sanitized):
            raise InvalidBranchNameError(branch)
        return sanitized

    @staticmethod
    def try_map(branch: str) -> Optional[str]:
        """Like map(), but returns None for unmappable branches."""
        try:
            return BranchDirectoryMapper.map(branch)
        except InvalidBranchNameError:
            return None
