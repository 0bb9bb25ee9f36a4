"""
git-worktree-keeper - Branch-addressable git worktree management
"""

from .__version__ import __version__
from .core import WorktreeKeeper, load_environment

__all__ = ["WorktreeKeeper", "load_environment", "__version__"]
