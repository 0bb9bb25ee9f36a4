"""Data models for git-worktree-keeper."""

from .worktree import WorktreeRecord
from .environment import RepositoryEnvironment, PruneOptions, PruneResult, RollbackOutcome
from .health import HealthLevel, HealthCheck, HealthReport

__all__ = [
    "WorktreeRecord",
    "RepositoryEnvironment",
    "PruneOptions",
    "PruneResult",
    "RollbackOutcome",
    "HealthLevel",
    "HealthCheck",
    "HealthReport",
]
