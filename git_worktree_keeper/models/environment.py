"""Per-invocation environment and operation value types."""

from dataclasses import dataclass, field
from typing import List, Optional

from git_worktree_keeper.config import Config


@dataclass(frozen=True)
class RepositoryEnvironment:
    """Repository root, its config and the resolved default branch.

    Loaded once per command and not modified afterwards.
    """

    root: str
    config: Config
    default_branch: Optional[str] = None

    @property
    def worktree_base(self) -> str:
        return self.config.get_worktree_base(self.root)


@dataclass(frozen=True)
class PruneOptions:
    """Options for pruning merged worktrees."""

    dry_run: bool = False
    force: bool = False
    fetch: bool = False


@dataclass
class PruneResult:
    """Outcome of one prune pass: a count for real runs, candidates for dry runs."""

    removed_count: int = 0
    candidates: List[str] = field(default_factory=list)


@dataclass
class RollbackOutcome:
    """Result of undoing a worktree creation whose post-create steps failed."""

    original_error: BaseException
    rollback_error: Optional[Exception]
    status: str

    @property
    def clean(self) -> bool:
        """True if every undo step succeeded."""
        return self.rollback_error is None
