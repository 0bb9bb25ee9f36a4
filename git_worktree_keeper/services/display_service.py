"""Display and formatting service for worktree information"""
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from git_worktree_keeper.constants import COLUMNS, HEALTH_COLORS
from git_worktree_keeper.models.environment import PruneResult
from git_worktree_keeper.models.health import HealthReport
from git_worktree_keeper.models.worktree import WorktreeRecord

console = Console()


class DisplayService:
    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def display_worktree_table(self, worktrees: List[WorktreeRecord], default_branch: Optional[str] = None) -> None:
        """Display a table of registered worktrees."""
        table = Table()
        for col in COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for wt in worktrees:
            branch = wt.branch
            if wt.is_main:
                branch += " *"
            style = "cyan" if wt.is_main or wt.branch == default_branch else None
            if wt.is_detached:
                style = "yellow"
            table.add_row(branch, wt.path, wt.head[:8], style=style)

        self.console.print(table)

    def display_worktree_list(self, worktrees: List[WorktreeRecord]) -> None:
        """Plain `branch<TAB>path` lines for scripts."""
        for wt in worktrees:
            print(f"{wt.branch}\t{wt.path}")

    def display_prune_result(self, result: PruneResult, dry_run: bool) -> None:
        if not dry_run:
            self.console.print(f"Pruned {result.removed_count} worktrees.")
            return

        if not result.candidates:
            self.console.print("No worktrees to prune.")
            return

        self.console.print("Candidates for pruning:")
        for branch in result.candidates:
            self.console.print(f"  {branch}")
        self.console.print(
            f"\nTotal candidates: {len(result.candidates)} (run without --dry-run to prune)"
        )

    def display_health_report(self, report: HealthReport) -> None:
        for check in report.checks:
            color = HEALTH_COLORS[check.level.value]
            self.console.print(
                f"[{color}]\\[{check.level.value}][/{color}] {check.name}: {check.message}",
                highlight=False,
            )
