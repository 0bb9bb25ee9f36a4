"""Interactive worktree picker using Textual."""

from typing import List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, OptionList
from textual.widgets.option_list import Option

from .models.worktree import WorktreeRecord
from .logging_config import get_logger

logger = get_logger(__name__)


def removable_worktrees(worktrees: List[WorktreeRecord]) -> List[WorktreeRecord]:
    """Worktrees that can be removed by branch name (not main, not detached)."""
    return [wt for wt in worktrees if not wt.is_main and not wt.is_detached]


class WorktreePickerApp(App[Optional[str]]):
    """Full-screen list of worktrees; exits with the chosen branch or None."""

    TITLE = "wt"
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("q", "cancel", "Cancel", show=False),
    ]

    def __init__(self, worktrees: List[WorktreeRecord], title: str = "Select a worktree to remove"):
        super().__init__()
        self.worktrees = removable_worktrees(worktrees)
        self.sub_title = title

    def compose(self) -> ComposeResult:
        yield Header()
        yield OptionList(
            *[Option(Text.assemble(wt.branch, "  ", (wt.path, "dim")), id=wt.branch) for wt in self.worktrees],
            id="worktrees",
        )
        yield Footer()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        logger.debug(f"Picked {event.option.id}")
        self.exit(event.option.id)

    def action_cancel(self) -> None:
        self.exit(None)


def pick_worktree(worktrees: List[WorktreeRecord], title: str = "Select a worktree to remove") -> Optional[str]:
    """Run the picker and return the chosen branch, or None if cancelled."""
    if not removable_worktrees(worktrees):
        return None
    return WorktreePickerApp(worktrees, title).run()
