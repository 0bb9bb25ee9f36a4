"""Command-line interface for git-worktree-keeper"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from git_worktree_keeper.config import Config, get_config_path, write_config
from git_worktree_keeper.constants import DEFAULT_PATH_TEMPLATE
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import RollbackError, WorktreeKeeperError
from git_worktree_keeper.logging_config import setup_logging
from git_worktree_keeper.models.environment import PruneOptions
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.client import GitClient, find_repo_root
from git_worktree_keeper.services.health_service import HealthInspector
from git_worktree_keeper.services.process_runner import ProcessRunner
from .args import parse_args

console = Console(stderr=True)


def confirm_prompt(message: str) -> bool:
    """Ask a yes/no question; an aborted prompt counts as no."""
    try:
        return Confirm.ask(message, default=False, console=console)
    except (EOFError, KeyboardInterrupt):
        return False


def split_prompt_list(value: str) -> List[str]:
    """Split a comma separated answer into trimmed, non-empty items."""
    return [part.strip() for part in value.split(",") if part.strip()]


def cmd_list(args) -> int:
    keeper = WorktreeKeeper.from_path(os.getcwd())
    worktrees = keeper.list_worktrees()
    display = DisplayService()
    if sys.stdout.isatty():
        display.display_worktree_table(worktrees, keeper.default_branch)
    else:
        display.display_worktree_list(worktrees)
    return 0


def cmd_ensure(args) -> int:
    keeper = WorktreeKeeper.from_path(os.getcwd())
    print(keeper.ensure(args.branch, args.base))
    return 0


def cmd_path(args) -> int:
    keeper = WorktreeKeeper.from_path(os.getcwd())
    print(keeper.find_worktree(args.branch))
    return 0


def cmd_remove(args) -> int:
    keeper = WorktreeKeeper.from_path(os.getcwd())
    branch = args.branch
    if branch is None:
        if not sys.stdin.isatty():
            console.print("[red]Error: branch required when not running interactively[/red]")
            return 1

        from git_worktree_keeper.tui import pick_worktree, removable_worktrees

        worktrees = keeper.list_worktrees()
        if not removable_worktrees(worktrees):
            console.print("[red]Error: no other worktrees to remove[/red]")
            return 1
        branch = pick_worktree(worktrees)
        if not branch:
            console.print("[yellow]No worktree selected[/yellow]")
            return 1

    keeper.remove(branch, force=args.force, confirm=confirm_prompt)
    console.print(f"[green]Removed worktree for {branch}[/green]")
    return 0


def cmd_prune(args) -> int:
    keeper = WorktreeKeeper.from_path(os.getcwd())
    options = PruneOptions(dry_run=args.dry_run, force=args.force, fetch=args.fetch)
    result = keeper.prune(options)
    DisplayService(Console()).display_prune_result(result, options.dry_run)
    return 0


def cmd_health(args) -> int:
    report = HealthInspector().run(os.getcwd())
    DisplayService(Console()).display_health_report(report)
    return 1 if report.has_error else 0


def cmd_init(args) -> int:
    root = find_repo_root(os.getcwd())
    config_path = get_config_path(root)
    if os.path.exists(config_path):
        print(config_path)
        return 0

    detected: Optional[str] = GitClient(root).default_branch()
    if args.yes and not detected:
        console.print("[red]Error: could not auto-detect default branch for --yes[/red]")
        return 1

    config = Config(
        default_branch=detected,
        worktree_path_template=DEFAULT_PATH_TEMPLATE,
    )

    if not args.yes:
        console.print("Initializing .wt.config.json")
        default_branch = ""
        while not default_branch:
            default_branch = Prompt.ask("Default branch", default=detected or None, console=console) or ""
            default_branch = default_branch.strip()
        config.default_branch = default_branch
        config.worktree_path_template = Prompt.ask(
            "Worktree path template", default=DEFAULT_PATH_TEMPLATE, console=console
        )
        config.worktree_copy_patterns = split_prompt_list(
            Prompt.ask("Worktree copy patterns (comma separated)", default="", console=console)
        )
        config.post_create_cmd = split_prompt_list(
            Prompt.ask("Post-create commands (comma separated)", default="", console=console)
        )
        config.delete_branch_with_worktree = Confirm.ask(
            "Delete branch with worktree?", default=False, console=console
        )

    print(write_config(config, root))
    return 0


def cmd_exec(args) -> int:
    if not args.cmd:
        console.print("[red]Error: missing command after --[/red]")
        return 1

    keeper = WorktreeKeeper.from_path(os.getcwd())
    path = keeper.find_worktree(args.branch)
    try:
        return ProcessRunner().run(args.cmd, cwd=path)
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1


COMMAND_HANDLERS = {
    "list": cmd_list,
    "ensure": cmd_ensure,
    "path": cmd_path,
    "remove": cmd_remove,
    "prune": cmd_prune,
    "health": cmd_health,
    "init": cmd_init,
    "exec": cmd_exec,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        return COMMAND_HANDLERS[parsed_args.command](parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except RollbackError as e:
        console.print(f"[red]Error: {escape(str(e.original_error))}[/red]", highlight=False)
        console.print(f"Rollback status: {escape(e.status)}", highlight=False)
        return 1
    except WorktreeKeeperError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
