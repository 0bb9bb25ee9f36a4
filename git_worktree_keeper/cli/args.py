"""Command-line argument parsing for git-worktree-keeper."""

import argparse
import sys
from typing import List, Optional

from git_worktree_keeper.__version__ import __version__

COMMANDS = ("list", "ensure", "path", "remove", "prune", "health", "init", "exec")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wt",
        description="A fast, branch-addressable git worktree manager",
        epilog="`wt <branch>` is shorthand for `wt ensure <branch>`; `wt` alone lists worktrees.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information (also enabled by WT_DEBUG=1)"
    )
    parser.add_argument("--version", action="version", version=f"wt {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    subparsers.add_parser("list", help="List all worktrees")

    ensure = subparsers.add_parser("ensure", help="Ensure a worktree exists for a branch and print its path")
    ensure.add_argument("branch", help="Branch name")
    ensure.add_argument(
        "-f", "--from", dest="base", metavar="BASE", help="Base branch when creating a new branch"
    )

    path = subparsers.add_parser("path", help="Print the path of an existing worktree")
    path.add_argument("branch", help="Branch name")

    remove = subparsers.add_parser("remove", help="Remove a worktree and optionally delete its branch")
    remove.add_argument("branch", nargs="?", help="Branch name (pick interactively if omitted)")
    remove.add_argument("-r", "--force", action="store_true", help="Force removal even if dirty")

    prune = subparsers.add_parser("prune", help="Remove worktrees whose branches are merged into the default branch")
    prune.add_argument("-f", "--force", action="store_true", help="Force removal even if dirty")
    prune.add_argument("--dry-run", action="store_true", help="Show what would be removed")
    prune.add_argument("--fetch", action="store_true", help="Run git fetch --prune first")

    subparsers.add_parser("health", help="Check repository and configuration health")

    init = subparsers.add_parser("init", help="Create .wt.config.json")
    init.add_argument("-y", "--yes", action="store_true", help="Write defaults without prompts")

    exec_ = subparsers.add_parser("exec", help="Run a command inside a branch's worktree")
    exec_.add_argument("branch", help="Branch name")
    exec_.add_argument("cmd", nargs=argparse.REMAINDER, metavar="-- command", help="Command to run")

    return parser


def _expand_branch_shorthand(argv: List[str]) -> List[str]:
    """Rewrite `wt <branch> ...` as `wt ensure <branch> ...`."""
    for i, arg in enumerate(argv):
        if arg.startswith("-"):
            continue
        if arg not in COMMANDS:
            return argv[:i] + ["ensure"] + argv[i:]
        break
    return argv


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(_expand_branch_shorthand(list(argv)))

    if args.command is None:
        args.command = "list"
    if args.command == "exec":
        if args.cmd and args.cmd[0] == "--":
            args.cmd = args.cmd[1:]
    return args
