"""Read-only health checks for a repository's worktree setup."""

import glob
import os
from typing import Callable

from git_worktree_keeper.config import Config, get_config_path, read_raw_config, unknown_keys
from git_worktree_keeper.exceptions import ConfigError, GitOperationError
from git_worktree_keeper.models.health import HealthLevel, HealthReport
from git_worktree_keeper.services.collision_service import find_mapping_collisions
from git_worktree_keeper.services.git.client import GitClient
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class HealthInspector:
    """Reports configuration problems without changing anything."""

    def __init__(self, client_factory: Callable[[str], GitClient] = GitClient.discover):
        self.client_factory = client_factory

    def run(self, start_path: str = ".") -> HealthReport:
        """
        Run all health checks.

        Args:
            start_path: Any path inside the repository

        Returns:
            HealthReport, stopping early if start_path is not in a repository
        """
        report = HealthReport()

        try:
            git_client = self.client_factory(start_path)
        except GitOperationError as e:
            report.add("Repo root", HealthLevel.ERROR, f"Not a git repository: {e}")
            return report
        root = git_client.repo_path
        report.add("Repo root", HealthLevel.OK, root)

        config = self._check_config(report, root)
        self._check_default_branch(report, git_client, config)
        self._check_worktree_base(report, config.get_worktree_base(root))
        self._check_copy_patterns(report, git_client, root, config)
        self._check_collisions(report, git_client)
        return report

    def _check_config(self, report: HealthReport, root: str) -> Config:
        """Validate the config file; fall back to defaults for later checks."""
        try:
            raw = read_raw_config(root)
        except ConfigError as e:
            report.add("Config", HealthLevel.ERROR, str(e))
            return Config()

        if raw is None:
            report.add("Config", HealthLevel.OK, "Not present (using defaults)")
            return Config()

        try:
            config = Config.from_dict(raw)
        except ValueError as e:
            report.add("Config", HealthLevel.ERROR, f"Invalid config {get_config_path(root)}: {e}")
            return Config()

        extra = unknown_keys(raw)
        if extra:
            report.add("Config", HealthLevel.WARN, f"Unknown keys: {', '.join(extra)}")
        else:
            report.add("Config", HealthLevel.OK, "Valid")
        return config

    def _check_default_branch(self, report: HealthReport, git_client: GitClient, config: Config) -> None:
        if config.default_branch:
            report.add("Default branch", HealthLevel.OK, f"{config.default_branch} (override)")
            return

        detected = git_client.default_branch()
        if detected is None:
            report.add(
                "Default branch",
                HealthLevel.ERROR,
                "Could not determine default branch via origin/HEAD. Please set 'defaultBranch' in config.",
            )
        else:
            report.add("Default branch", HealthLevel.OK, detected)

    def _check_worktree_base(self, report: HealthReport, wt_root: str) -> None:
        """Check the worktree base, or its parent when not yet created, is writable."""
        if os.path.isdir(wt_root):
            if os.access(wt_root, os.W_OK | os.X_OK):
                report.add("Worktree base", HealthLevel.OK, wt_root)
            else:
                report.add("Worktree base", HealthLevel.ERROR, f"Directory {wt_root} is not writable")
            return

        if os.path.exists(wt_root):
            report.add("Worktree base", HealthLevel.ERROR, f"{wt_root} exists and is not a directory")
            return

        parent = os.path.dirname(os.path.normpath(wt_root))
        if not os.path.isdir(parent):
            report.add("Worktree base", HealthLevel.ERROR, f"Parent directory {parent} does not exist")
        elif not os.access(parent, os.W_OK | os.X_OK):
            report.add("Worktree base", HealthLevel.ERROR, f"Parent directory {parent} is not writable")
        else:
            report.add("Worktree base", HealthLevel.OK, f"{wt_root} (to be created)")

    def _check_copy_patterns(self, report: HealthReport, git_client: GitClient, root: str, config: Config) -> None:
        for pattern in config.worktree_copy_patterns:
            matches = glob.glob(os.path.join(glob.escape(root), pattern), recursive=True)
            if not matches:
                report.add("Copy patterns", HealthLevel.WARN, f"Pattern {pattern!r} matches nothing in repo")
                continue

            for match in sorted(matches):
                rel = os.path.relpath(match, root)
                if git_client.is_tracked(rel):
                    report.add(
                        "Copy patterns",
                        HealthLevel.WARN,
                        f"File {rel!r} is tracked by git; worktreeCopyPattern is redundant for it",
                    )

    def _check_collisions(self, report: HealthReport, git_client: GitClient) -> None:
        try:
            branches = git_client.list_local_branches()
        except GitOperationError as e:
            logger.debug(f"Skipping collision scan: {e}")
            return

        for dir_name, branch, other in find_mapping_collisions(branches):
            report.add(
                "Collisions",
                HealthLevel.WARN,
                f"Branches {branch!r} and {other!r} will both map to directory {dir_name!r}",
            )
