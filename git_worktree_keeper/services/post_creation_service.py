"""Post-creation setup for new worktrees: file copies and commands."""

import glob
import os
import shutil
from typing import Optional

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import PostCreationError
from git_worktree_keeper.services.process_runner import ProcessRunner
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def copy_if_missing(src: str, dst: str) -> bool:
    """Copy src to dst unless something already exists at dst.

    Returns:
        True if a copy was made
    """
    if os.path.lexists(dst):
        return False

    os.makedirs(os.path.dirname(dst), exist_ok=True)
    if os.path.isdir(src):
        shutil.copytree(src, dst, symlinks=True)
    else:
        shutil.copy2(src, dst)
    return True


class PostCreationRunner:
    """Applies copy patterns and post-create commands to a new worktree."""

    def __init__(self, process_runner: Optional[ProcessRunner] = None):
        self.process_runner = process_runner or ProcessRunner()

    def apply(self, repo_root: str, target_path: str, config: Config) -> None:
        """
        Run both post-creation phases, stopping at the first hard failure.

        Args:
            repo_root: Root of the main worktree (source of copied files)
            target_path: The new worktree
            config: Repository configuration

        Raises:
            PostCreationError: if a copy or a command fails
        """
        self.copy_patterns(repo_root, target_path, config.worktree_copy_patterns)
        self.run_commands(target_path, config.post_create_cmd)

    def copy_patterns(self, repo_root: str, target_path: str, patterns) -> None:
        """Copy files matching each glob from repo_root into target_path."""
        for pattern in patterns:
            matches = sorted(glob.glob(os.path.join(glob.escape(repo_root), pattern), recursive=True))
            if not matches:
                logger.warning(f"Copy pattern {pattern!r} matched nothing, skipping")
                continue

            for src in matches:
                rel = os.path.relpath(src, repo_root)
                dst = os.path.join(target_path, rel)
                try:
                    if copy_if_missing(src, dst):
                        logger.info(f"Copied {rel} into new worktree")
                    else:
                        logger.debug(f"{rel} already exists in worktree, not overwriting")
                except OSError as e:
                    raise PostCreationError(f"copy {src} to {dst}", e) from e

    def run_commands(self, target_path: str, commands) -> None:
        """Run each post-create command inside target_path."""
        for command in commands:
            parts = command.split()
            if not parts:
                logger.warning("Skipping empty postCreateCmd in config")
                continue

            try:
                status = self.process_runner.run(parts, cwd=target_path)
            except OSError as e:
                raise PostCreationError(command, e) from e

            if status != 0:
                raise PostCreationError(command, f"exit status {status}")
