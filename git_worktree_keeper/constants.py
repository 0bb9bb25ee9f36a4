"""Shared constants for git-worktree-keeper."""

import re
from dataclasses import dataclass
from typing import List


CONFIG_FILE_NAME = ".wt.config.json"
REPO_PATH_PLACEHOLDER = "$REPO_PATH"
DEFAULT_PATH_TEMPLATE = "$REPO_PATH.wt"

# Directory names derived from branches may only use these characters
DIR_NAME_PATTERN = re.compile(r"^[A-Za-z0-9\-_.]+$")

# Sentinel branch name for worktrees with a detached HEAD
DETACHED = "(detached)"

LOCK_FILE_NAME = "wt.lock"
DEFAULT_LOCK_TIMEOUT = 5.0  # seconds
LOCK_POLL_INTERVAL = 0.1  # seconds

DEBUG_ENV_VAR = "WT_DEBUG"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # minimum width, 0 means auto


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("head", "HEAD", 9),
]


# Rich styles for health levels
HEALTH_COLORS = {
    "OK": "green",
    "WARN": "yellow",
    "ERROR": "red",
}
