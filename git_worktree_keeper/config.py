"""Configuration handling for git-worktree-keeper"""

import json
import os
from dataclasses import dataclass, field
from typing import Optional, List

from git_worktree_keeper.constants import CONFIG_FILE_NAME, REPO_PATH_PLACEHOLDER
from git_worktree_keeper.exceptions import ConfigError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

# JSON key -> dataclass attribute
KEY_MAP = {
    "defaultBranch": "default_branch",
    "worktreePathTemplate": "worktree_path_template",
    "worktreeCopyPatterns": "worktree_copy_patterns",
    "postCreateCmd": "post_create_cmd",
    "deleteBranchWithWorktree": "delete_branch_with_worktree",
}


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    default_branch: Optional[str] = None  # None = auto-detect via origin/HEAD
    worktree_path_template: str = ""  # "" = "<repo root>.wt"
    worktree_copy_patterns: List[str] = field(default_factory=list)
    post_create_cmd: List[str] = field(default_factory=list)
    delete_branch_with_worktree: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_default_branch()
        self._validate_path_template()
        self._validate_string_list("worktree_copy_patterns")
        self._validate_string_list("post_create_cmd")
        self._validate_delete_flag()

    def _validate_default_branch(self):
        """Normalize default_branch; blank means auto-detect."""
        if self.default_branch is None:
            return
        if not isinstance(self.default_branch, str):
            raise ValueError(f"defaultBranch must be a string, got {type(self.default_branch).__name__}")
        self.default_branch = self.default_branch.strip() or None

    def _validate_path_template(self):
        """Validate worktree_path_template is a string."""
        if self.worktree_path_template is None:
            self.worktree_path_template = ""
        if not isinstance(self.worktree_path_template, str):
            raise ValueError("worktreePathTemplate must be a string")
        self.worktree_path_template = self.worktree_path_template.strip()

    def _validate_string_list(self, name: str):
        """Validate a list-of-strings option."""
        value = getattr(self, name)
        if value is None:
            setattr(self, name, [])
            return
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ValueError(f"{name} must be a list of strings")

    def _validate_delete_flag(self):
        """Validate delete_branch_with_worktree is a boolean."""
        if not isinstance(self.delete_branch_with_worktree, bool):
            raise ValueError("deleteBranchWithWorktree must be true or false")

    def get_worktree_base(self, repo_root: str) -> str:
        """Directory under which worktrees are created."""
        if not self.worktree_path_template:
            return repo_root + ".wt"
        return self.worktree_path_template.replace(REPO_PATH_PLACEHOLDER, repo_root)

    def to_dict(self) -> dict:
        """Convert config to its JSON representation."""
        return {
            "defaultBranch": self.default_branch or "",
            "worktreePathTemplate": self.worktree_path_template,
            "worktreeCopyPatterns": list(self.worktree_copy_patterns),
            "postCreateCmd": list(self.post_create_cmd),
            "deleteBranchWithWorktree": self.delete_branch_with_worktree,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from its JSON representation, ignoring unknown keys."""
        filtered = {KEY_MAP[k]: v for k, v in config_dict.items() if k in KEY_MAP}
        return cls(**filtered)


def get_config_path(repo_root: str) -> str:
    return os.path.join(repo_root, CONFIG_FILE_NAME)


def unknown_keys(raw: dict) -> List[str]:
    """Return keys in a raw config mapping that Config does not recognize."""
    return sorted(k for k in raw if k not in KEY_MAP)


def read_raw_config(repo_root: str) -> Optional[dict]:
    """Read the config file as a plain dict.

    Returns:
        The parsed JSON object, or None if the file does not exist

    Raises:
        ConfigError: if the file cannot be read or is not a JSON object
    """
    path = get_config_path(repo_root)
    try:
        with open(path, "r") as f:
            raw = json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise ConfigError(path, f"invalid JSON: {e}") from e
    except OSError as e:
        raise ConfigError(path, f"failed to read: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(path, "top-level value must be an object")
    return raw


def load_config(repo_root: str) -> Config:
    """Load the repository config, falling back to defaults when absent."""
    raw = read_raw_config(repo_root)
    if raw is None:
        logger.debug("No config file found, using defaults")
        return Config()

    extra = unknown_keys(raw)
    if extra:
        logger.warning(f"Ignoring unknown config keys: {', '.join(extra)}")

    try:
        return Config.from_dict(raw)
    except ValueError as e:
        raise ConfigError(get_config_path(repo_root), str(e)) from e


def write_config(config: Config, repo_root: str) -> str:
    """Write the config atomically (temp file + rename).

    Returns:
        Path of the written config file
    """
    path = get_config_path(repo_root)
    temp_path = path + ".tmp"
    try:
        with open(temp_path, "w") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(temp_path, path)
    except OSError:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
    logger.debug(f"Wrote config to {path}")
    return path
