"""Pytest fixtures for git-worktree-keeper tests"""
import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, Mock

import git
import pytest

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import CONFIG_FILE_NAME
from git_worktree_keeper.core import WorktreeKeeper, load_environment
from git_worktree_keeper.models.environment import RepositoryEnvironment
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.client import GitClient
from git_worktree_keeper.services.lock_service import RepositoryLock
from git_worktree_keeper.services.post_creation_service import PostCreationRunner
from git_worktree_keeper.services.process_runner import ProcessRunner


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


def commit_file(repo: git.Repo, name: str, content: str, message: str) -> None:
    path = Path(repo.working_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message)


def write_repo_config(repo: git.Repo, **values) -> None:
    """Write .wt.config.json into the repository root."""
    (Path(repo.working_dir) / CONFIG_FILE_NAME).write_text(json.dumps(values))


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    # Keep the config file out of `git status` in the main worktree
    (repo_path / ".git" / "info").mkdir(exist_ok=True)
    (repo_path / ".git" / "info" / "exclude").write_text(f"{CONFIG_FILE_NAME}\n")

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_origin(git_repo):
    """Repository with a fake origin whose HEAD points at main, plus a remote-only branch."""
    repo = git_repo
    head = repo.head.commit.hexsha
    # Points nowhere so fetches fail fast instead of touching the network
    repo.create_remote("origin", str(Path(repo.working_dir).parent / "missing-origin.git"))
    repo.git.update_ref("refs/remotes/origin/main", head)
    repo.git.update_ref("refs/remotes/origin/remote-only", head)
    repo.git.symbolic_ref("refs/remotes/origin/HEAD", "refs/remotes/origin/main")
    yield repo


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Repository with a merged branch and an unmerged branch."""
    repo = git_repo

    repo.git.checkout("-b", "feature/to-merge")
    commit_file(repo, "merge.txt", "Merge content\n", "Feature to merge")
    repo.git.checkout("main")
    repo.git.merge("feature/to-merge", "--no-ff", "-m", "Merge feature/to-merge")

    repo.git.checkout("-b", "feature/unmerged")
    commit_file(repo, "unmerged.txt", "Work in progress\n", "Unmerged work")
    repo.git.checkout("main")

    yield repo


@pytest.fixture
def repo_keeper(git_repo):
    """WorktreeKeeper for the real repository, default branch configured as main."""
    write_repo_config(git_repo, defaultBranch="main")
    client = GitClient(git_repo.working_dir)
    return WorktreeKeeper(load_environment(client), client)


@pytest.fixture
def mock_git_client():
    """A GitClient stand-in with a single main worktree and no other branches."""
    client = Mock(spec=GitClient)
    client.list_worktrees.return_value = [
        WorktreeRecord(path="/repo", branch="main", head="abc123", is_main=True),
    ]
    client.list_local_branches.return_value = ["main"]
    client.branch_exists.return_value = (False, False)
    client.merged_branches.return_value = []
    client.current_branch.return_value = "main"
    client.is_dirty.return_value = False
    return client


@pytest.fixture
def mock_lock():
    """A RepositoryLock stand-in whose handle works as a context manager."""
    lock = Mock(spec=RepositoryLock)
    lock.acquire.return_value = MagicMock()
    return lock


@pytest.fixture
def mock_post_creation():
    return Mock(spec=PostCreationRunner)


@pytest.fixture
def mock_runner():
    runner = Mock(spec=ProcessRunner)
    runner.run.return_value = 0
    return runner


@pytest.fixture
def make_keeper(temp_dir, mock_git_client, mock_lock, mock_post_creation):
    """Build a WorktreeKeeper over mocks; the repository root is a real temp directory."""
    def _make(default_branch="main", **config_values):
        root = temp_dir / "repo"
        root.mkdir(exist_ok=True)
        env = RepositoryEnvironment(
            root=str(root),
            config=Config(**config_values),
            default_branch=default_branch,
        )
        return WorktreeKeeper(
            env,
            mock_git_client,
            lock=mock_lock,
            post_creation=mock_post_creation,
        )
    return _make


@pytest.fixture
def restore_root_logging():
    """setup_logging() replaces root handlers; put the previous ones back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
