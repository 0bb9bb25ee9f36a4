"""Tests for argument parsing and the wt entry point"""
import io
import json
import logging
import os
from pathlib import Path

import pytest
from rich.prompt import Confirm, Prompt

from git_worktree_keeper.cli import main, parse_args

from conftest import write_repo_config

pytestmark = pytest.mark.usefixtures("restore_root_logging")


class TestParseArgs:
    def test_no_command_lists(self):
        assert parse_args([]).command == "list"

    def test_branch_shorthand(self):
        args = parse_args(["feature/x"])
        assert args.command == "ensure"
        assert args.branch == "feature/x"
        assert args.base is None

    def test_branch_shorthand_with_flags(self):
        args = parse_args(["-v", "feature/x", "--from", "develop"])
        assert args.verbose
        assert args.command == "ensure"
        assert args.base == "develop"

    def test_branch_named_like_command_needs_ensure(self):
        args = parse_args(["ensure", "list"])
        assert args.command == "ensure"
        assert args.branch == "list"

    def test_remove_flags(self):
        args = parse_args(["remove", "feature/x", "-r"])
        assert args.branch == "feature/x"
        assert args.force

    def test_remove_without_branch(self):
        assert parse_args(["remove"]).branch is None

    def test_prune_flags(self):
        args = parse_args(["prune", "--dry-run", "--fetch", "-f"])
        assert args.dry_run and args.fetch and args.force

    def test_exec_strips_separator(self):
        args = parse_args(["exec", "feature/x", "--", "make", "test", "-k", "fast"])
        assert args.branch == "feature/x"
        assert args.cmd == ["make", "test", "-k", "fast"]

    def test_exec_without_separator(self):
        assert parse_args(["exec", "feature/x", "ls"]).cmd == ["ls"]

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("wt ")


@pytest.fixture
def in_repo(git_repo, monkeypatch):
    """Run commands from inside the test repository with default logging."""
    monkeypatch.delenv("WT_DEBUG", raising=False)
    monkeypatch.chdir(git_repo.working_dir)
    return git_repo


@pytest.fixture
def configured_repo(in_repo):
    write_repo_config(in_repo, defaultBranch="main")
    return in_repo


class TestMain:
    def test_ensure_prints_path(self, configured_repo, capsys):
        assert main(["feature/x"]) == 0
        path = capsys.readouterr().out.strip()
        assert path == f"{configured_repo.working_dir}.wt/feature-x"
        assert os.path.isdir(path)

    def test_path(self, configured_repo, capsys):
        main(["ensure", "feature/x"])
        capsys.readouterr()

        assert main(["path", "feature/x"]) == 0
        assert capsys.readouterr().out.strip() == f"{configured_repo.working_dir}.wt/feature-x"

    def test_path_missing(self, configured_repo, capsys):
        assert main(["path", "feature/none"]) == 1
        assert "no worktree exists" in capsys.readouterr().err

    def test_list_plain_output(self, configured_repo, capsys):
        main(["ensure", "feature/x"])
        capsys.readouterr()

        assert main(["list"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            f"main\t{configured_repo.working_dir}",
            f"feature/x\t{configured_repo.working_dir}.wt/feature-x",
        ]

    def test_invalid_branch(self, configured_repo, capsys):
        assert main(["ensure", "bad name"]) == 1
        assert "illegal" in capsys.readouterr().err

    def test_worktree_base_blocked_by_file(self, configured_repo, capsys):
        Path(f"{configured_repo.working_dir}.wt").write_text("")

        assert main(["ensure", "feature/x"]) == 1
        err = capsys.readouterr().err
        assert "failed to create worktree root" in err
        assert "Traceback" not in err

    def test_rollback_reported(self, in_repo, capsys):
        write_repo_config(in_repo, defaultBranch="main", postCreateCmd=["false"])

        assert main(["feature/x"]) == 1
        err = capsys.readouterr().err
        assert "post-create step 'false' failed" in err
        assert "Rollback status: succeeded" in err

    def test_remove(self, configured_repo, capsys):
        main(["feature/x"])
        path = capsys.readouterr().out.strip()

        assert main(["remove", "feature/x"]) == 0
        assert not os.path.exists(path)

    def test_remove_default_branch_refused(self, configured_repo, capsys):
        assert main(["remove", "main"]) == 1
        assert "refusing to remove" in capsys.readouterr().err

    def test_remove_without_branch_non_interactive(self, configured_repo, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert main(["remove"]) == 1
        assert "branch required" in capsys.readouterr().err

    def test_prune_dry_run(self, configured_repo, capsys):
        configured_repo.git.branch("merged")
        main(["merged"])
        capsys.readouterr()

        assert main(["prune", "--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "Candidates for pruning:" in out
        assert "merged" in out
        assert os.path.isdir(f"{configured_repo.working_dir}.wt/merged")

    def test_prune_nothing(self, configured_repo, capsys):
        assert main(["prune", "--dry-run"]) == 0
        assert "No worktrees to prune." in capsys.readouterr().out

    def test_health_exit_code(self, in_repo, capsys):
        assert main(["health"]) == 1
        assert "[ERROR] Default branch" in capsys.readouterr().out

        write_repo_config(in_repo, defaultBranch="main")
        assert main(["health"]) == 0

    def test_exec_returns_command_status(self, configured_repo, capsys):
        main(["feature/x"])
        assert main(["exec", "feature/x", "--", "sh", "-c", "test -f README.md && exit 3"]) == 3

    def test_exec_missing_command(self, configured_repo, capsys):
        assert main(["exec", "main"]) == 1
        assert "missing command" in capsys.readouterr().err

    def test_exec_unknown_program(self, configured_repo, capsys):
        assert main(["exec", "main", "--", "definitely-not-a-real-program-xyz"]) == 1


class TestInit:
    def test_yes_writes_detected_defaults(self, git_repo_with_origin, monkeypatch, capsys):
        monkeypatch.chdir(git_repo_with_origin.working_dir)

        assert main(["init", "--yes"]) == 0

        path = Path(git_repo_with_origin.working_dir, ".wt.config.json")
        assert capsys.readouterr().out.strip() == str(path)
        data = json.loads(path.read_text())
        assert data["defaultBranch"] == "main"
        assert data["worktreePathTemplate"] == "$REPO_PATH.wt"
        assert data["deleteBranchWithWorktree"] is False

    def test_yes_without_detection_fails(self, in_repo, capsys):
        assert main(["init", "-y"]) == 1
        assert not Path(in_repo.working_dir, ".wt.config.json").exists()

    def test_existing_config_is_kept(self, configured_repo, capsys):
        path = Path(configured_repo.working_dir, ".wt.config.json")
        before = path.read_text()

        assert main(["init", "--yes"]) == 0
        assert path.read_text() == before

    def test_interactive(self, in_repo, monkeypatch, capsys):
        answers = iter(["develop", "$REPO_PATH.wt", ".env, .tool-versions", "npm ci"])
        monkeypatch.setattr(Prompt, "ask", lambda *args, **kwargs: next(answers))
        monkeypatch.setattr(Confirm, "ask", lambda *args, **kwargs: True)

        assert main(["init"]) == 0

        data = json.loads(Path(in_repo.working_dir, ".wt.config.json").read_text())
        assert data == {
            "defaultBranch": "develop",
            "worktreePathTemplate": "$REPO_PATH.wt",
            "worktreeCopyPatterns": [".env", ".tool-versions"],
            "postCreateCmd": ["npm ci"],
            "deleteBranchWithWorktree": True,
        }
