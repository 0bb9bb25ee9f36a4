"""Tests for BranchDirectoryMapper"""
import pytest

from git_worktree_keeper.exceptions import InvalidBranchNameError
from git_worktree_keeper.services.branch_mapping_service import BranchDirectoryMapper


class TestBranchDirectoryMapper:
    """Test branch name to directory name mapping."""

    @pytest.mark.parametrize("branch,expected", [
        ("main", "main"),
        ("feature/login", "feature-login"),
        ("user/alice/fix-1.2_b", "user-alice-fix-1.2_b"),
        ("release-2024.01", "release-2024.01"),
    ])
    def test_valid_branches(self, branch, expected):
        assert BranchDirectoryMapper.map(branch) == expected

    @pytest.mark.parametrize("branch", [
        "",
        "has space",
        "tab\there",
        "feat:colon",
        "tilde~1",
        "caret^",
        "quote'd",
        "café",
        "star*",
    ])
    def test_invalid_branches(self, branch):
        with pytest.raises(InvalidBranchNameError) as exc_info:
            BranchDirectoryMapper.map(branch)
        assert exc_info.value.branch == branch

    def test_trailing_newline_rejected(self):
        """A newline after an otherwise valid name must not slip through."""
        with pytest.raises(InvalidBranchNameError):
            BranchDirectoryMapper.map("feature\n")

    def test_distinct_branches_can_share_a_directory(self):
        assert BranchDirectoryMapper.map("feature/a") == BranchDirectoryMapper.map("feature-a")

    def test_try_map(self):
        assert BranchDirectoryMapper.try_map("a/b") == "a-b"
        assert BranchDirectoryMapper.try_map("a b") is None
