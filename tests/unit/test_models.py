"""Tests for branchsweep models."""

import pytest
from pydantic import ValidationError

from branchsweep.models import (
    BatchResult,
    Branch,
    BranchOutcome,
    OperationMode,
    OperationRequest,
    Repository,
    RepositoryRef,
    Tag,
)


class TestOperationMode:
    """Test operation mode helpers."""

    def test_values(self):
        assert OperationMode("archive-only") is OperationMode.ARCHIVE_ONLY
        assert OperationMode("archive-and-delete") is OperationMode.ARCHIVE_AND_DELETE
        assert OperationMode("delete-only") is OperationMode.DELETE_ONLY

    def test_archives_and_deletes(self):
        assert OperationMode.ARCHIVE_ONLY.archives
        assert not OperationMode.ARCHIVE_ONLY.deletes
        assert OperationMode.ARCHIVE_AND_DELETE.archives
        assert OperationMode.ARCHIVE_AND_DELETE.deletes
        assert not OperationMode.DELETE_ONLY.archives
        assert OperationMode.DELETE_ONLY.deletes


class TestOperationRequest:
    """Test request validation."""

    def test_valid_request(self):
        request = OperationRequest(
            mode="archive-and-delete", branches=["feature/x", "feature/y"]
        )
        assert request.mode is OperationMode.ARCHIVE_AND_DELETE
        assert request.branches == ["feature/x", "feature/y"]
        assert request.tag_prefix == "archive"

    def test_alias(self):
        request = OperationRequest(mode="archive-only", branches=["a"], tagPrefix="old")
        assert request.tag_prefix == "old"

    def test_empty_branches_rejected(self):
        with pytest.raises(ValidationError, match="At least one branch"):
            OperationRequest(mode="archive-only", branches=[])

    def test_duplicates_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate branches"):
            OperationRequest(mode="archive-only", branches=["a", "b", "a"])

    def test_blank_branch_rejected(self):
        with pytest.raises(ValidationError):
            OperationRequest(mode="archive-only", branches=["a", " "])

    def test_invalid_prefix_rejected(self):
        with pytest.raises(ValidationError):
            OperationRequest(mode="archive-only", branches=["a"], tag_prefix="")

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            OperationRequest(mode="archive-everything", branches=["a"])

    def test_immutable(self):
        request = OperationRequest(mode="archive-only", branches=["a"])
        with pytest.raises(ValidationError):
            request.tag_prefix = "other"


class TestOutcomes:
    """Test outcome and batch result models."""

    def test_action(self):
        assert BranchOutcome(branch="a", archived=True, deleted=True, success=True).action == "archived and deleted"
        assert BranchOutcome(branch="a", archived=True, success=True).action == "archived"
        assert BranchOutcome(branch="a", deleted=True, success=True).action == "deleted"

    def test_partitions_keep_order(self):
        result = BatchResult(
            results=[
                BranchOutcome(branch="c", archived=True, success=True),
                BranchOutcome(branch="a", error="nope"),
                BranchOutcome(branch="b", archived=True, deleted=True, success=True),
            ]
        )
        assert [r.branch for r in result.successes] == ["c", "b"]
        assert [r.branch for r in result.failures] == ["a"]
        assert result.deleted_branches == ["b"]
        assert result.outcome_for("a").error == "nope"
        assert result.outcome_for("zzz") is None

    def test_serialization(self):
        outcome = BranchOutcome(branch="feature/y", archived=True, error="boom")
        assert outcome.model_dump() == {
            "branch": "feature/y",
            "archived": True,
            "deleted": False,
            "success": False,
            "error": "boom",
        }


class TestRemoteModels:
    """Test parsing of remote payloads."""

    def test_branch_from_api(self):
        branch = Branch.from_api(
            {
                "name": "feature/x",
                "commit": {"sha": "abc123", "url": "https://example"},
                "protected": True,
            }
        )
        assert branch.name == "feature/x"
        assert branch.commit_sha == "abc123"
        assert branch.protected
        assert not branch.can_delete()

    def test_tag_from_api(self):
        tag = Tag.from_api({"name": "archive/x", "commit": {"sha": "1234567890"}})
        assert tag.short_sha == "1234567"

    def test_repository_from_api(self):
        repo = Repository.from_api(
            {
                "id": 1,
                "name": "widgets",
                "full_name": "acme/widgets",
                "clone_url": "https://github.com/acme/widgets.git",
                "default_branch": "main",
                "owner": {"login": "acme"},
                "private": False,
            }
        )
        assert repo.owner == "acme"
        assert repo.ref == RepositoryRef(owner="acme", name="widgets")

    def test_repository_ref_parse(self):
        ref = RepositoryRef.parse("acme/widgets")
        assert ref.full_name == "acme/widgets"
        assert str(ref) == "acme/widgets"

    @pytest.mark.parametrize("value", ["widgets", "acme/", "/widgets", "a/b/c", "../x"])
    def test_repository_ref_parse_invalid(self, value):
        with pytest.raises(ValueError):
            RepositoryRef.parse(value)
