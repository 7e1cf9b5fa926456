"""Tests for result reporting and the working set."""

import pytest

from branchsweep.core.reporter import WorkingSet, prune, summarize
from branchsweep.exceptions import ProtectedBranchError
from branchsweep.models import BatchResult, Branch, BranchOutcome


def branches(*names, protected=()):
    return [Branch(name=n, commit_sha="0" * 40, protected=n in protected) for n in names]


class TestSummarize:
    """Test message generation."""

    def test_messages(self):
        result = BatchResult(
            results=[
                BranchOutcome(branch="a", archived=True, deleted=True, success=True),
                BranchOutcome(branch="b", archived=True, error="delete failed"),
                BranchOutcome(branch="c", archived=True, success=True),
                BranchOutcome(branch="d", deleted=True, success=True),
            ]
        )

        summary = summarize(result)

        assert summary.success_messages == [
            "a (archived and deleted)",
            "c (archived)",
            "d (deleted)",
        ]
        assert summary.failure_messages == ["b (delete failed)"]
        assert summary.has_failures
        assert summary.success_text() == (
            "Successfully processed: a (archived and deleted), c (archived), d (deleted)"
        )
        assert summary.failure_text() == "Failed operations: b (delete failed)"

    def test_never_claims_missing_action(self):
        summary = summarize(
            BatchResult(results=[BranchOutcome(branch="x", archived=True, success=True)])
        )
        assert "deleted" not in summary.success_messages[0]

    def test_empty(self):
        summary = summarize(BatchResult())
        assert summary.success_text() is None
        assert summary.failure_text() is None
        assert not summary.has_failures


class TestWorkingSet:
    """Test selection handling."""

    def test_select_and_toggle(self):
        ws = WorkingSet(branches("a", "b", "c"))
        ws.select("c")
        assert ws.toggle("a") is True
        assert ws.selected_names() == ["a", "c"]
        assert ws.toggle("a") is False
        assert ws.selected_names() == ["c"]

    def test_protected_not_selectable(self):
        ws = WorkingSet(branches("main", "a", protected={"main"}))
        with pytest.raises(ProtectedBranchError):
            ws.select("main")
        ws.select_all()
        assert ws.selected_names() == ["a"]

    def test_unknown_branch(self):
        ws = WorkingSet(branches("a"))
        with pytest.raises(ValueError, match="does not exist"):
            ws.select("zzz")

    def test_select_matching(self):
        ws = WorkingSet(
            branches("main", "feature/x", "feature/y", "fix/z", protected={"main"})
        )
        assert ws.select_matching("feature/*") == ["feature/x", "feature/y"]
        assert ws.select_matching("*") == ["feature/x", "feature/y", "fix/z"]
        assert not ws.is_selected("main")

    def test_unselect_all(self):
        ws = WorkingSet(branches("a", "b"), selected=["a", "b"])
        ws.unselect_all()
        assert ws.selected_names() == []

    def test_selection_does_not_touch_branches(self):
        source = branches("a", "b")
        first = WorkingSet(source)
        second = WorkingSet(source)
        first.select("a")
        assert not second.is_selected("a")


class TestPrune:
    """Test pruning deleted branches."""

    def test_prune_removes_deleted_only(self):
        ws = WorkingSet(branches("a", "b", "c", "d"), selected=["a", "b", "c"])
        result = BatchResult(
            results=[
                BranchOutcome(branch="a", archived=True, deleted=True, success=True),
                BranchOutcome(branch="b", archived=True, deleted=False, error="boom"),
                BranchOutcome(branch="c", deleted=True, success=True),
            ]
        )

        pruned = prune(ws, result)

        assert pruned.names == ["b", "d"]
        assert pruned.selected_names() == []

    def test_archived_branches_stay(self):
        ws = WorkingSet(branches("a", "b"), selected=["a"])
        result = BatchResult(
            results=[BranchOutcome(branch="a", archived=True, success=True)]
        )
        pruned = prune(ws, result)
        assert pruned.names == ["a", "b"]
        assert not pruned.is_selected("a")
