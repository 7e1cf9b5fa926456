"""Reporting batch results and maintaining the operator's working set."""

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Iterable, Iterator, List, Optional, Set

from branchsweep.exceptions import ProtectedBranchError
from branchsweep.models import BatchResult, Branch


@dataclass
class Summary:
    """Human readable messages for one batch."""

    success_messages: List[str] = field(default_factory=list)
    failure_messages: List[str] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failure_messages)

    def success_text(self) -> Optional[str]:
        if not self.success_messages:
            return None
        return f"Successfully processed: {', '.join(self.success_messages)}"

    def failure_text(self) -> Optional[str]:
        if not self.failure_messages:
            return None
        return f"Failed operations: {', '.join(self.failure_messages)}"


def summarize(result: BatchResult) -> Summary:
    """Build success and failure messages in the result's branch order."""
    summary = Summary()
    for outcome in result.results:
        if outcome.success:
            summary.success_messages.append(f"{outcome.branch} ({outcome.action})")
        else:
            summary.failure_messages.append(
                f"{outcome.branch} ({outcome.error or 'unknown error'})"
            )
    return summary


class WorkingSet:
    """The operator's local view of a repository's branches.

    Selection is kept as a set of branch names next to the authoritative branch
    list instead of being stored on the branches themselves.
    """

    def __init__(self, branches: Iterable[Branch], selected: Iterable[str] = ()):
        self._branches: List[Branch] = list(branches)
        self._index = {b.name: b for b in self._branches}
        self._selected: Set[str] = set()
        for name in selected:
            self.select(name)

    @property
    def branches(self) -> List[Branch]:
        return list(self._branches)

    @property
    def names(self) -> List[str]:
        return [b.name for b in self._branches]

    def __len__(self) -> int:
        return len(self._branches)

    def __iter__(self) -> Iterator[Branch]:
        return iter(self._branches)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def get(self, name: str) -> Branch:
        """Return the branch called ``name``.

        Raises:
            ValueError: If no such branch is in the working set
        """
        branch = self._index.get(name)
        if branch is None:
            raise ValueError(f"Branch '{name}' does not exist")
        return branch

    def is_selected(self, name: str) -> bool:
        return name in self._selected

    def select(self, name: str) -> None:
        """Select a branch.

        Raises:
            ValueError: If the branch is unknown
            ProtectedBranchError: If the branch is protected
        """
        branch = self.get(name)
        if not branch.can_delete():
            raise ProtectedBranchError(name)
        self._selected.add(name)

    def unselect(self, name: str) -> None:
        self._selected.discard(name)

    def toggle(self, name: str) -> bool:
        """Flip selection of ``name`` and return the new state."""
        if name in self._selected:
            self.unselect(name)
            return False
        self.select(name)
        return True

    def select_all(self) -> None:
        """Select every branch that isn't protected."""
        self._selected = {b.name for b in self._branches if b.can_delete()}

    def unselect_all(self) -> None:
        self._selected.clear()

    def select_matching(self, pattern: str) -> List[str]:
        """Select unprotected branches whose name matches a glob ``pattern``.

        Returns:
            Names newly matched, in branch order
        """
        matched = [
            b.name
            for b in self._branches
            if b.can_delete() and fnmatchcase(b.name, pattern)
        ]
        self._selected.update(matched)
        return matched

    def selected_names(self) -> List[str]:
        """Selected branch names in working set order."""
        return [b.name for b in self._branches if b.name in self._selected]

    def selected_branches(self) -> List[Branch]:
        return [b for b in self._branches if b.name in self._selected]


def prune(working_set: WorkingSet, result: BatchResult) -> WorkingSet:
    """Drop branches the batch deleted and clear every selection.

    Branches that were archived but not deleted stay in the working set.
    """
    deleted = set(result.deleted_branches)
    return WorkingSet(b for b in working_set if b.name not in deleted)
