"""Typed-phrase confirmation for destructive operations."""

from typing import Optional, Union

from branchsweep.exceptions import ConfirmationMismatch
from branchsweep.models import OperationMode, OperationRequest

ModeLike = Union[OperationMode, str]

CONFIRMATION_PHRASES = {
    OperationMode.ARCHIVE_ONLY: "archive",
    OperationMode.ARCHIVE_AND_DELETE: "archive-delete",
    OperationMode.DELETE_ONLY: "delete",
}


def requires_confirmation(mode: ModeLike) -> bool:
    """Whether ``mode`` deletes anything and so needs a typed confirmation."""
    return OperationMode(mode).deletes


def confirmation_phrase(mode: ModeLike) -> str:
    """The exact word the operator must type for ``mode``."""
    return CONFIRMATION_PHRASES[OperationMode(mode)]


def authorize(mode: ModeLike, typed: Optional[str]) -> bool:
    """Case-sensitive exact match of ``typed`` against the phrase for ``mode``."""
    return typed is not None and typed == confirmation_phrase(mode)


def ensure_authorized(mode: ModeLike, typed: Optional[str]) -> None:
    """Raise unless ``mode`` is non-destructive or ``typed`` authorizes it.

    Raises:
        ConfirmationMismatch: If a required confirmation is missing or wrong
    """
    if requires_confirmation(mode) and not authorize(mode, typed):
        raise ConfirmationMismatch(confirmation_phrase(mode))


class ConfirmationGate:
    """Holds at most one request waiting for the operator to confirm it.

    Submitting a new request replaces the pending one, and the expected phrase
    is always derived from whatever is pending when ``confirm`` is called.
    """

    def __init__(self):
        self._pending: Optional[OperationRequest] = None

    @property
    def pending(self) -> Optional[OperationRequest]:
        return self._pending

    @property
    def expected_phrase(self) -> Optional[str]:
        if self._pending is None:
            return None
        return confirmation_phrase(self._pending.mode)

    def submit(self, request: OperationRequest) -> Optional[OperationRequest]:
        """Stage ``request``.

        Returns:
            The request when it may be dispatched right away, or None when it
            is now pending confirmation
        """
        if not requires_confirmation(request.mode):
            self._pending = None
            return request

        self._pending = request
        return None

    def confirm(self, typed: Optional[str]) -> OperationRequest:
        """Release the pending request if ``typed`` matches its phrase.

        Raises:
            ValueError: If nothing is pending
            ConfirmationMismatch: If the phrase does not match; the request stays pending
        """
        if self._pending is None:
            raise ValueError("No operation is pending confirmation")

        request = self._pending
        ensure_authorized(request.mode, typed)
        self._pending = None
        return request

    def cancel(self) -> None:
        self._pending = None
