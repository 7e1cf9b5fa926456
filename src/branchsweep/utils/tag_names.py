"""Archive tag naming for branchsweep.

An archive tag for branch ``b`` under prefix ``p`` is named ``p/<b>`` with every
``/`` in the branch name replaced by ``-``. The mapping is not injective
(``feature/x`` and ``feature-x`` share ``archive/feature-x``), so batches are
checked for in-batch collisions before anything is sent upstream.
"""

import re
from typing import Dict, Iterable, List


# Characters git refuses in ref names (see git-check-ref-format)
FORBIDDEN_REF_CHARS = re.compile(r"[\s~^:?*\[\\]")


class InvalidTagPrefixError(ValueError):
    """Raised when a tag prefix can't produce valid git ref names."""

    pass


def validate_tag_prefix(prefix: str) -> None:
    """Validate that a prefix yields well-formed tag refs.

    Valid prefixes must:
    - Be non-empty
    - Not start or end with '/' or contain '//'
    - Not contain '..', '@{', whitespace, control characters or ``~^:?*[\\``
    - Not end with '.lock' or '.'

    Raises:
        InvalidTagPrefixError: If the prefix is invalid
    """
    if not prefix:
        raise InvalidTagPrefixError("Tag prefix cannot be empty")

    if prefix.startswith("/") or prefix.endswith("/") or "//" in prefix:
        raise InvalidTagPrefixError(
            f"Invalid tag prefix '{prefix}'. Prefix cannot start or end with '/' "
            f"or contain empty path segments"
        )

    if ".." in prefix or "@{" in prefix:
        raise InvalidTagPrefixError(
            f"Invalid tag prefix '{prefix}'. Prefix cannot contain '..' or '@{{'"
        )

    if any(ord(c) < 32 or ord(c) == 127 for c in prefix) or FORBIDDEN_REF_CHARS.search(
        prefix
    ):
        raise InvalidTagPrefixError(
            f"Invalid tag prefix '{prefix}'. Prefix contains characters not allowed "
            f"in git refs"
        )

    if prefix.endswith(".lock") or prefix.endswith("."):
        raise InvalidTagPrefixError(
            f"Invalid tag prefix '{prefix}'. Prefix cannot end with '.lock' or '.'"
        )


def derive_tag_name(branch: str, prefix: str) -> str:
    """Return the archive tag name for ``branch`` under ``prefix``."""
    return f"{prefix}/{branch.replace('/', '-')}"


def find_tag_name_collisions(
    branches: Iterable[str], prefix: str
) -> Dict[str, List[str]]:
    """Group branches whose archive tag names coincide.

    Returns:
        Mapping of tag name to the (input-ordered) branches deriving it, only for
        tag names shared by two or more branches.
    """
    by_tag: Dict[str, List[str]] = {}
    for branch in branches:
        by_tag.setdefault(derive_tag_name(branch, prefix), []).append(branch)

    return {tag: names for tag, names in by_tag.items() if len(names) > 1}
