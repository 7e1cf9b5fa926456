"""Utility modules for branchsweep."""

from branchsweep.utils.tag_names import (
    derive_tag_name,
    find_tag_name_collisions,
    validate_tag_prefix,
    InvalidTagPrefixError,
)
from branchsweep.utils.pagination import paginate, page_count

__all__ = [
    "derive_tag_name",
    "find_tag_name_collisions",
    "validate_tag_prefix",
    "InvalidTagPrefixError",
    "paginate",
    "page_count",
]
