"""Tests for archive tag naming."""

import pytest

from branchsweep.utils.tag_names import (
    InvalidTagPrefixError,
    derive_tag_name,
    find_tag_name_collisions,
    validate_tag_prefix,
)


class TestDeriveTagName:
    """Test tag name derivation."""

    def test_simple_branch(self):
        assert derive_tag_name("cleanup", "archive") == "archive/cleanup"

    def test_slashes_replaced(self):
        assert derive_tag_name("feature/x", "archive") == "archive/feature-x"
        assert derive_tag_name("team/a/b", "old") == "old/team-a-b"

    def test_prefix_may_contain_slash(self):
        assert derive_tag_name("feature/x", "archive/2024") == "archive/2024/feature-x"

    def test_deterministic(self):
        names = ["feature/x", "fix/y/z", "plain", "a-b"]
        first = [derive_tag_name(n, "archive") for n in names]
        second = [derive_tag_name(n, "archive") for n in names]
        assert first == second


class TestCollisions:
    """Test in-batch collision detection."""

    def test_no_collisions(self):
        assert find_tag_name_collisions(["feature/x", "feature/y"], "archive") == {}

    def test_slash_and_dash_collide(self):
        collisions = find_tag_name_collisions(
            ["feature/x", "other", "feature-x"], "archive"
        )
        assert collisions == {"archive/feature-x": ["feature/x", "feature-x"]}

    def test_empty_input(self):
        assert find_tag_name_collisions([], "archive") == {}


class TestValidateTagPrefix:
    """Test tag prefix validation."""

    @pytest.mark.parametrize("prefix", ["archive", "archive/2024", "old_branches", "v1.0"])
    def test_valid_prefixes(self, prefix):
        validate_tag_prefix(prefix)

    @pytest.mark.parametrize(
        "prefix",
        ["", "/archive", "archive/", "a//b", "a..b", "has space", "a~b", "x:y", "a*", "p.lock", "p@{1}"],
    )
    def test_invalid_prefixes(self, prefix):
        with pytest.raises(InvalidTagPrefixError):
            validate_tag_prefix(prefix)
