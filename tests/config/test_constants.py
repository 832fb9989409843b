"""Tests for config/constants.py module.

Covers:
- Doc tag sets
- Default naming patterns
- Graph export markers
"""

from __future__ import annotations

import re

from dcilint.config.constants import (
    ARRAY_MARKER,
    CONTEXT_TAGS,
    DEFAULT_ROLE_FORMAT,
    DEFAULT_ROLE_METHOD_FORMAT,
    IGNORE_ROLE_TAGS,
    LIST_CALLS_IN_TAG,
    LIST_CALLS_TO_TAG,
)


class TestTags:
    """Tag sets are stored normalized."""

    def test_tags_are_lowercase_without_at(self) -> None:
        """Builder lowercases and strips "@" before lookup."""
        for tag in (*CONTEXT_TAGS, *IGNORE_ROLE_TAGS, LIST_CALLS_IN_TAG, LIST_CALLS_TO_TAG):
            assert tag == tag.lower()
            assert not tag.startswith("@")

    def test_context_and_ignore_tags_disjoint(self) -> None:
        """A tag cannot both open a Context and ignore a member."""
        assert not CONTEXT_TAGS & IGNORE_ROLE_TAGS


class TestDefaultFormats:
    """Default naming patterns."""

    def test_role_method_format_has_two_groups(self) -> None:
        """Group 1 is the Role, group 2 the method."""
        assert re.compile(DEFAULT_ROLE_METHOD_FORMAT).groups == 2

    def test_array_marker_is_not_a_role_name(self) -> None:
        """The array marker is not Role-shaped."""
        assert re.search(DEFAULT_ROLE_FORMAT, ARRAY_MARKER) is None
