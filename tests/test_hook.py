"""Tests for hook references - signature, hook type and relations."""

import pytest

from refdoc.reference import hook_type_for


class TestHookType:
    """Mapping of the stored hook type to the firing function."""

    @pytest.mark.parametrize(
        "stored, expected",
        [
            ("action", "do_action"),
            ("action_reference", "do_action_ref_array"),
            ("filter", "apply_filters"),
            ("filter_reference", "apply_filters_ref_array"),
            ("", "apply_filters"),
            (None, "apply_filters"),
        ],
    )
    def test_mapping(self, stored, expected):
        assert hook_type_for(stored) == expected


class TestHookSignature:
    """Signature built from param tags."""

    def test_filter_signature(self, factory):
        assert factory.resolve(3).signature == {
            "name": "the_title",
            "args": [
                {"type": "string", "name": "$post_title"},
                {"type": "int", "name": "$post_id"},
            ],
            "hook_type": "apply_filters",
            "dynamic": False,
        }

    def test_dynamic_action(self, factory):
        signature = factory.resolve(7).signature
        assert signature["hook_type"] == "do_action_ref_array"
        assert signature["dynamic"] is True


class TestHookRelations:
    """Hooks have no uses but keep used-by."""

    def test_not_callable(self, factory):
        assert factory.resolve(3).callable is False

    def test_uses_empty(self, factory):
        assert factory.resolve(3).uses == []

    def test_used_by(self, factory):
        assert [r.title for r in factory.resolve(3).used_by] == [
            "get_the_title",
            "WP_Query::get_posts",
        ]

    def test_no_source_code(self, factory):
        hook = factory.resolve(3)
        assert hook.has_source_code() is False
        assert hook.source_code() == ""
