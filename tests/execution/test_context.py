"""
Tests for the render context, resolution cache and action models.
"""

import pytest
from pydantic import ValidationError

from promptweave.core.deferred import ref
from promptweave.diagnostics.models import Diagnostic
from promptweave.execution.actions import OpenUrlAction, ReviewFileAction, parse_action
from promptweave.execution.cache import ResolutionCache
from promptweave.execution.context import RenderContext


class TestRenderContext:
    """Tests for RenderContext."""

    def test_append_only_views(self):
        """Diagnostics and actions are exposed as tuples."""
        context = RenderContext()
        context.add_diagnostic(Diagnostic("warn_x", "x"))
        context.add_action(OpenUrlAction(url="https://example.com"))
        assert context.diagnostics == (Diagnostic("warn_x", "x"),)
        assert context.post_execution == (OpenUrlAction(url="https://example.com"),)

    def test_add_action_validates_mappings(self):
        context = RenderContext()
        action = context.add_action({"type": "reviewFile", "file": "a.py"})
        assert action == ReviewFileAction(file="a.py")

    def test_add_action_rejects_invalid_data(self):
        with pytest.raises(ValidationError):
            RenderContext().add_action({"type": "reviewFile"})

    def test_fork_shares_inputs_but_not_lists(self):
        context = RenderContext(inputs={"a": 1})
        buffer = context.fork()
        buffer.add_diagnostic(Diagnostic("warn_x", "x"))
        assert buffer.inputs is context.inputs
        assert context.diagnostics == ()

    def test_merge_moves_and_clears(self):
        """Merging moves buffered records and empties the buffer."""
        context = RenderContext()
        context.add_diagnostic(Diagnostic("warn_a", "a"))
        buffer = context.fork()
        buffer.add_diagnostic(Diagnostic("warn_b", "b"))
        buffer.add_action(OpenUrlAction(url="https://example.com"))

        context.merge(buffer)
        context.merge(buffer)

        assert [diagnostic.code for diagnostic in context.diagnostics] == ["warn_a", "warn_b"]
        assert len(context.post_execution) == 1
        assert buffer.diagnostics == ()


class TestResolutionCache:
    """Tests for ResolutionCache."""

    def test_store_and_lookup(self):
        cache = ResolutionCache()
        cache.store("user", {"repos": [{"name": "api"}]})
        assert "user" in cache
        assert len(cache) == 1
        assert list(cache) == ["user"]
        assert cache.lookup(ref("user").repos[0].name) == "api"

    def test_lookup_missing_owner_or_path(self):
        cache = ResolutionCache()
        cache.store("user", {"name": "Alice"})
        assert cache.lookup(ref("other").name) is None
        assert cache.lookup(ref("user").email) is None

    def test_store_once(self):
        """An owner resolves at most once per render."""
        cache = ResolutionCache()
        cache.store("user", 1)
        with pytest.raises(KeyError):
            cache.store("user", 2)

    def test_none_is_a_stored_value(self):
        cache = ResolutionCache()
        cache.store("user", None)
        assert "user" in cache
        assert cache.get("user", "default") is None


class TestActions:
    """Tests for action models."""

    def test_parse_discriminates_on_type(self):
        assert parse_action({"type": "openUrl", "url": "https://example.com"}) == OpenUrlAction(
            url="https://example.com"
        )

    def test_parse_passes_models_through(self):
        action = ReviewFileAction(file="a.py")
        assert parse_action(action) is action

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "unknown"},
            {"type": "openUrl"},
            {"type": "openUrl", "url": "https://example.com", "extra": 1},
            {"url": "https://example.com"},
        ],
    )
    def test_parse_rejects_invalid(self, data):
        with pytest.raises(ValidationError):
            parse_action(data)

    def test_actions_are_frozen(self):
        action = OpenUrlAction(url="https://example.com")
        with pytest.raises(ValidationError):
            action.url = "https://other.example.com"
