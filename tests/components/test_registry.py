"""
Tests for the component registry and component instantiation.
"""

import pytest

from promptweave.compiler.template import ImportBinding
from promptweave.components.base import Component, FunctionComponent, instantiate
from promptweave.components.registry import ComponentRegistry


class CardA(Component):
    pass


class CardB(Component):
    pass


class Panel(Component):
    structural = True


class TestLookup:
    """Tests for tag and import-aware lookup."""

    def test_plain_tag(self):
        registry = ComponentRegistry({"Card": CardA})
        assert registry.factory("Card") is CardA
        assert "Card" in registry
        assert registry.tags() == ["Card"]

    def test_unknown_tag(self):
        registry = ComponentRegistry()
        assert registry.factory("Missing") is None
        assert registry.get("Missing") is None

    def test_sourced_component_preferred_for_imports(self):
        """A Uses binding resolves to the component registered for its source."""
        registry = ComponentRegistry({"Card": CardA})
        registry.register("Card", CardB, source="ui")
        imports = {"Card": ImportBinding("Card", "Card", "ui")}
        assert registry.factory("Card", imports) is CardB
        assert registry.factory("Card") is CardA

    def test_alias_resolves_imported_name(self):
        """An aliased import looks up the exported name."""
        registry = ComponentRegistry()
        registry.register("Card", CardB, source="ui")
        imports = {"Tile": ImportBinding("Tile", "Card", "ui")}
        assert registry.factory("Tile", imports) is CardB

    def test_alias_falls_back_to_plain_registration(self):
        registry = ComponentRegistry({"Card": CardA})
        imports = {"Tile": ImportBinding("Tile", "Card", "elsewhere")}
        assert registry.factory("Tile", imports) is CardA

    def test_dotted_tag_through_imported_namespace(self):
        """Lib.Item with Lib imported looks up the namespaced export."""
        registry = ComponentRegistry()
        registry.register("Widgets.Item", CardB, source="lib")
        imports = {"Lib": ImportBinding("Lib", "Widgets", "lib", kind="default")}
        assert registry.factory("Lib.Item", imports) is CardB

    def test_unregister(self):
        registry = ComponentRegistry({"Card": CardA})
        registry.register("Card", CardB, source="ui")
        registry.unregister("Card")
        registry.unregister("Card", source="ui")
        assert registry.factory("Card", {"Card": ImportBinding("Card", "Card", "ui")}) is None

    def test_empty_tag_rejected(self):
        with pytest.raises(ValueError):
            ComponentRegistry().register("", CardA)

    def test_copy_is_independent(self):
        registry = ComponentRegistry({"Card": CardA})
        copied = registry.copy()
        copied.register("Panel", Panel)
        assert "Panel" not in registry
        assert copied.factory("Card") is CardA

    def test_update(self):
        registry = ComponentRegistry()
        registry.update({"Card": CardA})
        registry.update([("Panel", Panel)])
        assert registry.tags() == ["Card", "Panel"]


class TestStructuralTags:
    """Registered structural components are exempt from hoisting."""

    def test_includes_registered_structural_classes(self):
        registry = ComponentRegistry({"Panel": Panel, "Card": CardA})
        tags = registry.structural_tags()
        assert "Panel" in tags
        assert "Card" not in tags
        assert "Task" in tags

    def test_includes_structural_instances(self):
        registry = ComponentRegistry({"Panel": Panel()})
        assert "Panel" in registry.structural_tags()


class TestInstantiate:
    """Tests for instantiate()."""

    def test_class_gives_fresh_instances(self):
        first = instantiate(CardA)
        assert isinstance(first, CardA)
        assert instantiate(CardA) is not first

    def test_instance_shared(self):
        card = CardA()
        assert instantiate(card) is card

    def test_function_wrapped(self):
        def badge(props, context):
            return "badge"

        component = instantiate(badge)
        assert isinstance(component, FunctionComponent)
        assert component.name == "badge"
        assert component.render({}, None, None) == "badge"

    def test_async_function_rejected(self):
        """Render functions must be synchronous."""

        async def badge(props, context):
            return "badge"

        with pytest.raises(TypeError):
            instantiate(badge)

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            instantiate("Card")


class TestComponentDefaults:
    """Tests for the base component contract."""

    def test_name_is_class_name(self):
        assert CardA().name == "CardA"

    def test_has_resolve(self):
        class Producer(Component):
            def resolve(self, props, context):
                return 1

        assert Producer.has_resolve()
        assert not CardA.has_resolve()

    def test_default_render_returns_children(self):
        assert CardA().render({"children": "text"}, None, None) == "text"

    def test_default_render_returns_resolved_value(self):
        class Producer(Component):
            def resolve(self, props, context):
                return 1

        assert Producer().render({"children": "text"}, 42, None) == 42
