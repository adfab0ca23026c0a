"""
Registry binding element tags to components.

Tags are looked up exactly; dotted tags (``Ask.Text``) are plain keys. A tag
bound by a ``Uses`` directive is looked up under its source first
(``(source, imported_name)``) and falls back to the imported name.
"""

from collections.abc import Iterable, Mapping

from promptweave.compiler.hoisting import STRUCTURAL_TAGS
from promptweave.compiler.template import ImportBinding
from promptweave.components.base import Component, ComponentFactory, instantiate


class ComponentRegistry:
    """Explicit lookup table from tags to component factories."""

    def __init__(self, components: Mapping[str, ComponentFactory] | None = None):
        """
        Initialize the registry.

        Params:
            components: Initial tag -> component mapping
        """
        self._components: dict[str, ComponentFactory] = {}
        self._sourced: dict[tuple[str, str], ComponentFactory] = {}
        for tag, component in (components or {}).items():
            self.register(tag, component)

    def register(self, tag: str, component: ComponentFactory, source: str | None = None) -> None:
        """
        Register a component under a tag.

        Params:
            tag: Element tag (or exported name when ``source`` is given)
            component: Component class, instance or render function
            source: Module the component is exported from, for ``Uses`` lookups
        """
        if not tag:
            raise ValueError("Component tag must be a non-empty string")
        if source is None:
            self._components[tag] = component
        else:
            self._sourced[(source, tag)] = component

    def unregister(self, tag: str, source: str | None = None) -> None:
        if source is None:
            self._components.pop(tag, None)
        else:
            self._sourced.pop((source, tag), None)

    def __contains__(self, tag: str) -> bool:
        return tag in self._components

    def tags(self) -> list[str]:
        return list(self._components)

    def factory(self, tag: str, imports: Mapping[str, ImportBinding] | None = None) -> ComponentFactory | None:
        """
        Find the factory for a tag, honoring the template's external bindings.

        For a dotted tag whose first segment is imported (``Lib.Item`` with
        ``Lib`` imported from ``pkg``), the remaining segments are appended to
        the imported name.

        Params:
            tag: Element tag
            imports: External bindings of the template, keyed by local name

        Returns:
            The component factory, or None if nothing is registered
        """
        imports = imports or {}
        head, dot, rest = tag.partition(".")
        binding = imports.get(tag) or imports.get(head)
        if binding is not None:
            name = binding.imported_name
            if binding.local_name != tag:
                name = f"{name}{dot}{rest}"
            sourced = self._sourced.get((binding.source, name))
            if sourced is not None:
                return sourced
            if name in self._components:
                return self._components[name]
        return self._components.get(tag)

    def get(self, tag: str, imports: Mapping[str, ImportBinding] | None = None) -> Component | None:
        """Return a component instance for one invocation of ``tag``, or None."""
        factory = self.factory(tag, imports)
        if factory is None:
            return None
        return instantiate(factory)

    def structural_tags(self) -> frozenset[str]:
        """
        Tags exempt from name hoisting.

        Returns:
            The built-in structural tags plus every registered component
            class marked ``structural``
        """
        tags = set(STRUCTURAL_TAGS)
        for tag, factory in self._components.items():
            if isinstance(factory, type) and issubclass(factory, Component) and factory.structural:
                tags.add(tag)
            elif isinstance(factory, Component) and factory.structural:
                tags.add(tag)
        return frozenset(tags)

    def copy(self) -> "ComponentRegistry":
        registry = ComponentRegistry(self._components)
        registry._sourced.update(self._sourced)
        return registry

    def update(self, components: Mapping[str, ComponentFactory] | Iterable[tuple[str, ComponentFactory]]) -> None:
        items = components.items() if isinstance(components, Mapping) else components
        for tag, component in items:
            self.register(tag, component)
