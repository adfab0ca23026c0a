"""
Component contract.

A component turns a validated attribute bag into output. Components may:

- implement ``resolve()`` only: compute a value, rendered as text;
- implement ``render()`` only: produce output from props and children;
- implement both: compute a value, then render with it.

``resolve`` may be a coroutine. ``render`` is always synchronous; it may
append diagnostics or post-execution actions to the context.

Example:

    class GitHubUser(Component):
        class Props(BaseModel):
            username: str

        schema = Props

        async def resolve(self, props, context):
            return await fetch_user(props["username"])

        def render(self, props, value, context):
            return f"{value['login']} has {value['stars']} stars"
"""

import inspect
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel

from promptweave.core.types import PropsDict


class Component:
    """
    Base class for template components.

    Class attributes:
        schema: Pydantic model validating the attribute bag, or None
        permissive: Pass attributes unknown to the schema through untouched
        raw_children: Receive unevaluated child nodes instead of their text
        structural: Exempt from name hoisting even with a ``name`` attribute
    """

    schema: ClassVar[type[BaseModel] | None] = None
    permissive: ClassVar[bool] = False
    raw_children: ClassVar[bool] = False
    structural: ClassVar[bool] = False

    @classmethod
    def has_resolve(cls) -> bool:
        return callable(getattr(cls, "resolve", None))

    @property
    def name(self) -> str:
        return type(self).__name__

    def render(self, props: PropsDict, resolved_value: Any, context) -> Any:
        """
        Produce output for this element.

        The default renders the resolved value for components with a resolve
        step and the children otherwise.

        Params:
            props: Validated props, with ``children`` holding the evaluated
                child text (or the raw child nodes for ``raw_children``)
            resolved_value: Value returned by ``resolve``, None without one
            context: The render context

        Returns:
            Text, a node or list of nodes, a deferred reference, or None
        """
        if self.has_resolve():
            return resolved_value
        return props.get("children")


class FunctionComponent(Component):
    """Adapter for plain ``fn(props, context)`` render functions."""

    def __init__(self, function: Callable[..., Any]):
        if inspect.iscoroutinefunction(function):
            raise TypeError(f"Function component {function.__name__} must be synchronous")
        self.function = function

    @property
    def name(self) -> str:
        return getattr(self.function, "__name__", "FunctionComponent")

    def render(self, props: PropsDict, resolved_value: Any, context) -> Any:
        return self.function(props, context)


ComponentFactory = type[Component] | Component | Callable[..., Any]


def instantiate(factory: ComponentFactory) -> Component:
    """
    Create the component instance used for one invocation.

    Params:
        factory: Component class (a fresh instance per invocation), component
            instance (shared), or plain render function

    Returns:
        Component instance

    Raises:
        TypeError: If ``factory`` is none of the above
    """
    if isinstance(factory, type) and issubclass(factory, Component):
        return factory()
    if isinstance(factory, Component):
        return factory
    if callable(factory):
        return FunctionComponent(factory)
    raise TypeError(f"Cannot use {factory!r} as a component")
