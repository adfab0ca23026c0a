"""
Shared test fixtures and components for the promptweave test suite.
"""

import asyncio
from typing import Any

import pytest
from pydantic import BaseModel

from promptweave.components import Component, default_registry


class Recorder:
    """Collects what test components observed during a render."""

    def __init__(self):
        self.resolved: list[str | None] = []
        self.events: list[tuple[str, str | None]] = []
        self.seen: list[Any] = []

    def count(self, name: str) -> int:
        return self.resolved.count(name)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def registry(recorder):
    """Built-in registry plus Producer, Consumer and Shout test components.

    Producer resolves to its ``value`` attribute after ``delay`` seconds and
    renders nothing. Consumer records its ``value`` prop and renders it.

    Usage:
        def test_something(registry, recorder):
            result = render_sync(template, registry=registry)
            assert recorder.count("u") == 1
    """

    class Producer(Component):
        class Props(BaseModel):
            name: str | None = None
            value: Any = None
            delay: float = 0.0
            fail: bool = False

        schema = Props

        async def resolve(self, props, context):
            name = props.get("name")
            recorder.resolved.append(name)
            recorder.events.append(("start", name))
            if props["delay"]:
                await asyncio.sleep(props["delay"])
            recorder.events.append(("end", name))
            if props["fail"]:
                raise RuntimeError("upstream unavailable")
            return props["value"]

        def render(self, props, value, context):
            return None

    class Consumer(Component):
        class Props(BaseModel):
            value: Any = None

        schema = Props

        def render(self, props, value, context):
            recorder.seen.append(props["value"])
            return "" if props["value"] is None else str(props["value"])

    def shout(props, context):
        return props["children"].upper()

    registry = default_registry()
    registry.register("Producer", Producer)
    registry.register("Consumer", Consumer)
    registry.register("Shout", shout)
    return registry
