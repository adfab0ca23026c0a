"""
Two-phase evaluation of a compiled template.

Phase 1 plans an invocation for every element in the body and in every
declaration, then prepares the ones reachable outside raw-children branches
concurrently: deferred attribute references are substituted by awaiting the
owning producer, props are validated and ``resolve`` runs at most once per
invocation. Anything else is prepared on first use. Phase 2 walks the tree in
document order and assembles the output, calling each component's
synchronous ``render`` with its resolved value.

Invocations are identified by position (``0.2.1``), or by binding name for
hoisted producers (``user``, ``user.0``). Output produced dynamically by a
``render`` call is planned under ``<id>/``.

Diagnostics and actions recorded while preparing go to a per-invocation
buffer that is merged into the shared context when assembly reaches that
invocation, so their order never depends on producer timing.
"""

import asyncio
import inspect
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from promptweave.compiler.template import CompiledTemplate
from promptweave.components.base import Component
from promptweave.components.registry import ComponentRegistry
from promptweave.core.deferred import DeferredReference, contains_reference, iter_references
from promptweave.core.element import BindingRef, Element, Literal, Node, Text, normalize_children
from promptweave.core.types import InvocationId
from promptweave.diagnostics.models import Diagnostic
from promptweave.diagnostics.rules import RenderedElement
from promptweave.exceptions.core import CircularReferenceError, ResolutionError
from promptweave.execution.cache import ResolutionCache
from promptweave.execution.context import RenderContext
from promptweave.validation.schema import validate_props

logger = logging.getLogger(__name__)


@dataclass
class Invocation:
    """
    One element scheduled for evaluation.

    Params:
        invocation_id: Positional id, or binding name for hoisted producers
        element: The element being evaluated
        component: Component instance, None if the tag is unknown
        buffer: Context collecting this invocation's diagnostics and actions
        binding: Binding name when the element is a hoisted declaration
    """

    invocation_id: InvocationId
    element: Element
    component: Component | None
    buffer: RenderContext
    binding: str | None = None
    props: dict[str, Any] | None = None
    failed: bool = False
    assembled: bool = False

    @property
    def tag(self) -> str:
        return self.element.tag


def to_text(value: Any) -> str:
    """Render a resolved value as text; None renders as nothing."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Evaluator:
    """Evaluates one compiled template against one render context."""

    def __init__(self, template: CompiledTemplate, registry: ComponentRegistry, context: RenderContext):
        """
        Initialize the evaluator.

        Params:
            template: Compiled template (body, declarations, imports)
            registry: Components available to the template
            context: Shared render context receiving diagnostics and actions
        """
        self.template = template
        self.registry = registry
        self.context = context
        self.cache = ResolutionCache()
        self.rendered: list[RenderedElement] = []

        self._bindings = template.binding_map()
        self._imports = template.import_map()
        self._invocations: dict[InvocationId, Invocation] = {}
        self._tasks: dict[InvocationId, asyncio.Task] = {}
        self._binding_text: dict[str, str] = {}
        self._assembling: set[str] = set()
        self._blocked: set[str] = set()
        self._read: set[str] = set()

    async def evaluate(self) -> str:
        """
        Evaluate the template.

        Bindings whose sites sit under a component that takes raw children
        (such as ``If``) are not prepared up front; they are prepared when a
        reference reads them or when the branch renders.

        Returns:
            The assembled output text (untrimmed)
        """
        declared: dict[str, list[Invocation]] = {}
        for binding in self.template.declarations:
            declared[binding.name] = self._plan_element(binding.element, binding.name, binding=binding.name)
        planned = self._plan_nodes(self.template.body, "")

        pending = self._reachable_bindings(self.template.body)
        reached: set[str] = set()
        while pending:
            name = pending.pop(0)
            if name in reached:
                continue
            reached.add(name)
            planned.extend(declared[name])
            pending.extend(self._reachable_bindings((self._bindings[name].element,)))
        logger.debug(
            "Planned %d invocations (%d of %d bindings reachable)",
            len(planned),
            len(reached),
            len(self.template.declarations),
        )

        self._detect_cycles()
        await self._schedule(planned)

        text = await self._assemble_nodes(self.template.body, "")

        # Producers read only through references report what they recorded;
        # anything else left unassembled sat in a branch that did not render.
        for invocation in self._invocations.values():
            if not invocation.assembled and invocation.invocation_id in self._read:
                self.context.merge(invocation.buffer)
        return text

    # Phase 1: planning and preparation

    def _plan_nodes(self, nodes: Sequence[Node], prefix: str) -> list[Invocation]:
        planned: list[Invocation] = []
        for index, node in enumerate(nodes):
            if isinstance(node, Element):
                planned.extend(self._plan_element(node, f"{prefix}{index}"))
        return planned

    def _plan_element(self, element: Element, invocation_id: InvocationId, binding: str | None = None) -> list[Invocation]:
        component = self.registry.get(element.tag, self._imports)
        invocation = Invocation(
            invocation_id=invocation_id,
            element=element,
            component=component,
            buffer=self.context.fork(),
            binding=binding,
        )
        self._invocations[invocation_id] = invocation
        planned = [invocation]
        # Raw children are planned only if the component returns them from render
        if component is None or not component.raw_children:
            planned.extend(self._plan_nodes(element.children, f"{invocation_id}."))
        return planned

    def _reachable_bindings(self, nodes: Sequence[Node]) -> list[str]:
        """Names of the bindings referenced from nodes evaluated eagerly."""
        names: list[str] = []
        for node in nodes:
            if isinstance(node, BindingRef) and node.name in self._bindings:
                names.append(node.name)
            elif isinstance(node, Element):
                component = self.registry.get(node.tag, self._imports)
                if component is None or not component.raw_children:
                    names.extend(self._reachable_bindings(node.children))
        return names

    def _detect_cycles(self) -> None:
        """Block every binding whose attributes depend on itself through other bindings."""
        graph = {
            name: sorted({ref.owner for ref in iter_references(binding.element.attributes) if ref.owner in self._bindings})
            for name, binding in self._bindings.items()
        }
        visiting: list[str] = []
        done: set[str] = set()

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                cycle = visiting[visiting.index(name):] + [name]
                for member in cycle[:-1]:
                    self._block(member, cycle)
                return
            visiting.append(name)
            for dependency in graph[name]:
                visit(dependency)
            visiting.pop()
            done.add(name)

        for name in graph:
            visit(name)

    def _block(self, name: str, cycle: list[str]) -> None:
        if name in self._blocked:
            return
        self._blocked.add(name)
        invocation = self._invocations[name]
        invocation.failed = True
        error = CircularReferenceError(invocation.tag, name, cycle)
        logger.warning("%s", error)
        invocation.buffer.add_diagnostic(error.to_diagnostic())

    async def _schedule(self, invocations: Sequence[Invocation]) -> None:
        await asyncio.gather(*(self._ensure_prepared(invocation.invocation_id) for invocation in invocations))

    def _ensure_prepared(self, invocation_id: InvocationId) -> asyncio.Task:
        task = self._tasks.get(invocation_id)
        if task is None:
            task = asyncio.ensure_future(self._prepare(self._invocations[invocation_id]))
            self._tasks[invocation_id] = task
        return task

    async def _prepare(self, invocation: Invocation) -> None:
        if invocation.invocation_id in self._blocked:
            return

        props = dict(invocation.element.attributes)
        if contains_reference(props):
            props = await self._substitute(props, invocation)
        component = invocation.component
        if component is None:
            invocation.props = props
            return

        props, problems = validate_props(
            invocation.tag, props, component.schema, component.permissive, owner=invocation.invocation_id
        )
        if problems:
            invocation.buffer.extend_diagnostics(problems)
            invocation.failed = True
            return
        invocation.props = props

        if not component.has_resolve():
            return

        value = None
        try:
            result = component.resolve({**props, "children": invocation.element.children}, invocation.buffer)
            if inspect.isawaitable(result):
                result = await result
            value = result
        except Exception as exc:
            error = ResolutionError(invocation.tag, invocation.invocation_id, str(exc), binding=invocation.binding)
            logger.warning("%s", error)
            invocation.buffer.add_diagnostic(error.to_diagnostic())
            invocation.failed = True
        self.cache.store(invocation.invocation_id, value)

    async def _substitute(self, value: Any, invocation: Invocation | None) -> Any:
        if isinstance(value, DeferredReference):
            return await self._dereference(value, invocation)
        if isinstance(value, Mapping):
            return {key: await self._substitute(item, invocation) for key, item in value.items()}
        if isinstance(value, list):
            return [await self._substitute(item, invocation) for item in value]
        if isinstance(value, tuple):
            return tuple([await self._substitute(item, invocation) for item in value])
        return value

    async def _dereference(self, reference: DeferredReference, invocation: Invocation | None) -> Any:
        """
        Wait for the owning producer and follow the reference path.

        Params:
            reference: The deferred reference
            invocation: Invocation whose attributes hold the reference, None
                for references in child or render output position

        Returns:
            The value at the path, or None if the owner failed or the path is missing
        """
        if reference.owner not in self._bindings:
            target = invocation.buffer if invocation is not None else self.context
            target.add_diagnostic(
                Diagnostic(
                    code="unknown_binding",
                    message=f"Reference {reference.describe()} names no declared binding '{reference.owner}'",
                    component=invocation.tag if invocation is not None else None,
                    owner=invocation.invocation_id if invocation is not None else None,
                )
            )
            return None
        self._read.add(reference.owner)
        await self._ensure_prepared(reference.owner)
        return self.cache.lookup(reference)

    # Phase 2: document-order assembly

    async def _evaluate_nodes(self, nodes: Sequence[Node], prefix: str) -> str:
        await self._schedule(self._plan_nodes(nodes, prefix))
        return await self._assemble_nodes(nodes, prefix)

    async def _assemble_nodes(self, nodes: Sequence[Node], prefix: str) -> str:
        parts = []
        for index, node in enumerate(nodes):
            parts.append(await self._assemble_node(node, f"{prefix}{index}"))
        return "".join(parts)

    async def _assemble_node(self, node: Node, node_id: InvocationId) -> str:
        if isinstance(node, Element):
            return await self._assemble_invocation(self._invocations[node_id])
        if isinstance(node, Text | Literal):
            return node.value
        if isinstance(node, BindingRef):
            return await self._assemble_binding_ref(node)
        if isinstance(node, DeferredReference):
            return to_text(await self._dereference(node, None))
        return to_text(node)

    async def _assemble_invocation(self, invocation: Invocation) -> str:
        await self._ensure_prepared(invocation.invocation_id)
        self.context.merge(invocation.buffer)
        invocation.assembled = True
        component = invocation.component
        invocation_id = invocation.invocation_id

        if component is None:
            self.context.add_diagnostic(
                Diagnostic(
                    code="unknown_component",
                    message=f'Unknown component "{invocation.tag}". Register it or bind it with <Uses>.',
                    component=invocation.tag,
                    owner=invocation_id,
                )
            )
            return await self._assemble_nodes(invocation.element.children, f"{invocation_id}.")

        if invocation.failed or invocation.props is None:
            return await self._fallback(invocation)

        if component.raw_children:
            children: Any = invocation.element.children
        else:
            children = await self._assemble_nodes(invocation.element.children, f"{invocation_id}.")

        try:
            output = component.render({**invocation.props, "children": children}, self.cache.get(invocation_id), self.context)
            if inspect.isawaitable(output):
                if inspect.iscoroutine(output):
                    output.close()
                raise TypeError("render must be synchronous; move asynchronous work to resolve")
        except ValidationError as exc:
            self.context.add_diagnostic(
                Diagnostic(
                    code="invalid_action",
                    message=f"{invocation.tag}: invalid post-execution action: {exc.errors()[0]['msg']}",
                    component=invocation.tag,
                    owner=invocation_id,
                )
            )
            return ""
        except Exception as exc:
            error = ResolutionError(invocation.tag, invocation_id, str(exc), binding=invocation.binding)
            logger.warning("%s", error)
            self.context.add_diagnostic(error.to_diagnostic())
            if component.raw_children:
                return await self._fallback(invocation)
            return children

        self.rendered.append(RenderedElement(invocation.tag, dict(invocation.props), invocation_id))
        return await self._assemble_output(output, f"{invocation_id}/")

    async def _fallback(self, invocation: Invocation) -> str:
        """Render the children of an element that could not render itself."""
        if invocation.component is not None and invocation.component.raw_children:
            return await self._evaluate_nodes(invocation.element.children, f"{invocation.invocation_id}/")
        return await self._assemble_nodes(invocation.element.children, f"{invocation.invocation_id}.")

    async def _assemble_output(self, output: Any, prefix: str) -> str:
        if output is None or output is True or output is False:
            return ""
        if isinstance(output, str):
            return output
        if isinstance(output, int | float):
            return str(output)
        if isinstance(output, Text | Literal):
            return output.value
        if isinstance(output, DeferredReference):
            return to_text(await self._dereference(output, None))
        if isinstance(output, BindingRef):
            return await self._assemble_binding_ref(output)
        if isinstance(output, Element):
            return await self._evaluate_nodes([output], prefix)
        if isinstance(output, list | tuple):
            return await self._evaluate_nodes(normalize_children(output), prefix)
        return to_text(output)

    async def _assemble_binding_ref(self, reference: BindingRef) -> str:
        invocation = self._invocations.get(reference.name)
        if invocation is None:
            self.context.add_diagnostic(
                Diagnostic(
                    code="unknown_binding",
                    message=f"Reference to undeclared binding '{reference.name}'",
                    owner=reference.name,
                )
            )
            return ""
        if reference.origin or invocation.component is None or not invocation.component.has_resolve():
            return await self._assemble_binding(reference.name)
        self._read.add(reference.name)
        await self._ensure_prepared(reference.name)
        return to_text(self.cache.get(reference.name))

    async def _assemble_binding(self, name: str) -> str:
        """Assemble a binding's element once; later uses reuse its text."""
        if name in self._binding_text:
            return self._binding_text[name]
        if name in self._assembling:
            return ""
        self._assembling.add(name)
        try:
            text = await self._assemble_invocation(self._invocations[name])
        finally:
            self._assembling.discard(name)
        self._binding_text[name] = text
        return text
