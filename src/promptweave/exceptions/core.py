"""
Exception classes for promptweave template processing.

This module defines specific exception types for the error conditions that
can occur while compiling a template tree and while evaluating it. Each
exception knows how to describe itself as a Diagnostic so that the render
entry point can report it without letting it escape.
"""

from dataclasses import dataclass, replace

from promptweave.diagnostics.models import Diagnostic


@dataclass
class ErrorContext:
    """
    Location information for error messages.

    Captures where an error occurred in template terms: the element tag, the
    offending attribute, and the binding or invocation the element belongs to.

    Params:
        tag: Tag of the element that caused the error
        attribute: Attribute name, if the error concerns a single attribute
        binding: Hoisted binding name, if the element is a named invocation
        owner: Invocation id assigned by the evaluator
    """

    tag: str | None = None
    attribute: str | None = None
    binding: str | None = None
    owner: str | None = None

    def format_location(self) -> str:
        """
        Format location information for display.

        Returns:
            Indented multi-line location description, empty when nothing is known
        """
        lines = []

        if self.tag:
            lines.append(f"  in <{self.tag}>")
        if self.attribute:
            lines.append(f"  attribute: {self.attribute}")
        if self.binding:
            lines.append(f"  binding: {self.binding}")
        if self.owner:
            lines.append(f"  invocation: {self.owner}")

        return "\n".join(lines)


class PromptWeaveError(Exception):
    """Base exception for all promptweave errors."""

    code = "error"

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context or ErrorContext()
        location = self.context.format_location()
        super().__init__(f"{message}\n{location}" if location else message)

    def to_diagnostic(self) -> Diagnostic:
        """Describe this error as a hard-error diagnostic."""
        return Diagnostic(
            code=self.code,
            message=self.message,
            component=self.context.tag,
            prop=self.context.attribute,
            owner=self.context.owner,
        )


class CompileError(PromptWeaveError):
    """Raised when a template tree cannot be compiled."""

    code = "compile_error"


class DirectiveError(CompileError):
    """Raised when a ``Uses`` directive is missing required attributes."""

    code = "invalid_directive"


class HoistedNameError(CompileError):
    """Raised when a ``name`` attribute is not a valid binding identifier."""

    code = "invalid_name"

    def __init__(self, name: str, tag: str):
        """
        Initialize the exception.

        Params:
            name: The rejected binding name
            tag: Tag of the element carrying the name
        """
        self.name = name
        super().__init__(
            f'Invalid variable name: "{name}". Must be a valid identifier and not a reserved word.',
            ErrorContext(tag=tag, attribute="name"),
        )


class MalformedTreeError(CompileError):
    """Raised when the source tree contains something that is not a node."""

    code = "malformed_tree"


class SchemaValidationError(PromptWeaveError):
    """Raised when an attribute bag violates its component schema."""

    code = "validation_error"

    def __init__(
        self,
        tag: str,
        reason: str,
        attribute: str | None = None,
        path: tuple[str | int, ...] = (),
        code: str | None = None,
        owner: str | None = None,
    ):
        """
        Initialize the exception.

        Params:
            tag: Tag of the element whose attributes failed validation
            reason: What the violated constraint expects
            attribute: Offending attribute, None for element-level problems
            path: Location inside the attribute value
            code: Specific error code, such as pydantic's error type
            owner: Invocation id of the element
        """
        if code:
            self.code = code
        self.reason = reason
        self.path = tuple(path)
        location = ".".join(str(part) for part in (attribute, *self.path) if part is not None)
        where = f" '{location}'" if location else ""
        super().__init__(
            f"{tag}: attribute{where}: {reason}",
            ErrorContext(tag=tag, attribute=attribute, owner=owner),
        )

    def to_diagnostic(self) -> Diagnostic:
        return replace(super().to_diagnostic(), path=self.path)


class ResolutionError(PromptWeaveError):
    """Raised when a producer's resolve step fails."""

    code = "runtime_error"

    def __init__(self, tag: str, owner: str, reason: str, binding: str | None = None):
        """
        Initialize the exception.

        Params:
            tag: Tag of the producer element
            owner: Invocation id of the producer
            reason: The underlying failure message
            binding: Binding name when the producer is hoisted
        """
        self.tag = tag
        self.owner = owner
        self.reason = reason
        super().__init__(
            f"Runtime error in {tag}: {reason}",
            ErrorContext(tag=tag, binding=binding, owner=owner),
        )


class CircularReferenceError(ResolutionError):
    """Raised when producers reference each other's values in a cycle."""

    code = "circular_reference"

    def __init__(self, tag: str, owner: str, cycle: list[str]):
        """
        Initialize the exception.

        Params:
            tag: Tag of the producer element
            owner: Binding name of the producer
            cycle: Binding names forming the cycle, in dependency order
        """
        self.cycle = cycle
        super().__init__(
            tag,
            owner,
            f"circular reference between bindings: {' -> '.join(cycle)}",
            binding=owner,
        )
