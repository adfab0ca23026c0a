"""
Diagnostic records collected while compiling and rendering a template.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

WARNING_PREFIX = "warn_"
LEGACY_WARNING_CODE = "validation_warning"


class Severity(Enum):
    """Severity of a diagnostic."""

    WARNING = "warning"
    ERROR = "error"


def is_warning_code(code: str) -> bool:
    """
    Check whether a diagnostic code denotes a warning.

    Warning codes use the ``warn_`` prefix; ``validation_warning`` is
    accepted as a legacy alias. Every other code is an error.
    """
    return code.startswith(WARNING_PREFIX) or code == LEGACY_WARNING_CODE


def severity_for(code: str) -> Severity:
    """Derive the severity of a diagnostic from its code."""
    return Severity.WARNING if is_warning_code(code) else Severity.ERROR


@dataclass(frozen=True)
class Diagnostic:
    """
    A warning or error reported during a render call.

    Params:
        code: Stable machine-readable code; determines the default severity
        message: Human-readable, actionable description
        component: Tag of the element the diagnostic refers to, if any
        prop: Attribute that caused it, or None for element-level problems
        path: Location inside the attribute value
        owner: Invocation id of the element, if known
        severity: Derived from ``code`` unless given explicitly
    """

    code: str
    message: str
    component: str | None = None
    prop: str | None = None
    path: tuple[str | int, ...] = ()
    owner: str | None = None
    severity: Severity = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.severity is None:
            object.__setattr__(self, "severity", severity_for(self.code))
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def promoted(self) -> "Diagnostic":
        """Return this diagnostic with error severity."""
        return replace(self, severity=Severity.ERROR)

    def __str__(self) -> str:
        location = f"<{self.component}>" if self.component else "template"
        if self.prop:
            location = f"{location} attribute '{self.prop}'"
        return f"[{self.severity.value}] {self.code}: {location}: {self.message}"
