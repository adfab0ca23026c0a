"""
Diagnostics engine: diagnostic records, whole-tree rules and the
suppression/escalation policy.
"""

from promptweave.diagnostics.models import (
    LEGACY_WARNING_CODE,
    WARNING_PREFIX,
    Diagnostic,
    Severity,
    is_warning_code,
    severity_for,
)
from promptweave.diagnostics.policy import PolicyOutcome, apply_policy
from promptweave.diagnostics.rules import (
    DEFAULT_CONFLICT_RULES,
    STRICT_FORMAT_WITH_REASONING,
    ConflictRule,
    RenderedElement,
    RequiredElementRule,
    run_post_passes,
)

__all__ = [
    "DEFAULT_CONFLICT_RULES",
    "LEGACY_WARNING_CODE",
    "STRICT_FORMAT_WITH_REASONING",
    "WARNING_PREFIX",
    "ConflictRule",
    "Diagnostic",
    "PolicyOutcome",
    "RenderedElement",
    "RequiredElementRule",
    "Severity",
    "apply_policy",
    "is_warning_code",
    "run_post_passes",
    "severity_for",
]
