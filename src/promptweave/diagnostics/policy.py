"""
Suppression and escalation policy for render diagnostics.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from promptweave.diagnostics.models import Diagnostic


@dataclass(frozen=True)
class PolicyOutcome:
    """
    Diagnostics after applying the caller's policy.

    Params:
        ok: False if any hard error (or escalated warning) remains
        errors: Hard errors first, then remaining warnings
    """

    ok: bool
    errors: tuple[Diagnostic, ...]


def apply_policy(
    diagnostics: Sequence[Diagnostic],
    ignore_warnings: Iterable[str] = (),
    throw_on_warnings: bool = False,
) -> PolicyOutcome:
    """
    Split diagnostics into hard errors and warnings under the caller's policy.

    Params:
        diagnostics: Diagnostics in encounter order
        ignore_warnings: Warning codes removed from the result entirely
        throw_on_warnings: Promote every remaining warning to an error

    Returns:
        PolicyOutcome; hard errors always make ``ok`` False, warnings only
        when escalated. Suppression never applies to errors.
    """
    ignored = set(ignore_warnings)
    warnings: list[Diagnostic] = []
    hard_errors: list[Diagnostic] = []

    for diagnostic in diagnostics:
        if not diagnostic.is_warning:
            hard_errors.append(diagnostic)
        elif diagnostic.code in ignored:
            continue
        elif throw_on_warnings:
            hard_errors.append(diagnostic.promoted())
        else:
            warnings.append(diagnostic)

    return PolicyOutcome(ok=not hard_errors, errors=tuple(hard_errors + warnings))
