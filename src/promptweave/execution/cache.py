"""
Resolution cache for one render call.
"""

from collections.abc import Iterator
from typing import Any

from promptweave.core.deferred import DeferredReference, follow_path
from promptweave.core.types import InvocationId


class ResolutionCache:
    """
    Resolved producer values keyed by owner id.

    Each owner is stored at most once per render call; storing it again is a
    scheduling bug and raises.
    """

    def __init__(self):
        self._values: dict[InvocationId, Any] = {}

    def __contains__(self, owner: InvocationId) -> bool:
        return owner in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[InvocationId]:
        return iter(self._values)

    def store(self, owner: InvocationId, value: Any) -> None:
        """
        Record the resolved value of ``owner``.

        Raises:
            KeyError: If the owner was already resolved in this call
        """
        if owner in self._values:
            raise KeyError(f"Owner '{owner}' already resolved")
        self._values[owner] = value

    def get(self, owner: InvocationId, default: Any = None) -> Any:
        return self._values.get(owner, default)

    def lookup(self, reference: DeferredReference) -> Any:
        """Return the value a deferred reference points at, or None."""
        return follow_path(self._values.get(reference.owner), reference.path)
