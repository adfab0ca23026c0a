"""
Deferred references to values that producers have not resolved yet.

A deferred reference names the binding that owns a value and records the
property/index path that template code applied to it. Extending the path
never mutates an existing reference; every access creates a new one. The
evaluator turns references into concrete values once the owner resolves.
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from attrs import field, frozen

from promptweave.core.types import PathSegment


def _to_path(value: Sequence[PathSegment]) -> tuple[PathSegment, ...]:
    return tuple(value)


@frozen
class DeferredReference:
    """
    Placeholder for a value at ``path`` inside the resolved value of ``owner``.

    Attribute access and indexing extend the path, so ``ref("user").repos[0]``
    records ``("repos", 0)``. Names starting with an underscore are treated
    as real attribute lookups and raise ``AttributeError``; use indexing
    (``ref("user")["_id"]``) to reach such keys, or keys that clash with
    ``owner``/``path``.

    Params:
        owner: Binding id of the producer that owns the value
        path: Property names and indices to follow on the resolved value
    """

    owner: str
    path: tuple[PathSegment, ...] = field(default=(), converter=_to_path)

    def __getattr__(self, name: str) -> "DeferredReference":
        if name.startswith("_"):
            raise AttributeError(name)
        return DeferredReference(self.owner, (*self.path, name))

    def __getitem__(self, key: PathSegment) -> "DeferredReference":
        if not isinstance(key, str | int) or isinstance(key, bool):
            raise TypeError(f"Deferred reference keys must be str or int, got {key!r}")
        return DeferredReference(self.owner, (*self.path, key))

    def __iter__(self) -> Iterator[Any]:
        raise TypeError("Deferred references cannot be iterated before resolution")

    def describe(self) -> str:
        """Return a readable ``owner.path[0]`` form for messages."""
        parts = [self.owner]
        for segment in self.path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            else:
                parts.append(f".{segment}")
        return "".join(parts)


def ref(owner: str) -> DeferredReference:
    """Create a deferred reference to the whole value of binding ``owner``."""
    return DeferredReference(owner)


def _step(current: Any, segment: PathSegment) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment)

    if isinstance(segment, int):
        if isinstance(current, Sequence) and 0 <= segment < len(current):
            return current[segment]
        return None

    if isinstance(current, Sequence) or segment.startswith("_"):
        return None

    return getattr(current, segment, None)


def follow_path(value: Any, path: Sequence[PathSegment]) -> Any:
    """
    Walk ``value`` along ``path`` and return what is found there.

    Mappings are looked up by key, sequences by in-range non-negative index,
    other objects by public attribute. Any missing, null or out-of-range
    segment yields ``None``; the walk never raises.

    Params:
        value: The owner's resolved value
        path: Segments recorded on the deferred reference

    Returns:
        The value at the path, or None
    """
    current = value
    for segment in path:
        if current is None:
            return None
        try:
            current = _step(current, segment)
        except Exception:
            return None
    return current


def iter_references(value: Any) -> Iterator[DeferredReference]:
    """Yield every deferred reference nested in mappings, lists and tuples."""
    if isinstance(value, DeferredReference):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, list | tuple | set | frozenset):
        for item in value:
            yield from iter_references(item)


def contains_reference(value: Any) -> bool:
    """Check whether a prop value holds a deferred reference anywhere."""
    return next(iter_references(value), None) is not None
