"""Structural scans: shallow collection and post-order deep traversal.

Two views of a container exist. Writable entries are the ones a result
can be assigned back into: mutable mappings, lists and other mutable
sequences, SimpleNamespace objects, non-frozen dataclass instances and
plain objects with a ``__dict__``. Readable entries are what deep
traversal descends through: everything writable plus read-only mappings,
tuples and other non-text sequences, and frozen dataclasses. A task
nested in a tuple is never collected itself, but a dict inside that
tuple is.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping, MutableMapping, MutableSequence, Sequence
from types import ModuleType, SimpleNamespace
from typing import Any

from placeholder.foundation.errors import ErrorCode, PlaceholderException

from .refs import BackRef, RefKind, is_task

_TEXT = (str, bytes, bytearray)
# Sequences whose items are never containers, or are too large to enumerate
_OPAQUE = (*_TEXT, range, memoryview)


def entries(container: object) -> list[tuple[Any, Any, RefKind]]:
    """Writable (key, value, kind) entries of a container, in enumeration order."""
    if isinstance(container, MutableMapping):
        return [(k, v, "item") for k, v in container.items()]
    if isinstance(container, MutableSequence) and not isinstance(container, _TEXT):
        return [(i, v, "item") for i, v in enumerate(container)]
    if isinstance(container, SimpleNamespace):
        return [(k, v, "attr") for k, v in vars(container).items()]
    if _is_dataclass_instance(container):
        if container.__dataclass_params__.frozen:  # type: ignore[union-attr]
            return []
        return [(f.name, getattr(container, f.name), "attr") for f in dataclasses.fields(container)]  # type: ignore[arg-type]
    if _is_plain_object(container):
        return [(k, v, "attr") for k, v in vars(container).items()]
    return []


def readable_entries(container: object) -> list[tuple[Any, Any]]:
    """(key, value) pairs deep traversal looks through, writable or not."""
    if isinstance(container, Mapping):
        return list(container.items())
    if isinstance(container, Sequence) and not isinstance(container, _OPAQUE):
        return list(enumerate(container))
    if _is_dataclass_instance(container):
        return [(f.name, getattr(container, f.name)) for f in dataclasses.fields(container)]  # type: ignore[arg-type]
    if isinstance(container, SimpleNamespace) or _is_plain_object(container):
        return list(vars(container).items())
    return []


def is_container(value: object) -> bool:
    """Whether deep traversal descends into value. Callables never are."""
    if value is None or callable(value):
        return False
    return (isinstance(value, (Mapping, SimpleNamespace))
            or (isinstance(value, Sequence) and not isinstance(value, _OPAQUE))
            or _is_dataclass_instance(value)
            or _is_plain_object(value))


def _is_dataclass_instance(value: object) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_plain_object(value: object) -> bool:
    return (hasattr(value, "__dict__") and not callable(value)
            and not isinstance(value, (type, ModuleType)))


def collect_shallow(container: object, *, strict: bool = False) -> list[tuple[BackRef, Any]]:
    """Back-references and operations for every task-valued entry of one container."""
    return [(BackRef(container, key, kind), value)
            for key, value, kind in entries(container) if is_task(value, strict=strict)]


def walk_post_order(root: object) -> Iterator[object]:
    """Yield every container reachable from root, children before parents, root last.
    
    A container reachable along two paths is yielded once per path.
    
    Raises:
        PlaceholderException: CYCLE_DETECTED if a container is its own descendant
    """
    yield from _walk(root, set())


def _walk(node: object, ancestors: set[int]) -> Iterator[object]:
    if id(node) in ancestors:
        raise PlaceholderException.create(
            "Cycle detected during deep collection", ErrorCode.CYCLE_DETECTED,
            details=f"{type(node).__name__}@{id(node):#x}",
        )
    ancestors.add(id(node))
    try:
        for _, value in readable_entries(node):
            if is_container(value):
                yield from _walk(value, ancestors)
    finally:
        ancestors.discard(id(node))
    yield node
