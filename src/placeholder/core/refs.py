"""Back-references and explicit task markers.

A BackRef remembers where a result belongs: the container, the key, and
whether the key is a subscript or an attribute. It does not own the
container; the caller's object graph keeps it alive.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

T = TypeVar("T")

RefKind = Literal["item", "attr"]


@dataclass(frozen=True, slots=True, eq=False)
class BackRef:
    """Location a task result is written to.
    
    Attributes:
        container: Mapping, list or attribute-bearing object holding the task
        key: Mapping key, list index or attribute name
        kind: 'item' for subscript assignment, 'attr' for setattr
    """
    
    container: Any
    key: Any
    kind: RefKind = "item"
    
    def get(self) -> Any:
        return getattr(self.container, self.key) if self.kind == "attr" else self.container[self.key]
    
    def set(self, value: Any) -> None:
        if self.kind == "attr":
            setattr(self.container, self.key, value)
        else:
            self.container[self.key] = value
    
    @property
    def location(self) -> tuple[int, Any]:
        """Identity of the slot: two refs alias when their locations match."""
        return (id(self.container), self.key)
    
    def __repr__(self) -> str:
        return f"BackRef({type(self.container).__name__}@{id(self.container):#x}, {self.key!r}, {self.kind})"


class Task(Generic[T]):
    """Explicit marker for a task-valued entry.
    
    Wrapping a callable in Task makes it a task in strict mode, where bare
    callables are treated as ordinary values and left alone.
    
    Example:
        >>> data = {"user": Task(lambda: fetch_user(1)), "formatter": str.upper}
        >>> Placeholder(strict=True)(data)  # collects only "user"
    """
    
    __slots__ = ("fn",)
    
    def __init__(self, fn: Callable[[], Union[T, Awaitable[T]]]) -> None:
        if not callable(fn):
            raise TypeError(f"Task requires a zero-argument callable, got {type(fn).__name__}")
        self.fn = fn
    
    def __call__(self) -> Union[T, Awaitable[T]]:
        return self.fn()
    
    def __repr__(self) -> str:
        return f"Task({getattr(self.fn, '__qualname__', self.fn)!r})"


def task(fn: Callable[[], Union[T, Awaitable[T]]]) -> Task[T]:
    """Mark a zero-argument callable as a task. Works as a decorator."""
    return fn if isinstance(fn, Task) else Task(fn)


def is_task(value: object, *, strict: bool = False) -> bool:
    """Whether an entry value should be collected.
    
    Task markers always count. Outside strict mode any other callable does
    too, except classes, which are values rather than operations.
    """
    if isinstance(value, Task):
        return True
    return not strict and callable(value) and not isinstance(value, type)
