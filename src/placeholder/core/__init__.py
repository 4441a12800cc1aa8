"""Core: back-references, structural collection and the Placeholder executor."""

from .collector import collect_shallow, entries, is_container, readable_entries, walk_post_order
from .placeholder import IGNORE, Placeholder, Reviver
from .refs import BackRef, Task, is_task, task

__all__ = [
    "IGNORE",
    "BackRef",
    "Placeholder",
    "Reviver",
    "Task",
    "collect_shallow",
    "entries",
    "is_container",
    "is_task",
    "readable_entries",
    "task",
    "walk_post_order",
]
