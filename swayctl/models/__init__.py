# Data models for command responses and the window tree

from .response import BatchResponse, StatusEntry
from .tree import Node, find_focused, list_windows

__all__ = [
    "BatchResponse",
    "StatusEntry",
    "Node",
    "find_focused",
    "list_windows",
]
