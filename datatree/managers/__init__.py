"""
Managers for DataTree.

This package contains focused manager classes sharing one TreeIndex:
- IndexBuilder: Build content/relation indices from flat or nested data
- SelectionManager: Tri-state selection cascade, value collection, traversal
- StructureManager: Append, remove and move with cycle checks
- EventBus: Event channel for mutations and ignored operations
"""

from datatree.managers.events import (
    CallbackListener,
    DiagnosticEchoListener,
    DiagnosticEvent,
    Event,
    EventBus,
    EventListener,
    EventType,
    NodeEvent,
)
from datatree.managers.index_builder import IndexBuilder
from datatree.managers.selection_manager import SelectionManager
from datatree.managers.structure_manager import StructureManager

__all__ = [
    "IndexBuilder",
    "SelectionManager",
    "StructureManager",
    "EventBus",
    "Event",
    "NodeEvent",
    "DiagnosticEvent",
    "EventType",
    "EventListener",
    "CallbackListener",
    "DiagnosticEchoListener",
]
