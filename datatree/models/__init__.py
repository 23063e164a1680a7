"""
Data models for DataTree.

Import models explicitly from their modules where possible:
    from datatree.models.base import SelectionState, ValueMode, KeyMapping, RelationEntry
    from datatree.models.index import TreeIndex
"""

from .base import InputShape, KeyMapping, NodeId, RelationEntry, SelectionState, ValueMode
from .index import ContentIndex, RelationIndex, TreeIndex

__all__ = [
    "ContentIndex",
    "InputShape",
    "KeyMapping",
    "NodeId",
    "RelationEntry",
    "RelationIndex",
    "SelectionState",
    "TreeIndex",
    "ValueMode",
]
