"""
DataTree: indexed tree model with tri-state selection and structural edits.
"""

from datatree.constants import ROOT_KEY
from datatree.core import DataTree
from datatree.exceptions import ConfigurationError, DataTreeError, DuplicateNodeError
from datatree.models.base import InputShape, KeyMapping, RelationEntry, SelectionState, ValueMode

__all__ = [
    "DataTree",
    "ROOT_KEY",
    "KeyMapping",
    "RelationEntry",
    "SelectionState",
    "ValueMode",
    "InputShape",
    "DataTreeError",
    "DuplicateNodeError",
    "ConfigurationError",
]
