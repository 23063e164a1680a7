"""
Base models for the DataTree package.

Enums for selection state and value collection, the key mapping used to
read caller data, and the relation entry stored per node.
"""

from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from datatree.constants import DEFAULT_CHILD_KEY, DEFAULT_ID_KEY, DEFAULT_PID_KEY

NodeId = Union[int, str]


class SelectionState(IntEnum):
    """Tri-state selection of a node."""

    UNCHECKED = 0
    CHECKED = 1
    HALF = 2


class ValueMode(IntEnum):
    """Which checked ids get_value collects. None collects every checked id."""

    ONLY_PARENT = 1
    ONLY_LEAF = 2


class InputShape(str, Enum):
    """How hierarchy is expressed in loaded data."""

    FLAT = "flat"
    NESTED = "nested"


class KeyMapping(BaseModel):
    """
    Field names used to read node dicts.

    - id: field holding the node identifier
    - pid: field holding the parent identifier (flat input)
    - child: field holding the list of child nodes (nested input)
    """

    id: str = DEFAULT_ID_KEY
    pid: str = DEFAULT_PID_KEY
    child: str = DEFAULT_CHILD_KEY

    @field_validator("id", "pid", "child", mode="before")
    @classmethod
    def default_empty(cls, v: Any, info) -> str:
        """Fall back to the default field name for empty values."""
        if not v:
            return cls.model_fields[info.field_name].default
        return v

    @classmethod
    def from_value(cls, value: Union["KeyMapping", Dict[str, str], None]) -> "KeyMapping":
        """Build a mapping from a partial dict, ignoring unknown keys."""
        if isinstance(value, KeyMapping):
            return value.model_copy()
        if not value:
            return cls()
        known = {key: value[key] for key in ("id", "pid", "child") if key in value}
        return cls(**known)


class RelationEntry(BaseModel):
    """
    Structural and state data of one node.

    child_ids keeps insertion order, which is sibling order.
    """

    parent_id: Optional[NodeId] = None
    child_ids: List[NodeId] = Field(default_factory=list)
    state: SelectionState = SelectionState.UNCHECKED

    @property
    def is_leaf(self) -> bool:
        return not self.child_ids

    def add_child(self, child_id: NodeId) -> None:
        """Append a child id unless it is already listed."""
        if child_id not in self.child_ids:
            self.child_ids.append(child_id)

    def remove_child(self, child_id: NodeId) -> bool:
        """Remove a child id. Returns False when it was not listed."""
        try:
            self.child_ids.remove(child_id)
        except ValueError:
            return False
        return True
