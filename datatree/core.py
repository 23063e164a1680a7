"""
DataTree - indexed tree model with tri-state selection.

Orchestrates manager classes over one shared TreeIndex.
Uses EventBus for structured diagnostics instead of raising on
recoverable caller mistakes.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from datatree.constants import ROOT_KEY
from datatree.managers import (
    EventBus,
    EventListener,
    EventType,
    IndexBuilder,
    NodeEvent,
    SelectionManager,
    StructureManager,
)
from datatree.managers.selection_manager import Visitor
from datatree.models.base import InputShape, KeyMapping, NodeId, SelectionState, ValueMode
from datatree.models.index import ContentIndex, RelationIndex, TreeIndex


class DataTree:
    """
    In-memory model of a hierarchical collection.

    Orchestrates manager classes:
    - IndexBuilder: Flat/nested data to content and relation indices
    - SelectionManager: Tri-state selection, value collection, traversal
    - StructureManager: Append, remove and move
    - EventBus: Mutation events and diagnostics

    Usage:
        tree = DataTree(key_mapping={"id": "uuid", "pid": "parentId"})
        tree.load(nodes)
        tree.add_selection([4])
        tree.get_value(ValueMode.ONLY_LEAF)
    """

    ROOT_KEY = ROOT_KEY
    STATUS = SelectionState
    VALUE_TYPE = ValueMode

    def __init__(
        self,
        key_mapping: Union[KeyMapping, Dict[str, str], None] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize an empty DataTree.

        Args:
            key_mapping: Field names for id, parent id and children. Missing
                entries fall back to "id", "pid" and "child".
            event_bus: Bus for events. A private one is created by default.
        """
        self.key_mapping = KeyMapping.from_value(key_mapping)
        self.events = event_bus if event_bus is not None else EventBus()
        self.index = TreeIndex()

        self.builder = IndexBuilder(self.key_mapping, self.events)
        self.selection = SelectionManager(self.index, self.events)
        self.structure = StructureManager(
            self.index, self.builder, self.selection, self.events
        )

    # =========================================================================
    # Index access
    # =========================================================================

    @property
    def index_data(self) -> ContentIndex:
        """Live content index. Treat as read-only."""
        return self.index.content

    @property
    def index_relation(self) -> RelationIndex:
        """Live relation index. Treat as read-only."""
        return self.index.relation

    def subscribe(self, listener: EventListener) -> None:
        """Subscribe a listener to this tree's events."""
        self.events.subscribe(listener)

    # =========================================================================
    # Index building
    # =========================================================================

    def detect_shape(self, nodes: Any) -> InputShape:
        return self.builder.detect_shape(nodes)

    def build_index(self, nodes: Any) -> Tuple[ContentIndex, RelationIndex]:
        """Index nodes without touching this tree's state."""
        return self.builder.build(nodes)

    def load(self, nodes: Any = None) -> None:
        """Replace the index with one built from nodes.

        None leaves the current index untouched; an empty list clears it.
        """
        if nodes is None:
            return
        self.clear_index()
        content, relation = self.build_index(nodes)
        self.index.replace(content, relation)
        self.events.publish(
            NodeEvent(type=EventType.INDEX_LOADED, node_ids=list(content))
        )

    def clear_index(self) -> None:
        """Discard both indices."""
        self.index.clear()
        self.events.publish(NodeEvent(type=EventType.INDEX_CLEARED))

    # =========================================================================
    # Selection
    # =========================================================================

    def set_all(self, state: SelectionState) -> None:
        self.selection.set_all(state)

    def update_all_status(self, state: SelectionState) -> None:
        """Alias of set_all."""
        self.selection.set_all(state)

    def set_selection(self, ids: Any = None) -> None:
        self.selection.set_selection(ids)

    def add_selection(self, ids: Any) -> None:
        self.selection.add_selection(ids)

    def update_status(self, node_id: NodeId, state: Any = SelectionState.UNCHECKED) -> None:
        self.selection.update_status(node_id, state)

    def is_half(self, node_id: Optional[NodeId]) -> bool:
        return self.selection.is_half(node_id)

    def get_value(self, mode: Optional[ValueMode] = None) -> List[NodeId]:
        return self.selection.get_value(mode)

    def traverse(self, visitor: Visitor, start_id: Optional[NodeId] = ROOT_KEY) -> None:
        self.selection.traverse(visitor, start_id)

    def get_state(self, node_id: Optional[NodeId]) -> Optional[SelectionState]:
        """Selection state of a node, or None if it is not indexed."""
        entry = self.index.get(node_id)
        return entry.state if entry else None

    # =========================================================================
    # Structure
    # =========================================================================

    def append(self, data: Any, target_id: Optional[NodeId] = ROOT_KEY) -> List[NodeId]:
        return self.structure.append(data, target_id)

    def remove(self, node_id: Optional[NodeId]) -> bool:
        return self.structure.remove(node_id)

    def move(self, node_id: NodeId, target_id: Optional[NodeId] = ROOT_KEY) -> bool:
        return self.structure.move(node_id, target_id)

    def is_descendant(self, node_id: Optional[NodeId], child_id: Optional[NodeId]) -> bool:
        return self.structure.is_descendant(node_id, child_id)

    def is_moveable(self, node_id: Optional[NodeId], target_id: Optional[NodeId]) -> bool:
        return self.structure.is_moveable(node_id, target_id)
