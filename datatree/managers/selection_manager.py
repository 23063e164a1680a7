"""
SelectionManager for tri-state selection and traversal.

Handles cascading selection state down to descendants and up to ancestors.
"""

from typing import Any, Callable, Iterable, List, Optional

from datatree.constants import ROOT_KEY
from datatree.managers.events import EventBus, EventType, NodeEvent
from datatree.models.base import NodeId, RelationEntry, SelectionState, ValueMode
from datatree.models.index import TreeIndex

Visitor = Callable[[Optional[NodeId], RelationEntry, Optional[dict], int], Any]


class SelectionManager:
    """
    Manages selection state across the tree.

    Handles:
    - Setting every node to one state
    - Replacing or extending the selection
    - Cascading a single node change to descendants and ancestors
    - Collecting checked ids in traversal order
    """

    def __init__(self, index: TreeIndex, events: EventBus) -> None:
        """
        Initialize SelectionManager.

        Args:
            index: Shared tree index.
            events: Bus for selection and diagnostic events.
        """
        self.index = index
        self.events = events

    # =========================================================================
    # State updates
    # =========================================================================

    def set_all(self, state: SelectionState) -> None:
        """Set every node, the virtual root included, to state."""
        state = SelectionState(state)
        for entry in self.index.relation.values():
            entry.state = state
        self._changed(ROOT_KEY, state)

    def set_selection(self, ids: Any) -> None:
        """Replace the selection: uncheck everything, then check ids."""
        self.set_all(SelectionState.UNCHECKED)
        self.add_selection(ids)

    def add_selection(self, ids: Any) -> None:
        """Check each id on top of the current selection.

        Accepts a single id or an iterable of ids. Unknown ids are ignored.
        """
        if ids is None:
            return
        if isinstance(ids, (str, int)):
            ids = [ids]
        for node_id in ids:
            if node_id is ROOT_KEY or node_id not in self.index:
                self.events.ignored("add_selection", "unknown node id", node_id)
                continue
            self.update_status(node_id, SelectionState.CHECKED)

    def update_status(self, node_id: NodeId, state: Any = SelectionState.UNCHECKED) -> None:
        """Set one node to checked or unchecked and cascade.

        Any value other than checked (HALF included) resolves to UNCHECKED;
        half is only ever computed by propagation.

        Args:
            node_id: Node to update.
            state: Requested state.
        """
        entry = self.index.get(node_id)
        if entry is None:
            self.events.ignored("update_status", "unknown node id", node_id)
            return
        resolved = resolve_state(state)
        entry.state = resolved
        self.update_children(entry.child_ids, resolved)
        if node_id is not ROOT_KEY:
            self.update_parents(entry.parent_id)
        self._changed(node_id, resolved)

    def update_children(self, ids: Iterable[NodeId], state: SelectionState) -> None:
        """Force every node under ids to state."""
        relation = self.index.relation
        stack = list(ids)
        while stack:
            entry = relation.get(stack.pop())
            if entry is None:
                continue
            entry.state = state
            stack.extend(entry.child_ids)

    def update_parents(self, node_id: Optional[NodeId]) -> None:
        """Recompute node_id and each of its ancestors from their children.

        Stops after the virtual root.
        """
        relation = self.index.relation
        current = node_id
        while True:
            entry = relation.get(current)
            if entry is None:
                return
            entry.state = self.derive_state(current)
            if current is ROOT_KEY:
                return
            current = entry.parent_id

    def derive_state(self, node_id: Optional[NodeId]) -> SelectionState:
        """State implied by a node's children.

        Leaves keep a checked or unchecked state; HALF needs children, so a
        leaf left in HALF drops to UNCHECKED.
        """
        entry = self.index.get(node_id)
        if entry is None:
            return SelectionState.UNCHECKED
        states = self._child_states(entry)
        if not states:
            if entry.state == SelectionState.HALF:
                return SelectionState.UNCHECKED
            return entry.state
        if self.is_half(node_id):
            return SelectionState.HALF
        return states[0]

    def is_half(self, node_id: Optional[NodeId]) -> bool:
        """True if the node has children whose states are not all the same,
        or all share HALF."""
        entry = self.index.get(node_id)
        if entry is None:
            return False
        states = self._child_states(entry)
        if not states:
            return False
        first = states[0]
        for state in states[1:]:
            if state != first:
                return True
        return first == SelectionState.HALF

    def _child_states(self, entry: RelationEntry) -> List[SelectionState]:
        relation = self.index.relation
        return [relation[child].state for child in entry.child_ids if child in relation]

    # =========================================================================
    # Queries
    # =========================================================================

    def get_value(self, mode: Optional[ValueMode] = None) -> List[NodeId]:
        """Collect checked ids in pre-order.

        Args:
            mode: ONLY_PARENT keeps only the top-most checked node of each
                branch, ONLY_LEAF keeps only checked leaves, any other value
                (None included) keeps all.

        Returns:
            Checked node ids. The virtual root is never included.
        """
        try:
            mode = ValueMode(mode) if mode is not None else None
        except ValueError:
            mode = None
        selected: List[NodeId] = []

        def _collect(node_id, entry, content, depth):
            if entry.state != SelectionState.CHECKED or node_id is ROOT_KEY:
                return None
            if mode == ValueMode.ONLY_PARENT:
                selected.append(node_id)
                return False
            if mode == ValueMode.ONLY_LEAF:
                if entry.is_leaf:
                    selected.append(node_id)
                return None
            selected.append(node_id)
            return None

        self.traverse(_collect)
        return selected

    def traverse(self, visitor: Visitor, start_id: Optional[NodeId] = ROOT_KEY) -> None:
        """Walk the tree in pre-order.

        The visitor gets (id, relation entry, content, depth). Returning
        exactly False skips that node's children; traversal then goes on
        with the remaining siblings.

        Args:
            visitor: Callable invoked once per visited node.
            start_id: Node to start from. Defaults to the virtual root.
        """
        relation = self.index.relation
        content = self.index.content
        if start_id not in relation:
            self.events.ignored("traverse", "unknown start id", start_id)
            return

        stack = [(start_id, 0)]
        while stack:
            node_id, depth = stack.pop()
            entry = relation.get(node_id)
            if entry is None:
                continue
            if visitor(node_id, entry, content.get(node_id), depth) is False:
                continue
            stack.extend((child, depth + 1) for child in reversed(entry.child_ids))

    def _changed(self, node_id: Optional[NodeId], state: SelectionState) -> None:
        self.events.publish(
            NodeEvent(
                type=EventType.SELECTION_CHANGED,
                node_id=node_id,
                data={"state": state},
            )
        )


def resolve_state(state: Any) -> SelectionState:
    """Normalize a requested single-node state to CHECKED or UNCHECKED."""
    if isinstance(state, str):
        return (
            SelectionState.CHECKED
            if state.strip().lower() == "checked"
            else SelectionState.UNCHECKED
        )
    if state is True or state == SelectionState.CHECKED:
        return SelectionState.CHECKED
    return SelectionState.UNCHECKED
