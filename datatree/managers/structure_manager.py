"""
StructureManager for structural edits of the tree.

Handles appending subtrees, removing nodes and moving nodes while keeping
the content and relation indices consistent.
"""

from typing import Any, List, Optional, Tuple

from datatree.constants import ROOT_KEY
from datatree.exceptions import DuplicateNodeError
from datatree.managers.events import EventBus, EventType, NodeEvent
from datatree.managers.index_builder import IndexBuilder
from datatree.managers.selection_manager import SelectionManager
from datatree.models.base import NodeId
from datatree.models.index import TreeIndex


class StructureManager:
    """
    Manages append, remove and move operations.

    Handles:
    - Splicing freshly indexed subtrees under existing nodes
    - Removing a node with its whole subtree
    - Moving a node under another one, refusing moves that create cycles
    """

    def __init__(
        self,
        index: TreeIndex,
        builder: IndexBuilder,
        selection: SelectionManager,
        events: EventBus,
    ) -> None:
        """
        Initialize StructureManager.

        Args:
            index: Shared tree index.
            builder: IndexBuilder used to index appended data.
            selection: SelectionManager used to recompute ancestor states.
            events: Bus for structural and diagnostic events.
        """
        self.index = index
        self.builder = builder
        self.selection = selection
        self.events = events

    def append(self, data: Any, target_id: Optional[NodeId] = ROOT_KEY) -> List[NodeId]:
        """Index data and attach it under target_id.

        Flat nodes that declare a parent already in the tree are linked to
        that parent instead, so one call can feed several parents. Nested
        data only re-parents its top-level nodes.

        Selection states are not re-propagated at the attachment points.

        Args:
            data: Flat or nested node list.
            target_id: Node receiving nodes without a parent. Defaults to the
                virtual root.

        Returns:
            Ids linked under pre-existing nodes, in attachment order.

        Raises:
            DuplicateNodeError: If any incoming id already exists. Nothing is
                merged in that case.
        """
        if not data:
            return []

        index = self.index
        if target_id is not ROOT_KEY and target_id not in index:
            self.events.ignored("append", "target node not found, nothing appended", target_id)
            return []

        content, relation = self.builder.build(data, parent_id=target_id)

        conflicts = [
            node_id for node_id in content
            if node_id in index.relation or node_id in index.content
        ]
        if conflicts:
            raise DuplicateNodeError(conflicts)

        # Content-less entries are parents referenced by the batch but defined outside it
        links: List[Tuple[Optional[NodeId], NodeId]] = []
        for stub_id, stub in relation.items():
            if stub_id in content:
                continue
            if stub_id in index or stub_id == target_id:
                parent_id = stub_id
            else:
                self.events.ignored(
                    "append", "declared parent not found, attached to target", stub_id
                )
                parent_id = target_id
            for child_id in stub.child_ids:
                relation[child_id].parent_id = parent_id
                links.append((parent_id, child_id))

        # Nothing was written before this point
        index.content.update(content)
        for node_id in content:
            index.relation[node_id] = relation[node_id]
        if target_id is ROOT_KEY:
            index.ensure_root()
        for parent_id, child_id in links:
            index.relation[parent_id].add_child(child_id)

        linked = [child_id for _, child_id in links]
        self.events.publish(
            NodeEvent(
                type=EventType.NODES_APPENDED,
                target_id=target_id,
                node_ids=list(content),
                data={"linked": linked},
            )
        )
        return linked

    def remove(self, node_id: Optional[NodeId]) -> bool:
        """Remove a node and all of its descendants.

        Removing the virtual root empties the whole index.

        Returns:
            False if the node was not found.
        """
        index = self.index
        entry = index.get(node_id)
        if entry is None:
            self.events.ignored("remove", "node not found", node_id)
            return False

        if node_id is ROOT_KEY:
            removed = list(index.content)
            index.clear()
        else:
            removed = list(index.iter_subtree(node_id))
            parent_id = entry.parent_id
            parent = index.get(parent_id)
            if parent is not None:
                parent.remove_child(node_id)
            for descendant in removed:
                index.relation.pop(descendant, None)
                index.content.pop(descendant, None)
            if parent is not None:
                self.selection.update_parents(parent_id)

        self.events.publish(
            NodeEvent(type=EventType.NODE_REMOVED, node_id=node_id, node_ids=removed)
        )
        return True

    def move(self, node_id: NodeId, target_id: Optional[NodeId] = ROOT_KEY) -> bool:
        """Move a node with its subtree under target_id.

        The moved subtree keeps its states; the new and old ancestor chains
        are recomputed.

        Returns:
            False if the move was refused.
        """
        if not self.is_moveable(node_id, target_id):
            self.events.ignored("move", "node cannot be moved to target", node_id, target_id)
            return False

        relation = self.index.relation
        entry = relation[node_id]
        old_parent_id = entry.parent_id
        old_parent = relation.get(old_parent_id)
        if old_parent is not None:
            old_parent.remove_child(node_id)

        entry.parent_id = target_id
        relation[target_id].add_child(node_id)

        self.selection.update_parents(target_id)
        if old_parent is not None:
            self.selection.update_parents(old_parent_id)

        self.events.publish(
            NodeEvent(
                type=EventType.NODE_MOVED,
                node_id=node_id,
                target_id=target_id,
                data={"from": old_parent_id},
            )
        )
        return True

    def is_descendant(self, node_id: Optional[NodeId], child_id: Optional[NodeId]) -> bool:
        """Check whether child_id lies anywhere below node_id."""
        subtree = self.index.iter_subtree(node_id)
        next(subtree, None)
        for descendant in subtree:
            if descendant == child_id:
                return True
        return False

    def is_moveable(self, node_id: Optional[NodeId], target_id: Optional[NodeId]) -> bool:
        """Check the move preconditions.

        The node and target must differ, both must exist, the node must not
        be the virtual root and the target must not sit below the node.
        """
        if node_id == target_id or node_id is ROOT_KEY:
            return False
        if node_id not in self.index or target_id not in self.index:
            return False
        return not self.is_descendant(node_id, target_id)
