"""
IndexBuilder for turning caller data into content and relation indices.

Handles both input shapes:
- flat: hierarchy expressed by a parent id field on each node
- nested: hierarchy expressed by a child list embedded in each node
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from datatree.constants import ROOT_KEY
from datatree.exceptions import DuplicateNodeError
from datatree.managers.events import EventBus
from datatree.models.base import InputShape, KeyMapping, NodeId, RelationEntry
from datatree.models.index import ContentIndex, RelationIndex


class IndexBuilder:
    """
    Builds (content, relation) index pairs from flat or nested node lists.

    Building is pure: the returned maps are new and no tree state is touched.

    Usage:
        builder = IndexBuilder(KeyMapping(id="uuid", pid="parentId"))
        content, relation = builder.build(nodes)
    """

    def __init__(
        self,
        key_mapping: Optional[KeyMapping] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize IndexBuilder.

        Args:
            key_mapping: Field names for id, parent id and children.
            events: Bus receiving diagnostics for skipped nodes.
        """
        self.keys = key_mapping or KeyMapping()
        self.events = events

    def detect_shape(self, nodes: Iterable[Any]) -> InputShape:
        """Return NESTED if any node carries a child field, else FLAT.

        Mixed collections are treated as nested.
        """
        child_key = self.keys.child
        for node in _as_list(nodes):
            if isinstance(node, dict) and child_key in node:
                return InputShape.NESTED
        return InputShape.FLAT

    def build(
        self,
        nodes: Iterable[Any],
        parent_id: Optional[NodeId] = ROOT_KEY,
    ) -> Tuple[ContentIndex, RelationIndex]:
        """Index a node list.

        Args:
            nodes: Flat or nested list of node dicts.
            parent_id: Parent assigned to nodes that declare none.
                Defaults to the virtual root.

        Returns:
            Tuple of (content index, relation index).

        Raises:
            DuplicateNodeError: If an id occurs more than once in nodes.
        """
        nodes = _as_list(nodes)
        if self.detect_shape(nodes) is InputShape.NESTED:
            return self._build_nested(nodes, parent_id)
        return self._build_flat(nodes, parent_id)

    def _build_flat(
        self, nodes: List[Any], parent_id: Optional[NodeId]
    ) -> Tuple[ContentIndex, RelationIndex]:
        content: ContentIndex = {}
        relation: RelationIndex = {}
        for node in nodes:
            self._index_node(node, parent_id, content, relation)
        return content, relation

    def _build_nested(
        self, nodes: List[Any], parent_id: Optional[NodeId]
    ) -> Tuple[ContentIndex, RelationIndex]:
        content: ContentIndex = {}
        relation: RelationIndex = {}
        child_key = self.keys.child

        # Pre-order with an explicit stack; children pushed reversed to keep sibling order.
        # Only top-level nodes may declare a parent, deeper ones follow the nesting.
        stack = [(node, parent_id, False) for node in reversed(nodes)]
        while stack:
            node, context, nested = stack.pop()
            node_id = self._index_node(node, context, content, relation, nested)
            if node_id is None:
                continue
            children = node.get(child_key)
            if children:
                stack.extend((child, node_id, True) for child in reversed(_as_list(children)))
        return content, relation

    def _index_node(
        self,
        node: Any,
        context: Optional[NodeId],
        content: ContentIndex,
        relation: RelationIndex,
        nested: bool = False,
    ) -> Optional[NodeId]:
        """Record one node in both maps and link it to its parent.

        A nested node is always linked to context; its parent field is ignored.
        Returns the node id, or None when the node was skipped.
        """
        keys = self.keys
        if not isinstance(node, dict) or node.get(keys.id) is None:
            self._ignored("node without an id skipped")
            return None

        node_id = node[keys.id]
        if node_id in content:
            raise DuplicateNodeError([node_id], f"Node id {node_id!r} occurs more than once in the input")

        # Only an absent or None parent means "no parent"; 0 and "" are real ids
        declared = None if nested else node.get(keys.pid)
        parent = context if declared is None else declared
        if parent == node_id:
            self._ignored("node declares itself as parent, linked to context parent", node_id)
            parent = context if context != node_id else ROOT_KEY

        content[node_id] = _content_of(node, keys)

        entry = relation.get(node_id)
        if entry is None:
            entry = relation[node_id] = RelationEntry()
        entry.parent_id = parent

        # Parents not seen yet get a content-less stub filled in if they appear later
        parent_entry = relation.get(parent)
        if parent_entry is None:
            parent_entry = relation[parent] = RelationEntry()
        parent_entry.add_child(node_id)
        return node_id

    def _ignored(self, reason: str, *node_ids: Any) -> None:
        if self.events is not None:
            self.events.ignored("build_index", reason, *node_ids)


def _as_list(nodes: Any) -> List[Any]:
    if nodes is None:
        return []
    if isinstance(nodes, dict):
        return [nodes]
    return list(nodes)


def _content_of(node: Dict[str, Any], keys: KeyMapping) -> Dict[str, Any]:
    """Attribute fields of a node, without the relational ones."""
    relational = {keys.id, keys.pid, keys.child}
    return {key: value for key, value in node.items() if key not in relational}
