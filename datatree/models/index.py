"""
Tree index model for the DataTree package.

In-memory pair of maps keyed by node id:
- content: attribute data of each node
- relation: parent link, ordered child ids and selection state

Built from flat or nested data on load.
The virtual root lives under ROOT_KEY in the relation map only.
"""

from typing import Any, Dict, Iterator, List, Optional

from datatree.constants import ROOT_KEY
from datatree.models.base import NodeId, RelationEntry

ContentIndex = Dict[NodeId, Dict[str, Any]]
RelationIndex = Dict[Optional[NodeId], RelationEntry]


class TreeIndex:
    """
    In-memory content and relation indices of one tree.

    Managers share a single TreeIndex and mutate its maps in place.
    """

    def __init__(
        self,
        content: Optional[ContentIndex] = None,
        relation: Optional[RelationIndex] = None,
    ):
        self.content: ContentIndex = content if content is not None else {}
        self.relation: RelationIndex = relation if relation is not None else {}

    def replace(self, content: ContentIndex, relation: RelationIndex) -> None:
        """Swap in freshly built maps."""
        self.content = content
        self.relation = relation

    def clear(self) -> None:
        self.content = {}
        self.relation = {}

    def __contains__(self, node_id: Optional[NodeId]) -> bool:
        return node_id in self.relation

    def __len__(self) -> int:
        return len(self.content)

    def get(self, node_id: Optional[NodeId]) -> Optional[RelationEntry]:
        return self.relation.get(node_id)

    def get_content(self, node_id: Optional[NodeId]) -> Optional[Dict[str, Any]]:
        return self.content.get(node_id)

    def child_ids(self, node_id: Optional[NodeId]) -> List[NodeId]:
        entry = self.relation.get(node_id)
        return entry.child_ids if entry else []

    def ensure_root(self) -> RelationEntry:
        """Return the virtual root entry, creating it if missing."""
        root = self.relation.get(ROOT_KEY)
        if root is None:
            root = self.relation[ROOT_KEY] = RelationEntry()
        return root

    def iter_subtree(self, node_id: Optional[NodeId]) -> Iterator[NodeId]:
        """Yield node_id and its descendants in pre-order.

        Ids listed as children but missing from the relation map are skipped.
        """
        if node_id not in self.relation:
            return
        stack = [node_id]
        while stack:
            current = stack.pop()
            yield current
            entry = self.relation.get(current)
            if entry and entry.child_ids:
                stack.extend(
                    child for child in reversed(entry.child_ids) if child in self.relation
                )
