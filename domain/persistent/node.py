"""Immutable tree node with structural sharing."""

from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from domain.treepath import Treepath


class PersistentNode(BaseModel):
    """
    Frozen taxonomy node.

    Every ``with_*`` method returns a new node and rebuilds only the chain of
    nodes from the edited one up to ``self``; untouched children are reused by
    reference. When an edit changes nothing, ``self`` is returned unchanged.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    child_nodes: Annotated[Mapping[str, "PersistentNode"], AfterValidator(MappingProxyType)] = Field(
        default_factory=dict, validate_default=True
    )
    attached_tags: frozenset[str] = Field(default_factory=frozenset)

    # -- Category contract ------------------------------------------------

    @property
    def children(self) -> list["PersistentNode"]:
        return list(self.child_nodes.values())

    @property
    def tag_names(self) -> frozenset[str]:
        return self.attached_tags

    @property
    def is_leaf(self) -> bool:
        return not self.child_nodes

    def find_child(self, name: str) -> "PersistentNode | None":
        return self.child_nodes.get(name)

    def find_descendant(self, path: Treepath) -> "PersistentNode | None":
        node: PersistentNode | None = self
        for segment in path:
            node = node.child_nodes.get(segment)
            if node is None:
                return None
        return node

    def list_descendants(self) -> list["PersistentNode"]:
        return list(self.iter_descendants())

    # -- traversal --------------------------------------------------------

    def iter_descendants(self) -> Iterator["PersistentNode"]:
        """Pre-order walk: every parent is yielded before its children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes.values()))

    def collect(self, predicate: Callable[["PersistentNode"], bool]) -> list["PersistentNode"]:
        return [node for node in self.iter_descendants() if predicate(node)]

    def find_subnodes_by_name(self, name: str) -> list["PersistentNode"]:
        return self.collect(lambda node: node.name == name)

    def find_subnodes_by_tag_name(self, tag_name: str) -> list["PersistentNode"]:
        return self.collect(lambda node: tag_name in node.attached_tags)

    def used_tag_names(self) -> set[str]:
        used: set[str] = set()
        for node in self.iter_descendants():
            used |= node.attached_tags
        return used

    # -- path-copying edits -----------------------------------------------

    def _with_child(self, child: "PersistentNode") -> "PersistentNode":
        return PersistentNode(
            name=self.name,
            child_nodes={**self.child_nodes, child.name: child},
            attached_tags=self.attached_tags,
        )

    def with_added_node(self, path: Treepath, tags: Iterable[str]) -> "PersistentNode":
        """
        Return a copy with ``path`` (relative to this node) present and ``tags``
        attached to its last node. Missing intermediate nodes are created.

        An empty path just unions ``tags`` into this node's tag set.
        """
        if path.is_empty:
            merged = self.attached_tags | frozenset(tags)
            if merged == self.attached_tags:
                return self
            return PersistentNode(name=self.name, child_nodes=dict(self.child_nodes), attached_tags=merged)

        child_name = path.first_segment
        child = self.child_nodes.get(child_name)
        if child is None:
            return self._with_child(PersistentNode(name=child_name).with_added_node(path.tail, tags))
        updated = child.with_added_node(path.tail, tags)
        if updated is child:
            return self
        return self._with_child(updated)

    def with_tag_removed(self, path: Treepath, tag_name: str) -> "PersistentNode":
        """Detach ``tag_name`` from the node at ``path``; unresolved paths change nothing."""
        if path.is_empty:
            if tag_name not in self.attached_tags:
                return self
            return PersistentNode(
                name=self.name,
                child_nodes=dict(self.child_nodes),
                attached_tags=self.attached_tags - {tag_name},
            )
        child = self.child_nodes.get(path.first_segment)
        if child is None:
            return self
        updated = child.with_tag_removed(path.tail, tag_name)
        if updated is child:
            return self
        return self._with_child(updated)

    def with_removed_subtree(self, path: Treepath) -> "PersistentNode":
        """
        Return a copy without the subtree rooted at ``path`` (relative to this
        node, non-empty). A path leading nowhere returns ``self``.
        """
        child_name = path.first_segment
        child = self.child_nodes.get(child_name)
        if child is None:
            return self
        if path.length == 1:
            remaining = {name: node for name, node in self.child_nodes.items() if name != child_name}
            return PersistentNode(name=self.name, child_nodes=remaining, attached_tags=self.attached_tags)
        updated = child.with_removed_subtree(path.tail)
        if updated is child:
            return self
        return self._with_child(updated)

    def with_tag_purged(self, tag_name: str) -> "PersistentNode":
        """Remove every use of ``tag_name`` in this subtree; subtrees without it are shared."""
        children = {name: child.with_tag_purged(tag_name) for name, child in self.child_nodes.items()}
        unchanged_children = all(children[name] is child for name, child in self.child_nodes.items())
        if unchanged_children and tag_name not in self.attached_tags:
            return self
        return PersistentNode(
            name=self.name,
            child_nodes=children,
            attached_tags=self.attached_tags - {tag_name},
        )

    def __hash__(self) -> int:
        # equal nodes share name, tags and child names
        return hash((self.name, self.attached_tags, frozenset(self.child_nodes)))

    def __repr__(self) -> str:
        return f"PersistentNode(name={self.name!r}, tags={sorted(self.attached_tags)!r})"

    __str__ = __repr__
