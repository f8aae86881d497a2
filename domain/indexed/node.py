"""Mutable tree node owned by an IndexedTaxonomy."""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from domain.tags import Tag
from domain.treepath import Treepath

if TYPE_CHECKING:
    from domain.indexed.taxonomy import IndexedTaxonomy


class IndexedNode:
    """
    Node of an :class:`IndexedTaxonomy`.

    Identity is stable: a reference obtained from the taxonomy keeps reflecting
    later tag changes. Structural edits go through the owning taxonomy so that
    its name and tag indices stay in sync; the underscore methods below are for
    the owner only.

    Child map and tag set are allocated on first use, so an untagged leaf
    carries no containers.
    """

    __slots__ = ("_name", "_parent", "_owner", "_child_nodes", "_attached_tags", "_attached")

    def __init__(self, name: str, parent: "IndexedNode | None", owner: "IndexedTaxonomy") -> None:
        self._name = name
        self._parent = parent
        self._owner = owner
        self._child_nodes: dict[str, IndexedNode] | None = None
        self._attached_tags: set[str] | None = None
        self._attached = True

    # -- Category contract ------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> "IndexedNode | None":
        return self._parent

    @property
    def children(self) -> list["IndexedNode"]:
        return list(self._child_nodes.values()) if self._child_nodes else []

    @property
    def tag_names(self) -> frozenset[str]:
        return frozenset(self._attached_tags) if self._attached_tags else frozenset()

    @property
    def tags(self) -> list[Tag]:
        """Registered tags attached to this node."""
        return [tag for tag in map(self._owner.find_tag, self.tag_names) if tag is not None]

    @property
    def is_leaf(self) -> bool:
        return not self._child_nodes

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_attached(self) -> bool:
        """False once the node's subtree has been removed from the taxonomy."""
        return self._attached

    @property
    def path(self) -> Treepath:
        segments: list[str] = []
        node: IndexedNode | None = self
        while node is not None:
            segments.append(node.name)
            node = node.parent
        return Treepath(segments=tuple(reversed(segments)))

    def find_child(self, name: str) -> "IndexedNode | None":
        return self._child_nodes.get(name) if self._child_nodes else None

    def find_descendant(self, path: Treepath) -> "IndexedNode | None":
        node: IndexedNode | None = self
        for segment in path:
            node = node.find_child(segment)
            if node is None:
                return None
        return node

    def list_descendants(self) -> list["IndexedNode"]:
        return list(self.iter_descendants())

    def iter_descendants(self) -> Iterator["IndexedNode"]:
        """Pre-order walk: every parent is yielded before its children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node._child_nodes:
                stack.extend(reversed(node._child_nodes.values()))

    def add_or_update_child(self, name: str, tag_names: Iterable[str] = ()) -> "IndexedNode":
        """
        Create the child ``name`` if missing, attach ``tag_names`` to it, and return it.

        Raises:
            NodeNotFoundError: if this node was removed from its taxonomy
        """
        return self._owner._add_below(self, Treepath.of(name), tag_names)

    # -- owner-only mutation ----------------------------------------------

    def _adopt(self, name: str) -> "IndexedNode":
        if self._child_nodes is None:
            self._child_nodes = {}
        child = IndexedNode(name, self, self._owner)
        self._child_nodes[name] = child
        return child

    def _detach_child(self, name: str) -> None:
        if self._child_nodes:
            self._child_nodes.pop(name, None)

    def _add_tag(self, tag_name: str) -> bool:
        if self._attached_tags is None:
            self._attached_tags = set()
        if tag_name in self._attached_tags:
            return False
        self._attached_tags.add(tag_name)
        return True

    def _remove_tag(self, tag_name: str) -> bool:
        if not self._attached_tags or tag_name not in self._attached_tags:
            return False
        self._attached_tags.discard(tag_name)
        return True

    def _mark_detached(self) -> None:
        self._attached = False

    def __repr__(self) -> str:
        parent = self.parent.name if self.parent is not None else None
        return f"IndexedNode(name={self.name!r}, parent={parent!r}, tags={sorted(self.tag_names)!r})"
