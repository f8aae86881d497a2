"""In-place taxonomy with name and tag indices."""

import logging
from collections.abc import Iterable

from domain.errors import EmptyPathError, NodeNotFoundError, RootMismatchError
from domain.indexed.node import IndexedNode
from domain.tags import Tag, TagRegistry, Translation
from domain.treepath import PathLike, Treepath

logger = logging.getLogger(__name__)


class IndexedTaxonomy:
    """
    Mutable taxonomy with O(1) average lookup by node name and by tag name.

    Two reverse indices (``name -> nodes`` and ``tag -> nodes``) are kept in
    step with every structural and tagging change. After each public method
    returns:

    - a node is in the name index iff it is in the tree;
    - a node is in the tag index under T iff T is in its tag set;
    - buckets are never left empty.

    Single writer only: no operation is safe to run concurrently with any other
    (reads included). Callers sharing an instance across threads must serialise
    access themselves.
    """

    def __init__(self) -> None:
        self._root: IndexedNode | None = None
        self._name_index: dict[str, set[IndexedNode]] = {}
        self._tag_index: dict[str, set[IndexedNode]] = {}
        self._registry = TagRegistry()

    # -- index maintenance --------------------------------------------------

    @staticmethod
    def _bind(index: dict[str, set[IndexedNode]], key: str, node: IndexedNode) -> None:
        index.setdefault(key, set()).add(node)

    @staticmethod
    def _unbind(index: dict[str, set[IndexedNode]], key: str, node: IndexedNode) -> None:
        bucket = index.get(key)
        if bucket is None:
            return
        bucket.discard(node)
        if not bucket:
            del index[key]

    def _attach_tags(self, node: IndexedNode, tag_names: Iterable[str]) -> None:
        for tag_name in tag_names:
            if self._registry.register(tag_name):
                logger.debug("Auto-registered tag %r", tag_name)
            if node._add_tag(tag_name):
                self._bind(self._tag_index, tag_name, node)

    def _add_below(self, node: IndexedNode, path: Treepath, tag_names: Iterable[str]) -> IndexedNode:
        """Walk ``path`` from ``node``, creating missing children, and tag the last node."""
        if not node.is_attached or node._owner is not self:
            raise NodeNotFoundError(node.path)
        for segment in path:
            child = node.find_child(segment)
            if child is None:
                child = node._adopt(segment)
                self._bind(self._name_index, segment, child)
            node = child
        self._attach_tags(node, tag_names)
        return node

    # -- tree edits ---------------------------------------------------------

    @property
    def root(self) -> IndexedNode | None:
        """The root node, or None for an empty taxonomy."""
        return self._root

    def add_node(self, path: PathLike, tags: Iterable[str] = ()) -> IndexedNode:
        """
        Ensure ``path`` exists, attach ``tags`` to its last node, and return that node.

        The first call on an empty taxonomy creates the root. Unregistered tag
        names are registered with no translations. Idempotent.

        Raises:
            EmptyPathError: if ``path`` is empty
            RootMismatchError: if the first segment is not the root's name
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("add_node")
        if self._root is None:
            self._root = IndexedNode(p.first_segment, None, self)
            self._bind(self._name_index, self._root.name, self._root)
            logger.debug("Created root %r", self._root.name)
        elif p.first_segment != self._root.name:
            raise RootMismatchError(expected=self._root.name, actual=p.first_segment)
        return self._add_below(self._root, p.tail, tags)

    def tag(self, tag_name: str, path: PathLike) -> IndexedNode:
        """
        Attach ``tag_name`` (registering it if needed) to the node at ``path``.

        Raises:
            NodeNotFoundError: if ``path`` does not resolve
        """
        p = Treepath.coerce(path)
        node = self.find_node_by_path(p)
        if node is None:
            raise NodeNotFoundError(p)
        self._attach_tags(node, (tag_name,))
        return node

    def untag(self, tag_name: str, path: PathLike) -> IndexedNode:
        """
        Detach ``tag_name`` from the node at ``path``; a tag that is not attached is a no-op.

        Raises:
            EmptyPathError: if ``path`` is empty
            NodeNotFoundError: if ``path`` does not resolve
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("untag")
        node = self.find_node_by_path(p)
        if node is None:
            raise NodeNotFoundError(p)
        if node._remove_tag(tag_name):
            self._unbind(self._tag_index, tag_name, node)
        return node

    def remove_subtree(self, path: PathLike) -> None:
        """
        Detach the node at ``path`` and purge it and all of its descendants from
        both indices. Removing the root empties the taxonomy (registered tags are
        kept). A path that does not resolve is a no-op.

        Raises:
            EmptyPathError: if ``path`` is empty
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("remove_subtree")
        subtree_root = self.find_node_by_path(p)
        if subtree_root is None:
            return

        if subtree_root.is_root:
            self._root = None
        else:
            subtree_root.parent._detach_child(subtree_root.name)

        removed = 0
        for node in subtree_root.iter_descendants():
            self._unbind(self._name_index, node.name, node)
            for tag_name in node.tag_names:
                self._unbind(self._tag_index, tag_name, node)
            node._mark_detached()
            removed += 1
        logger.debug("Removed subtree %s (%d nodes)", p, removed)

    # -- tag registry edits -------------------------------------------------

    def register_tag(self, tag_name: str) -> None:
        self._registry.register(tag_name)

    def unregister_tag(self, tag_name: str) -> None:
        """Drop ``tag_name`` from every node that has it, then from the registry."""
        if tag_name not in self._registry:
            return
        nodes = self._tag_index.pop(tag_name, set())
        for node in nodes:
            node._remove_tag(tag_name)
        self._registry.unregister(tag_name)
        logger.debug("Unregistered tag %r (detached from %d nodes)", tag_name, len(nodes))

    def add_tag_translation(self, tag_name: str, translation: Translation) -> None:
        """
        Raises:
            UnknownTagError: if ``tag_name`` is not registered
        """
        self._registry.add_translation(tag_name, translation)

    def remove_tag_translation(self, tag_name: str, locale: str) -> None:
        """
        Raises:
            UnknownTagError: if ``tag_name`` is not registered
        """
        self._registry.remove_translation(tag_name, locale)

    # -- queries ------------------------------------------------------------

    def find_nodes_by_name(self, name: str) -> list[IndexedNode]:
        return list(self._name_index.get(name, ()))

    def find_node_by_path(self, path: PathLike) -> IndexedNode | None:
        p = Treepath.coerce(path)
        if self._root is None or p.is_empty or p.first_segment != self._root.name:
            return None
        return self._root.find_descendant(p.tail)

    def find_nodes_by_tag_name(self, tag_name: str) -> list[IndexedNode]:
        return list(self._tag_index.get(tag_name, ()))

    def find_nodes_by_tag_translation(self, translation: Translation) -> list[IndexedNode]:
        tag = self._registry.tag_for_translation(translation)
        if tag is None:
            return []
        return self.find_nodes_by_tag_name(tag.name)

    def list_descendants(self, path: PathLike) -> list[IndexedNode]:
        node = self.find_node_by_path(path)
        return node.list_descendants() if node is not None else []

    def all_registered_tags(self) -> list[Tag]:
        return self._registry.all()

    def all_used_tags(self) -> list[Tag]:
        """Tags with a non-empty bucket in the tag index."""
        return [tag for tag in self._registry.all() if tag.name in self._tag_index]

    def find_tag(self, tag_name: str) -> Tag | None:
        return self._registry.get(tag_name)

    @property
    def node_count(self) -> int:
        return sum(len(bucket) for bucket in self._name_index.values())

    def __repr__(self) -> str:
        root = self._root.name if self._root is not None else None
        return f"IndexedTaxonomy(root={root!r}, nodes={self.node_count}, tags={self._registry.names()!r})"
