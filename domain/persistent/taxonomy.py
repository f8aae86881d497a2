"""Copy-on-write taxonomy: every mutation returns a new snapshot."""

import logging
from collections.abc import Iterable

from domain.errors import EmptyPathError, RootMismatchError
from domain.persistent.node import PersistentNode
from domain.tags import Tag, TagRegistry, Translation
from domain.treepath import PathLike, Treepath

logger = logging.getLogger(__name__)


class PersistentTaxonomy:
    """
    Immutable taxonomy snapshot: an optional root node plus a tag registry.

    Mutating operations leave ``self`` untouched and return a new snapshot that
    shares every unchanged subtree (and, for tree-only edits, the tag registry)
    with ``self``. Searches by name and by tag scan the tree; there is no index.

    Snapshots are safe to share between threads. Two writers starting from the
    same snapshot simply obtain two independent results.
    """

    __slots__ = ("_root", "_registry")

    def __init__(self, root: PersistentNode | None = None, registry: TagRegistry | None = None) -> None:
        self._root = root
        self._registry = registry if registry is not None else TagRegistry()

    @classmethod
    def with_root(cls, name: str) -> "PersistentTaxonomy":
        return cls(root=PersistentNode(name=name))

    # -- snapshot state -----------------------------------------------------

    @property
    def root(self) -> PersistentNode | None:
        return self._root

    @property
    def is_empty(self) -> bool:
        return self._root is None

    @property
    def tag_registry(self) -> TagRegistry:
        """A private copy of the registry; edits to it do not reach this snapshot."""
        return self._registry.copy()

    def _replace(self, root: PersistentNode | None = None, registry: TagRegistry | None = None) -> "PersistentTaxonomy":
        return PersistentTaxonomy(
            root=self._root if root is None else root,
            registry=self._registry if registry is None else registry,
        )

    def _resolve_under_root(self, path: Treepath) -> Treepath | None:
        """Path relative to the root, or None if the root segment does not match."""
        if self._root is None or path.first_segment != self._root.name:
            return None
        return path.tail

    # -- tree edits ---------------------------------------------------------

    def add_node(self, path: PathLike, tags: Iterable[str] = ()) -> "PersistentTaxonomy":
        """
        Ensure ``path`` exists and union ``tags`` into its last node's tag set.

        The first call on an empty taxonomy seeds the root from the path's first
        segment. Unregistered tag names are registered with no translations.
        Idempotent.

        Raises:
            EmptyPathError: if ``path`` is empty
            RootMismatchError: if the first segment is not the root's name
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("add_node")
        tag_names = list(tags)

        root = self._root
        if root is None:
            root = PersistentNode(name=p.first_segment)
            logger.debug("Seeded root %r", root.name)
        elif p.first_segment != root.name:
            raise RootMismatchError(expected=root.name, actual=p.first_segment)

        registry = self._registry
        missing = [name for name in tag_names if name not in registry]
        if missing:
            registry = registry.copy()
            registry.register_all(missing)
            logger.debug("Auto-registered tags: %s", missing)

        root = root.with_added_node(p.tail, tag_names)
        if root is self._root and registry is self._registry:
            return self
        return PersistentTaxonomy(root=root, registry=registry)

    def tag(self, tag_name: str, path: PathLike) -> "PersistentTaxonomy":
        """Attach ``tag_name`` to the node at ``path`` (creating the node if needed)."""
        return self.add_node(path, (tag_name,))

    def untag(self, tag_name: str, path: PathLike) -> "PersistentTaxonomy":
        """
        Detach ``tag_name`` from the node at ``path``. A tag that is not attached,
        or a path that does not resolve, leaves the snapshot unchanged.

        Raises:
            EmptyPathError: if ``path`` is empty
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("untag")
        relative = self._resolve_under_root(p)
        if relative is None:
            return self
        root = self._root.with_tag_removed(relative, tag_name)
        return self if root is self._root else self._replace(root=root)

    def remove_subtree(self, path: PathLike) -> "PersistentTaxonomy":
        """
        Drop the node at ``path`` and everything beneath it.

        Removing the root yields an empty taxonomy (the tag registry is kept).
        A path whose root segment does not match, or that leads nowhere, is a
        no-op.

        Raises:
            EmptyPathError: if ``path`` is empty
        """
        p = Treepath.coerce(path)
        if p.is_empty:
            raise EmptyPathError("remove_subtree")
        relative = self._resolve_under_root(p)
        if relative is None:
            return self
        if relative.is_empty:
            logger.debug("Removed root %r", self._root.name)
            return PersistentTaxonomy(root=None, registry=self._registry)
        root = self._root.with_removed_subtree(relative)
        return self if root is self._root else self._replace(root=root)

    # -- tag registry edits -------------------------------------------------

    def register_tag(self, tag_name: str) -> "PersistentTaxonomy":
        if tag_name in self._registry:
            return self
        registry = self._registry.copy()
        registry.register(tag_name)
        return self._replace(registry=registry)

    def unregister_tag(self, tag_name: str) -> "PersistentTaxonomy":
        """Drop ``tag_name`` from the registry and from every node that uses it."""
        if tag_name not in self._registry:
            return self
        registry = self._registry.copy()
        registry.unregister(tag_name)
        root = self._root.with_tag_purged(tag_name) if self._root is not None else None
        logger.debug("Unregistered tag %r", tag_name)
        return PersistentTaxonomy(root=root, registry=registry)

    def add_tag_translation(self, tag_name: str, translation: Translation) -> "PersistentTaxonomy":
        """
        Raises:
            UnknownTagError: if ``tag_name`` is not registered
        """
        self._registry.require(tag_name)
        registry = self._registry.copy()
        registry.add_translation(tag_name, translation)
        return self._replace(registry=registry)

    def remove_tag_translation(self, tag_name: str, locale: str) -> "PersistentTaxonomy":
        """
        Raises:
            UnknownTagError: if ``tag_name`` is not registered
        """
        tag = self._registry.require(tag_name)
        if tag.find_translation_for_language(locale) is None:
            return self
        registry = self._registry.copy()
        registry.remove_translation(tag_name, locale)
        return self._replace(registry=registry)

    # -- queries ------------------------------------------------------------

    def find_nodes_by_name(self, name: str) -> list[PersistentNode]:
        return self._root.find_subnodes_by_name(name) if self._root is not None else []

    def find_node_by_path(self, path: PathLike) -> PersistentNode | None:
        p = Treepath.coerce(path)
        if p.is_empty:
            return None
        relative = self._resolve_under_root(p)
        if relative is None:
            return None
        return self._root.find_descendant(relative)

    def find_nodes_by_tag_name(self, tag_name: str) -> list[PersistentNode]:
        return self._root.find_subnodes_by_tag_name(tag_name) if self._root is not None else []

    def find_nodes_by_tag_translation(self, translation: Translation) -> list[PersistentNode]:
        tag = self._registry.tag_for_translation(translation)
        if tag is None:
            return []
        return self.find_nodes_by_tag_name(tag.name)

    def list_descendants(self, path: PathLike) -> list[PersistentNode]:
        node = self.find_node_by_path(path)
        return node.list_descendants() if node is not None else []

    def all_registered_tags(self) -> list[Tag]:
        return self._registry.all()

    def all_used_tags(self) -> list[Tag]:
        """Tags attached somewhere in the tree (full scan), restricted to the registry."""
        if self._root is None:
            return []
        used = self._root.used_tag_names()
        return [tag for tag in self._registry.all() if tag.name in used]

    def find_tag(self, tag_name: str) -> Tag | None:
        return self._registry.get(tag_name)

    # -- value semantics ----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentTaxonomy):
            return NotImplemented
        return self._root == other._root and self._registry == other._registry

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        root = self._root.name if self._root is not None else None
        return f"PersistentTaxonomy(root={root!r}, tags={self._registry.names()!r})"
