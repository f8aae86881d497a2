"""Conversion between the two engines."""

import logging

from domain.indexed import IndexedNode, IndexedTaxonomy
from domain.persistent import PersistentNode, PersistentTaxonomy
from domain.tags import TagRegistry
from domain.treepath import Treepath

logger = logging.getLogger(__name__)


def _freeze_tree(root: IndexedNode) -> PersistentNode:
    # Post-order without recursion: children are frozen before their parent.
    frozen: dict[IndexedNode, PersistentNode] = {}
    stack: list[tuple[IndexedNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in node.children)
            continue
        frozen[node] = PersistentNode(
            name=node.name,
            child_nodes={child.name: frozen.pop(child) for child in node.children},
            attached_tags=node.tag_names,
        )
    return frozen[root]


def freeze(indexed: IndexedTaxonomy) -> PersistentTaxonomy:
    """
    Immutable snapshot of ``indexed``.

    Args:
        indexed: Source taxonomy; it is not modified

    Returns:
        PersistentTaxonomy with the same tree and the full tag registry,
        unused tags and translations included
    """
    registry = TagRegistry.from_tags(indexed.all_registered_tags())
    root = _freeze_tree(indexed.root) if indexed.root is not None else None
    snapshot = PersistentTaxonomy(root=root, registry=registry)
    logger.debug("Froze taxonomy: %d nodes, %d tags", indexed.node_count, len(registry))
    return snapshot


def thaw(persistent: PersistentTaxonomy) -> IndexedTaxonomy:
    """
    Mutable, indexed copy of ``persistent``.

    The registry is replayed before the tree so tag order is preserved.
    """
    indexed = IndexedTaxonomy()
    for tag in persistent.all_registered_tags():
        indexed.register_tag(tag.name)
        for translation in tag.translations:
            indexed.add_tag_translation(tag.name, translation)

    root = persistent.root
    if root is None:
        return indexed

    stack: list[tuple[PersistentNode, IndexedNode]] = [
        (root, indexed.add_node(Treepath.of(root.name), root.tag_names))
    ]
    while stack:
        source, target = stack.pop()
        for child in source.children:
            stack.append((child, target.add_or_update_child(child.name, child.tag_names)))
    logger.debug("Thawed taxonomy: %d nodes", indexed.node_count)
    return indexed
