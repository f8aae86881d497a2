"""Snapshot use cases: save, load, describe and compare taxonomies."""

import logging
from collections import Counter
from typing import Any

from domain.category import Category
from domain.indexed import IndexedTaxonomy
from infrastructure.config import SnapshotConfig
from infrastructure.io import TaxonomySerializer
from infrastructure.io.serializer import TaxonomySource
from infrastructure.observability import set_log_context

logger = logging.getLogger(__name__)

TreeSignature = Counter[tuple[tuple[str, ...], tuple[str, ...]]]


def save_snapshot(taxonomy: TaxonomySource, cfg: SnapshotConfig) -> None:
    """Write ``taxonomy`` to the tree and tag files named by ``cfg``."""
    set_log_context(tree_file=cfg.tree_path, tags_file=cfg.tags_path)
    TaxonomySerializer(encoding=cfg.encoding).write(taxonomy, cfg.tree_path, cfg.tags_path)


def load_snapshot(cfg: SnapshotConfig) -> IndexedTaxonomy:
    """
    Read the snapshot named by ``cfg``.

    Raises:
        FileNotFoundError: if either file is missing
        MalformedInputError: if either file violates the row grammar
    """
    set_log_context(tree_file=cfg.tree_path, tags_file=cfg.tags_path)
    return TaxonomySerializer(encoding=cfg.encoding).read(cfg.tree_path, cfg.tags_path)


def tree_signature(root: Category | None) -> TreeSignature:
    """
    Multiset of ``(path, sorted tag names)`` for every node under ``root``.

    Works on either engine, so two taxonomies hold the same tree exactly when
    their signatures are equal; sibling order is ignored.
    """
    signature: TreeSignature = Counter()
    if root is None:
        return signature
    stack: list[tuple[Category, tuple[str, ...]]] = [(root, (root.name,))]
    while stack:
        node, path = stack.pop()
        signature[(path, tuple(sorted(node.tag_names)))] += 1
        stack.extend((child, path + (child.name,)) for child in node.children)
    return signature


def same_content(left: TaxonomySource, right: TaxonomySource) -> bool:
    """True when both hold the same tree and the same registered tags and translations."""
    if tree_signature(left.root) != tree_signature(right.root):
        return False
    left_tags = {tag.name: tag.translations_by_locale for tag in left.all_registered_tags()}
    right_tags = {tag.name: tag.translations_by_locale for tag in right.all_registered_tags()}
    return left_tags == right_tags


def describe_taxonomy(taxonomy: IndexedTaxonomy) -> dict[str, Any]:
    """Summary dict of ``taxonomy`` suitable for logging or JSON output."""
    root = taxonomy.root
    return {
        "root": root.name if root is not None else None,
        "node_count": taxonomy.node_count,
        "registered_tags": [tag.name for tag in taxonomy.all_registered_tags()],
        "used_tags": [tag.name for tag in taxonomy.all_used_tags()],
        "translations": {
            tag.name: dict(sorted(tag.translations_by_locale.items())) for tag in taxonomy.all_registered_tags()
        },
        "nodes": [str(node.path) for node in root.iter_descendants()] if root is not None else [],
    }


def log_taxonomy_summary(taxonomy: IndexedTaxonomy) -> None:
    """Log a concise, human-readable description of ``taxonomy``."""
    summary = describe_taxonomy(taxonomy)
    logger.info("=== Taxonomy Summary ===")
    if summary["root"] is None:
        logger.info("Taxonomy is empty (registered tags: %s)", summary["registered_tags"])
        return

    logger.info("Root: %s (%d nodes)", summary["root"], summary["node_count"])
    logger.info("Registered tags: %s", summary["registered_tags"])
    logger.info("Used tags: %s", summary["used_tags"])
    for tag_name, translations in summary["translations"].items():
        if translations:
            logger.info("  %s: %s", tag_name, ", ".join(f"{text}@{locale}" for locale, text in translations.items()))
    logger.debug("Nodes (pre-order):\n%s", "\n".join(summary["nodes"]))
