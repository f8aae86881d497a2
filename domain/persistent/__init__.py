"""
Persistent (copy-on-write) taxonomy engine.

Every mutation returns a new snapshot that shares unchanged subtrees with the
previous one. Name and tag searches scan the tree.
"""

from domain.persistent.node import PersistentNode
from domain.persistent.taxonomy import PersistentTaxonomy

__all__ = [
    "PersistentNode",
    "PersistentTaxonomy",
]
