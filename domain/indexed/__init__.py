"""
Indexed mutable taxonomy engine.

Edits happen in place; name and tag lookups are served from hash indices.
Not thread safe.
"""

from domain.indexed.node import IndexedNode
from domain.indexed.taxonomy import IndexedTaxonomy

__all__ = [
    "IndexedNode",
    "IndexedTaxonomy",
]
