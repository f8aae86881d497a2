"""
Domain layer: the taxonomy engines, with no file I/O.

Contains:
- treepath: root-to-node name sequences
- tags: tags, translations and the shared tag registry
- category: the node contract both engines implement
- persistent: copy-on-write engine (scan-based search)
- indexed: mutable engine with name/tag indices
- errors: the engine error hierarchy
"""

from domain.category import Category
from domain.errors import (
    EmptyPathError,
    MalformedInputError,
    NodeNotFoundError,
    RootMismatchError,
    SerializationError,
    TaxonomyError,
    UnknownTagError,
)
from domain.indexed import IndexedNode, IndexedTaxonomy
from domain.persistent import PersistentNode, PersistentTaxonomy
from domain.tags import InvalidLanguageTagError, Tag, TagRegistry, Translation, parse_language_tag
from domain.treepath import PathLike, Treepath

__all__ = [
    # Engines
    "PersistentTaxonomy",
    "IndexedTaxonomy",
    # Nodes
    "Category",
    "PersistentNode",
    "IndexedNode",
    # Values
    "Treepath",
    "PathLike",
    "Tag",
    "Translation",
    "TagRegistry",
    "parse_language_tag",
    # Errors
    "TaxonomyError",
    "RootMismatchError",
    "EmptyPathError",
    "UnknownTagError",
    "NodeNotFoundError",
    "SerializationError",
    "MalformedInputError",
    "InvalidLanguageTagError",
]
