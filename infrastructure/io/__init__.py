"""I/O utilities: filesystem operations and the row-based snapshot serializer."""

from infrastructure.io.fs import ensure_exists, read_lines, write_lines
from infrastructure.io.serializer import (
    TaxonomySerializer,
    dump_tag_rows,
    dump_tree_rows,
    load,
)

__all__ = [
    "ensure_exists",
    "read_lines",
    "write_lines",
    "TaxonomySerializer",
    "dump_tree_rows",
    "dump_tag_rows",
    "load",
]
