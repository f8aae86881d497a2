"""Behavioural contract shared by the node types of both engines."""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from domain.treepath import Treepath


@runtime_checkable
class Category(Protocol):
    """
    A node of a taxonomy tree.

    Names are not unique across the tree, only among the children of one node.
    The persistent and the indexed engines implement this independently; there
    is no shared base class.
    """

    @property
    def name(self) -> str: ...

    @property
    def children(self) -> Iterable["Category"]: ...

    @property
    def tag_names(self) -> frozenset[str]: ...

    @property
    def is_leaf(self) -> bool: ...

    def find_child(self, name: str) -> "Category | None": ...

    def find_descendant(self, path: Treepath) -> "Category | None":
        """Resolve ``path`` relative to this node; the empty path resolves to this node."""
        ...

    def list_descendants(self) -> list["Category"]:
        """This node and everything below it, every parent before its children."""
        ...
