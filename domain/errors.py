"""Exceptions raised by the taxonomy engines and the snapshot serializer."""

from collections.abc import Sequence


class TaxonomyError(Exception):
    """Base class for all taxonomy engine errors."""


class RootMismatchError(TaxonomyError):
    """A path's first segment disagrees with the established root name."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Cannot add node under root '{actual}': this taxonomy's root is '{expected}'")


class EmptyPathError(TaxonomyError, ValueError):
    """An operation that requires a non-empty path was given an empty one."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}() requires a non-empty path")


class UnknownTagError(TaxonomyError, KeyError):
    """The tag name is not present in the tag registry."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(tag_name)

    def __str__(self) -> str:
        return f"Tag not registered: {self.tag_name!r}"


class NodeNotFoundError(TaxonomyError, LookupError):
    """The path does not resolve to an existing node."""

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"No node at path: {'/'.join(self.path) or '<empty>'}")


class SerializationError(TaxonomyError):
    """A taxonomy could not be written to or read from its row-based files."""


class MalformedInputError(SerializationError):
    """A row in a snapshot file violates the row grammar."""

    def __init__(self, source: str, line_no: int, reason: str) -> None:
        self.source = source
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"{source}:{line_no}: {reason}")
