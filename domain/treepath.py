"""Root-to-node sequences of node names."""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import EmptyPathError


class Treepath(BaseModel):
    """
    Address of a node in a taxonomy tree: node names ordered root first.

    The path type performs no validation against any tree; an empty path
    denotes "no node". Resolving a path is the engine's responsibility.

    Examples:
        >>> p = Treepath.of("A", "A", "D")
        >>> p.first_segment, p.last_segment, str(p.tail)
        ('A', 'D', 'A/D')
    """

    model_config = ConfigDict(frozen=True)

    segments: tuple[str, ...] = Field(default_factory=tuple)

    @classmethod
    def of(cls, *segments: str) -> "Treepath":
        return cls(segments=tuple(segments))

    @classmethod
    def empty(cls) -> "Treepath":
        return cls()

    @classmethod
    def coerce(cls, value: "Treepath | Iterable[str] | str") -> "Treepath":
        """Accept a Treepath, a single name, or any iterable of names."""
        if isinstance(value, Treepath):
            return value
        if isinstance(value, str):
            return cls(segments=(value,))
        return cls(segments=tuple(value))

    @property
    def length(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def first_segment(self) -> str:
        if not self.segments:
            raise EmptyPathError("first_segment")
        return self.segments[0]

    @property
    def last_segment(self) -> str:
        if not self.segments:
            raise EmptyPathError("last_segment")
        return self.segments[-1]

    @property
    def tail(self) -> "Treepath":
        """Path with the first segment dropped (empty stays empty)."""
        return Treepath(segments=self.segments[1:])

    @property
    def parent(self) -> "Treepath":
        return Treepath(segments=self.segments[:-1])

    def child(self, name: str) -> "Treepath":
        return Treepath(segments=(*self.segments, name))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.segments)

    def __str__(self) -> str:
        return "/".join(self.segments)


PathLike = Treepath | Iterable[str] | str
