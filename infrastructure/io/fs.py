"""Filesystem utility functions."""

from collections.abc import Sequence
from pathlib import Path


def ensure_exists(path: Path, what: str) -> None:
    """
    Check that a path exists, raise FileNotFoundError if not.

    Args:
        path: Path to check
        what: Description of what this path represents (for error message)

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def read_lines(path: Path, encoding: str = "utf-8") -> list[str]:
    """Read a text file and return its lines without line terminators."""
    return path.read_text(encoding=encoding).splitlines()


def write_lines(path: Path, lines: Sequence[str], encoding: str = "utf-8") -> None:
    """
    Write ``lines`` to ``path``, one per line, creating parent directories.

    An empty sequence produces an empty file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding, newline="\n") as f:
        for line in lines:
            f.write(line)
            f.write("\n")
