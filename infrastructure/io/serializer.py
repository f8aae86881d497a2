"""
Row-based snapshot format: one file for the tree, one for the tag registry.

Tree file, one row per node, every parent row before its children's rows::

    <id>|<parent-id or "root">|<node-name>[|<tag>,<tag>,...]

Ids are transient positive integers assigned during export; they only encode
parent-child edges inside one file. The tag field is omitted for untagged
nodes, so a row has 3 or 4 fields.

Tag registry file, one row per registered tag::

    <tag-name>|<language-tag>:<text>,<language-tag>:<text>,...

A tag without translations still has a row, with an empty second field.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from domain.category import Category
from domain.errors import MalformedInputError, SerializationError
from domain.indexed import IndexedNode, IndexedTaxonomy
from domain.tags import Tag, Translation
from domain.treepath import Treepath
from infrastructure.io.fs import ensure_exists, read_lines, write_lines

logger = logging.getLogger(__name__)

FIELD_SEP = "|"
LIST_SEP = ","
TRANSLATION_SEP = ":"
ROOT_PARENT = "root"

TREE_SOURCE = "tree"
TAGS_SOURCE = "tags"

_RESERVED = (FIELD_SEP, LIST_SEP, "\n", "\r")
# node names never appear inside a list field
_NAME_RESERVED = (FIELD_SEP, "\n", "\r")


class TaxonomySource(Protocol):
    """What the exporter needs from an engine; both engines satisfy it."""

    @property
    def root(self) -> Category | None: ...

    def all_registered_tags(self) -> list[Tag]: ...


def _checked(value: str, what: str) -> str:
    if any(ch in value for ch in _RESERVED):
        raise SerializationError(f"{what} {value!r} contains a reserved character ('|', ',' or a line break)")
    return value


def _checked_name(value: str) -> str:
    if any(ch in value for ch in _NAME_RESERVED):
        raise SerializationError(f"Node name {value!r} contains a reserved character ('|' or a line break)")
    return value


def _checked_tag(value: str) -> str:
    # an empty item in a tag list reads back as "no tag"
    if not value:
        raise SerializationError("Tag name must be non-empty")
    return _checked(value, "Tag name")


# ---------------------------------------------------------------------------
# export


def dump_tree_rows(taxonomy: TaxonomySource) -> list[str]:
    """Pre-order rows for the tree file; an empty taxonomy yields no rows."""
    root = taxonomy.root
    if root is None:
        return []

    rows: list[str] = []
    last_id = 0
    stack: list[tuple[Category, int | None]] = [(root, None)]
    while stack:
        node, parent_id = stack.pop()
        last_id += 1
        node_id = last_id
        fields = [
            str(node_id),
            ROOT_PARENT if parent_id is None else str(parent_id),
            _checked_name(node.name),
        ]
        if node.tag_names:
            fields.append(LIST_SEP.join(_checked_tag(t) for t in sorted(node.tag_names)))
        rows.append(FIELD_SEP.join(fields))
        stack.extend((child, node_id) for child in reversed(list(node.children)))
    return rows


def dump_tag_rows(taxonomy: TaxonomySource) -> list[str]:
    """One row per registered tag, translations ordered by language tag."""
    rows: list[str] = []
    for tag in taxonomy.all_registered_tags():
        tokens = [
            f"{t.locale}{TRANSLATION_SEP}{_checked(t.text, 'Translation text')}"
            for t in sorted(tag.translations, key=lambda t: t.locale)
        ]
        rows.append(f"{_checked_tag(tag.name)}{FIELD_SEP}{LIST_SEP.join(tokens)}")
    return rows


# ---------------------------------------------------------------------------
# import


def _parse_id(raw: str, source: str, line_no: int, what: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise MalformedInputError(source, line_no, f"{what} is not an integer: {raw!r}") from None
    if value <= 0:
        raise MalformedInputError(source, line_no, f"{what} must be positive, got {value}")
    return value


def _split_list(raw: str) -> list[str]:
    return [item for item in raw.split(LIST_SEP) if item]


def _meaningful(lines: Iterable[str]) -> Iterable[tuple[int, str]]:
    for line_no, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if line.strip():
            yield line_no, line


def load_tree_rows(taxonomy: IndexedTaxonomy, lines: Iterable[str], source: str = TREE_SOURCE) -> int:
    """Replay tree rows into ``taxonomy``; returns the number of rows read."""
    id_to_node: dict[int, IndexedNode] = {}
    for line_no, line in _meaningful(lines):
        fields = line.split(FIELD_SEP)
        if len(fields) not in (3, 4):
            raise MalformedInputError(source, line_no, f"expected 3 or 4 fields, got {len(fields)}")

        node_id = _parse_id(fields[0], source, line_no, "node id")
        if node_id in id_to_node:
            raise MalformedInputError(source, line_no, f"duplicate node id {node_id}")
        name = fields[2]
        tag_names = _split_list(fields[3]) if len(fields) == 4 else []

        if fields[1] == ROOT_PARENT:
            if taxonomy.root is not None:
                raise MalformedInputError(source, line_no, "second root row")
            node = taxonomy.add_node(Treepath.of(name), tag_names)
        else:
            parent_id = _parse_id(fields[1], source, line_no, "parent id")
            parent = id_to_node.get(parent_id)
            if parent is None:
                raise MalformedInputError(source, line_no, f"parent id {parent_id} not defined on an earlier row")
            node = parent.add_or_update_child(name, tag_names)
        id_to_node[node_id] = node
    return len(id_to_node)


def load_tag_rows(taxonomy: IndexedTaxonomy, lines: Iterable[str], source: str = TAGS_SOURCE) -> int:
    """Register tags and their translations; returns the number of rows read."""
    count = 0
    for line_no, line in _meaningful(lines):
        fields = line.split(FIELD_SEP)
        if len(fields) != 2:
            raise MalformedInputError(source, line_no, f"expected 2 fields, got {len(fields)}")
        tag_name, raw_translations = fields
        taxonomy.register_tag(tag_name)

        for token in _split_list(raw_translations):
            language, sep, text = token.partition(TRANSLATION_SEP)
            if not sep:
                raise MalformedInputError(source, line_no, f"translation {token!r} lacks '{TRANSLATION_SEP}'")
            try:
                translation = Translation(text=text, locale=language)
            except ValidationError as err:
                raise MalformedInputError(source, line_no, f"unparsable language tag {language!r}") from err
            taxonomy.add_tag_translation(tag_name, translation)
        count += 1
    return count


def load(tree_lines: Iterable[str], tag_lines: Iterable[str]) -> IndexedTaxonomy:
    """
    Rebuild a taxonomy from tree rows and tag rows.

    Tag rows are replayed first so the registry keeps the tag file order; tags
    used in the tree but missing from the tag file are registered untranslated.

    Raises:
        MalformedInputError: on the first row violating the grammar; no partial
            taxonomy is returned
    """
    taxonomy = IndexedTaxonomy()
    load_tag_rows(taxonomy, tag_lines)
    load_tree_rows(taxonomy, tree_lines)
    return taxonomy


# ---------------------------------------------------------------------------
# files


class TaxonomySerializer:
    """Writes either engine to a (tree file, tag file) pair and reads it back as an IndexedTaxonomy."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def write(self, taxonomy: TaxonomySource, tree_file: Path, tags_file: Path) -> None:
        """
        Raises:
            SerializationError: if a name or translation contains a reserved
                character; nothing is written in that case
        """
        tree_rows = dump_tree_rows(taxonomy)
        tag_rows = dump_tag_rows(taxonomy)
        write_lines(tree_file, tree_rows, encoding=self.encoding)
        write_lines(tags_file, tag_rows, encoding=self.encoding)
        logger.info(
            "Wrote taxonomy snapshot: %d node rows -> %s, %d tag rows -> %s",
            len(tree_rows),
            tree_file,
            len(tag_rows),
            tags_file,
        )

    def read(self, tree_file: Path, tags_file: Path) -> IndexedTaxonomy:
        """
        Raises:
            FileNotFoundError: if either file is missing
            MalformedInputError: if either file violates the row grammar
        """
        ensure_exists(tree_file, "taxonomy tree file")
        ensure_exists(tags_file, "tag registry file")

        taxonomy = IndexedTaxonomy()
        tags = load_tag_rows(taxonomy, read_lines(tags_file, self.encoding), source=str(tags_file))
        nodes = load_tree_rows(taxonomy, read_lines(tree_file, self.encoding), source=str(tree_file))
        logger.info("Read taxonomy snapshot: %d node rows, %d tag rows", nodes, tags)
        return taxonomy

    def dump(self, taxonomy: TaxonomySource) -> tuple[list[str], list[str]]:
        """Both row lists without touching the filesystem."""
        return dump_tree_rows(taxonomy), dump_tag_rows(taxonomy)

    def parse(self, tree_lines: Sequence[str], tag_lines: Sequence[str]) -> IndexedTaxonomy:
        return load(tree_lines, tag_lines)
