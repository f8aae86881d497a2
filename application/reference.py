"""Small reference taxonomy used by the CLI demo."""

from domain.indexed import IndexedTaxonomy
from domain.tags import Translation

REFERENCE_PATHS = (
    ("A", "B"),
    ("A", "C"),
    ("A", "A", "A"),
    ("A", "A", "D", "E"),
)

REFERENCE_TAGS = (
    ("alfa", ("A",)),
    ("alfa", ("A", "A", "A")),
    ("alfa", ("A", "A", "D")),
    ("beta", ("A", "A", "D")),
)

REFERENCE_TRANSLATIONS = (
    ("alfa", Translation(text="alfa_uk", locale="en-GB")),
    ("alfa", Translation(text="alfa_us", locale="en-US")),
    ("beta", Translation(text="beta", locale="en")),
)


def build_reference_taxonomy(with_translations: bool = True) -> IndexedTaxonomy:
    """A seven-node tree under root ``A`` with tags ``alfa`` and ``beta``."""
    taxonomy = IndexedTaxonomy()
    for path in REFERENCE_PATHS:
        taxonomy.add_node(path)
    for tag_name, path in REFERENCE_TAGS:
        taxonomy.tag(tag_name, path)
    if with_translations:
        for tag_name, translation in REFERENCE_TRANSLATIONS:
            taxonomy.add_tag_translation(tag_name, translation)
    return taxonomy
