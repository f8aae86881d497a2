"""
Tags, their per-locale translations, and the tag registry shared by both engines.

A tag is a registered name plus a map ``locale -> text`` (at most one text per
locale). A translation is a ``(text, locale)`` pair bound to exactly one tag;
the registry keeps a reverse index from translations to tag names so that
translation lookups are locale-exact and O(1).
"""

import logging
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from domain.errors import UnknownTagError

logger = logging.getLogger(__name__)

# BCP 47 shape: language, optional script/region/variant/extension subtags.
_LANGUAGE_TAG_RE = re.compile(r"^[A-Za-z]{2,8}(?:-[A-Za-z0-9]{1,8})*$")


class InvalidLanguageTagError(ValueError):
    """Raised when a locale identifier is not a well-formed language tag."""


def parse_language_tag(raw: object) -> str:
    """
    Validate and canonicalise a language tag.

    Accepts ``_`` as a separator (``en_GB``) and normalises case:
    language lower-case, 4-letter script title-case, 2-letter region upper-case.

    Examples:
        >>> parse_language_tag("en_gb")
        'en-GB'
        >>> parse_language_tag("ZH-hans-cn")
        'zh-Hans-CN'

    Raises:
        InvalidLanguageTagError: if the value is not a well-formed tag
    """
    if not isinstance(raw, str):
        raise InvalidLanguageTagError(f"Language tag must be a string, got {type(raw).__name__}")
    s = raw.strip().replace("_", "-")
    if not _LANGUAGE_TAG_RE.match(s):
        raise InvalidLanguageTagError(f"Unparsable language tag: {raw!r}")

    language, *subtags = s.split("-")
    if not language.isalpha() or len(language) == 4:
        raise InvalidLanguageTagError(f"Unparsable language tag: {raw!r}")

    out = [language.lower()]
    for i, sub in enumerate(subtags):
        if i == 0 and len(sub) == 4 and sub.isalpha():
            out.append(sub.title())
        elif len(sub) == 2 and sub.isalpha():
            out.append(sub.upper())
        else:
            out.append(sub.lower())
    return "-".join(out)


class Translation(BaseModel):
    """Display text of a tag in one locale."""

    model_config = ConfigDict(frozen=True)

    text: str
    locale: str

    @field_validator("locale", mode="before")
    @classmethod
    def _canonical_locale(cls, v: object) -> str:
        return parse_language_tag(v)

    @classmethod
    def of(cls, text: str, locale: str) -> "Translation":
        return cls(text=text, locale=locale)

    def __str__(self) -> str:
        return f"{self.text}@{self.locale}"


class Tag(BaseModel):
    """Immutable tag value: a name and its translations keyed by locale."""

    model_config = ConfigDict(frozen=True)

    name: str
    translations_by_locale: Annotated[Mapping[str, str], AfterValidator(MappingProxyType)] = Field(
        default_factory=dict, validate_default=True
    )

    @property
    def languages(self) -> list[str]:
        return list(self.translations_by_locale)

    @property
    def translations(self) -> list[Translation]:
        return [Translation(text=text, locale=loc) for loc, text in self.translations_by_locale.items()]

    def find_translation_for_language(self, locale: str) -> str | None:
        return self.translations_by_locale.get(parse_language_tag(locale))

    def with_translation(self, translation: Translation) -> "Tag":
        updated = {**self.translations_by_locale, translation.locale: translation.text}
        return Tag(name=self.name, translations_by_locale=updated)

    def without_translation(self, locale: str) -> "Tag":
        updated = dict(self.translations_by_locale)
        updated.pop(parse_language_tag(locale), None)
        return Tag(name=self.name, translations_by_locale=updated)

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.translations_by_locale.items())))


class TagRegistry:
    """
    Registered tags plus the reverse ``Translation -> tag name`` index.

    Mutable. The indexed engine owns one instance and edits it in place; the
    persistent engine calls ``copy()`` before every edit so that a registry
    held by a snapshot is never mutated.
    """

    __slots__ = ("_tags", "_translation_index")

    def __init__(self) -> None:
        self._tags: dict[str, Tag] = {}
        self._translation_index: dict[Translation, str] = {}

    def copy(self) -> "TagRegistry":
        clone = TagRegistry()
        clone._tags = dict(self._tags)
        clone._translation_index = dict(self._translation_index)
        return clone

    @classmethod
    def from_tags(cls, tags: Iterable[Tag]) -> "TagRegistry":
        """Rebuild a registry, reverse index included, from whole tags."""
        registry = cls()
        for tag in tags:
            registry.register(tag.name)
            for translation in tag.translations:
                registry.add_translation(tag.name, translation)
        return registry

    # -- queries ------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def get(self, name: str) -> Tag | None:
        return self._tags.get(name)

    def require(self, name: str) -> Tag:
        tag = self._tags.get(name)
        if tag is None:
            raise UnknownTagError(name)
        return tag

    def names(self) -> list[str]:
        return list(self._tags)

    def all(self) -> list[Tag]:
        return list(self._tags.values())

    def tag_for_translation(self, translation: Translation) -> Tag | None:
        """Locale-exact reverse lookup; identical text in another locale never matches."""
        name = self._translation_index.get(translation)
        return self._tags.get(name) if name is not None else None

    def snapshot(self) -> dict[str, dict[str, str]]:
        """Plain ``name -> {locale: text}`` view, convenient for comparisons."""
        return {name: dict(tag.translations_by_locale) for name, tag in self._tags.items()}

    # -- mutation -----------------------------------------------------------

    def register(self, name: str) -> bool:
        """Register ``name`` with no translations. Returns False if it already existed."""
        if name in self._tags:
            return False
        self._tags[name] = Tag(name=name)
        return True

    def register_all(self, names: Iterable[str]) -> list[str]:
        return [name for name in names if self.register(name)]

    def unregister(self, name: str) -> bool:
        """Drop ``name`` and its translations. Returns False if it was not registered."""
        tag = self._tags.pop(name, None)
        if tag is None:
            return False
        for translation in tag.translations:
            self._translation_index.pop(translation, None)
        return True

    def add_translation(self, name: str, translation: Translation) -> None:
        """
        Bind ``translation`` to the tag ``name``.

        An existing text for the same locale is overwritten (last write wins).
        A pair already bound to a different tag is moved to this one.

        Raises:
            UnknownTagError: if ``name`` is not registered
        """
        tag = self.require(name)

        previous_text = tag.translations_by_locale.get(translation.locale)
        if previous_text is not None:
            self._translation_index.pop(Translation(text=previous_text, locale=translation.locale), None)

        previous_owner = self._translation_index.get(translation)
        if previous_owner is not None and previous_owner != name:
            self._tags[previous_owner] = self._tags[previous_owner].without_translation(translation.locale)
            logger.debug("Translation %s moved from tag %r to %r", translation, previous_owner, name)

        self._tags[name] = tag.with_translation(translation)
        self._translation_index[translation] = name

    def remove_translation(self, name: str, locale: str) -> bool:
        """
        Remove the translation of ``name`` for ``locale``; absent locale is a no-op.

        Raises:
            UnknownTagError: if ``name`` is not registered
        """
        tag = self.require(name)
        text = tag.find_translation_for_language(locale)
        if text is None:
            return False
        self._tags[name] = tag.without_translation(locale)
        self._translation_index.pop(Translation(text=text, locale=locale), None)
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagRegistry):
            return NotImplemented
        return self._tags == other._tags

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TagRegistry({self.snapshot()!r})"

