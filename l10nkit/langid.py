"""Parsing and formatting of language identifiers such as ``en-US``."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEPARATOR = re.compile(r"[-_]")


def _is_alpha(text: str) -> bool:
    return text.isascii() and text.isalpha()


def _is_alnum(text: str) -> bool:
    return text.isascii() and text.isalnum()


def _is_digit(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _parse_language(subtag: str) -> str | None:
    if not 2 <= len(subtag) <= 8 or len(subtag) == 4 or not _is_alpha(subtag):
        raise ValueError(f"invalid language subtag: {subtag!r}")
    lowered = subtag.lower()
    return None if lowered == "und" else lowered


def _parse_script(subtag: str) -> str | None:
    if len(subtag) == 4 and _is_alpha(subtag):
        return subtag[0].upper() + subtag[1:].lower()
    return None


def _parse_region(subtag: str) -> str | None:
    if len(subtag) == 2 and _is_alpha(subtag):
        return subtag.upper()
    if len(subtag) == 3 and _is_digit(subtag):
        return subtag
    return None


def _parse_variant(subtag: str) -> str | None:
    if not _is_alnum(subtag):
        return None
    if len(subtag) == 4 and subtag[0].isdigit():
        return subtag.lower()
    if 5 <= len(subtag) <= 8:
        return subtag.lower()
    return None


@dataclass(frozen=True)
class LanguageIdentifier:
    """A language identifier: language, optional script, region and variants."""

    language: str | None = None
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> LanguageIdentifier:
        return parse_language_identifier(text)

    def matches_language(self, other: LanguageIdentifier) -> bool:
        """Return True when both identifiers share the same language subtag."""
        return self.language == other.language

    def __str__(self) -> str:
        parts = [self.language or "und"]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        return "-".join(parts)


def parse_language_identifier(text: str) -> LanguageIdentifier:
    """Parse ``text`` into a LanguageIdentifier, raising ValueError if invalid."""
    subtags = _SEPARATOR.split(text)
    language = _parse_language(subtags[0])
    script: str | None = None
    region: str | None = None
    variants: list[str] = []

    # 1: after language, 2: after script, 3: only variants may follow
    position = 1
    for subtag in subtags[1:]:
        if position == 1 and (found := _parse_script(subtag)) is not None:
            script = found
            position = 2
        elif position <= 2 and (found := _parse_region(subtag)) is not None:
            region = found
            position = 3
        elif (found := _parse_variant(subtag)) is not None:
            variants.append(found)
            position = 3
        else:
            raise ValueError(f"invalid subtag {subtag!r} in {text!r}")

    return LanguageIdentifier(
        language=language,
        script=script,
        region=region,
        variants=tuple(sorted(set(variants))),
    )