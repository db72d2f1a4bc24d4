"""Per-locale collections of Fluent translations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from l10nkit.ftl import FluentBundle, FluentParseError, NumberOptions, parse_resource
from l10nkit.langid import LanguageIdentifier, parse_language_identifier


class LocalizerError(Exception):
    """Raised when translations cannot be loaded or a message cannot be formatted."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Localizer error: {cause}")


@dataclass(frozen=True)
class MessageAttribute:
    """Names an attribute of a message."""

    key: str
    attribute: str


MessageKey = Union[str, MessageAttribute]


def _ident(locale: LanguageIdentifier | str) -> LanguageIdentifier:
    if isinstance(locale, LanguageIdentifier):
        return locale
    return parse_language_identifier(locale)


class Localizer:
    """Holds one FluentBundle per locale and formats messages from them."""

    def __init__(self) -> None:
        self._locales: dict[LanguageIdentifier, FluentBundle] = {}
        self.number_options = NumberOptions()

    def __repr__(self) -> str:
        return "Localizer - " + ", ".join(str(k) for k in self._locales)

    def set_fluent_number_options(self, number_options: NumberOptions) -> Localizer:
        """Set the number options used for template arguments; returns self."""
        self.number_options = number_options
        return self

    def add_bundle(self, locale: LanguageIdentifier | str, ftl_paths) -> None:
        """Build a bundle for ``locale`` from FTL files; later files override earlier."""
        ident = _ident(locale)
        bundle = FluentBundle([ident])
        for path in ftl_paths:
            try:
                text = Path(path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as err:
                raise LocalizerError(f"failed to read from path: {str(path)!r}") from err
            try:
                resource = parse_resource(text)
            except FluentParseError as err:
                raise LocalizerError(
                    f"failed to parse FTL: {str(path)!r}, with reason: {err.errors!r}"
                ) from err
            bundle.add_resource_overriding(resource)
        self._locales[ident] = bundle

    def get_locale(self, locale: LanguageIdentifier | str) -> FluentBundle | None:
        """Return the bundle for ``locale``, or one sharing its language."""
        ident = _ident(locale)
        bundle = self._locales.get(ident)
        if bundle is not None:
            return bundle
        return next(
            (b for k, b in self._locales.items() if k.language == ident.language), None
        )

    def format_message(
        self,
        locale: LanguageIdentifier | str,
        key: MessageKey,
        args: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Format a message, returning None if it cannot be found."""
        try:
            return self.format_message_result(locale, key, args)
        except LocalizerError:
            return None

    def format_message_result(
        self,
        locale: LanguageIdentifier | str,
        key: MessageKey,
        args: Mapping[str, Any] | None = None,
    ) -> str:
        """Format a message; raise LocalizerError if locale, message or attribute is missing.

        Errors met while resolving the pattern are printed to stdout.
        """
        bundle = self.get_locale(locale)
        if bundle is None:
            raise LocalizerError(f"could not find locale {locale}")

        if isinstance(key, MessageAttribute):
            name, attribute = key.key, key.attribute
        else:
            name, attribute = str(key), None

        message = bundle.get_message(name)
        if message is None:
            raise LocalizerError(f"could not find message with key={name}")

        if attribute is not None:
            pattern = message.get_attribute(attribute)
            if pattern is None:
                raise LocalizerError(
                    f"could not find attribute={attribute} for message with key={name}"
                )
        else:
            pattern = message.value
            if pattern is None:
                raise LocalizerError(
                    f"message with key={name} does not have a standalone message"
                )

        text, errors = bundle.format_pattern(pattern, args)
        for err in errors:
            print(err)
        return text

    def __iter__(self) -> Iterator[LanguageIdentifier]:
        return iter(self._locales)

    def items(self) -> Iterator[tuple[LanguageIdentifier, FluentBundle]]:
        """Yield each locale with its bundle, e.g. to register functions."""
        return iter(self._locales.items())