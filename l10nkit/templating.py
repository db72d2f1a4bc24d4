"""A template function that formats Fluent messages from template arguments."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from markupsafe import Markup

from l10nkit.ftl import FluentNumber, NumberOptions
from l10nkit.langid import LanguageIdentifier, parse_language_identifier
from l10nkit.localizer import Localizer, LocalizerError, MessageAttribute


class TemplateFunctionError(Exception):
    """Raised when a template asks for a message that cannot be formatted."""


def json_value_to_fluent_value(value: Any, number_options: NumberOptions) -> Any:
    """Convert a JSON-like template value into a value Fluent can format.

    Numbers become FluentNumber with ``number_options``, strings stay strings,
    None stays None, and anything else is rendered as compact JSON text.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return FluentNumber(float(value), number_options)
        except OverflowError:
            return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def _parse_lang(value: Any) -> LanguageIdentifier | None:
    if not isinstance(value, str):
        return None
    try:
        return parse_language_identifier(value)
    except ValueError:
        return None


@dataclass
class TemplateFunction:
    """Callable for templates: ``fluent(lang=..., key=..., attribute=..., **args)``.

    Every keyword except ``key`` is passed on to Fluent as a message argument.
    The formatted text is returned as markup that needs no further escaping.
    """

    localizer: Localizer

    #: Output of this function is already safe to insert into a page.
    is_safe = True

    def __call__(self, **kwargs: Any) -> Markup:
        lang = _parse_lang(kwargs.get("lang"))
        if lang is None:
            raise TemplateFunctionError("missing lang param")

        key = kwargs.get("key")
        if not isinstance(key, str):
            raise TemplateFunctionError("missing ftl key")

        attribute = kwargs.get("attribute")
        if not isinstance(attribute, str):
            attribute = None

        options = self.localizer.number_options
        fluent_args = {
            name: json_value_to_fluent_value(value, options)
            for name, value in kwargs.items()
            if name != "key"
        }

        message_key: str | MessageAttribute = (
            MessageAttribute(key=key, attribute=attribute) if attribute is not None else key
        )
        try:
            message = self.localizer.format_message_result(lang, message_key, fluent_args)
        except LocalizerError as err:
            raise TemplateFunctionError("failed to format message") from err
        return Markup(message)