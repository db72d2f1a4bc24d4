# l10nkit

Localization utilities for ASGI web applications.

- **Language detection** from the `Accept-Language` header or from a locale
  prefix in the URL path (`/en/...`, `/en-US/...`).
- **Redirects** to a locale sub-path when no locale is given, with an
  optional permanent (301) redirect from the site root to the default language.
- **Fluent messages**: load `.ftl` files per locale and format messages,
  attributes and arguments.
- **Template helper**: a callable for template engines that formats a message
  from keyword arguments.

## Installation

```
pip install l10nkit
```

## Language identifiers

`l10nkit.langid.parse_language_identifier` turns text such as `en`, `en-US`
or `zh-Hant-TW` into a frozen `LanguageIdentifier` with `language`, `script`,
`region` and `variants` fields. Invalid text raises `ValueError`.
`str(ident)` gives the canonical form, and `ident.matches_language(other)`
compares only the language subtags.

```python
from l10nkit.langid import parse_language_identifier

ident = parse_language_identifier("en_us")
str(ident)        # 'en-US'
ident.language    # 'en'
```

Wherever the middleware or the localizer takes a language, a string is also
accepted and parsed the same way.

## Detecting the language

Wrap any ASGI application in a `LanguageIdentifierExtractor`, most easily
through a `LanguageIdentifierExtractorLayer`. The detected
`LanguageIdentifier` is stored in the request scope under the key
`"language_identifier"` (`l10nkit.middleware.LANGUAGE_IDENTIFIER_SCOPE_KEY`).

```python
from l10nkit.middleware import LanguageIdentifierExtractorLayer, RedirectMode

layer = (
    LanguageIdentifierExtractorLayer(
        "en",
        ["en", "ja"],
        RedirectMode.REDIRECT_TO_LANGUAGE_SUB_PATH,
    )
    .excluded_paths(["/.well-known", "/static"])
    .redirect_default_as_301()
)

app = layer.layer(inner_app)


async def inner_app(scope, receive, send):
    lang = scope["language_identifier"]
    ...
```

The builder methods `redirect`, `excluded_paths` and
`redirect_default_as_301` return a changed copy; they exist on both the layer
and the middleware. A middleware built directly with
`LanguageIdentifierExtractor(inner, supported_langs, default_lang)` starts in
`RedirectMode.NO_REDIRECT`.

Redirect modes:

| Mode | Behaviour |
| --- | --- |
| `RedirectMode.NO_REDIRECT` | Stores the first supported language from `Accept-Language`, or the default one. |
| `RedirectMode.REDIRECT_TO_LANGUAGE_SUB_PATH` | `/lists` redirects to `/en/lists`; `/en/lists` is passed on as `/lists`. |
| `RedirectMode.REDIRECT_TO_FULL_LOCALE_SUB_PATH` | `/lists` redirects to `/en-US/lists`; `/en-US/lists` is passed on as `/lists`. |

In the redirect modes:

- A supported language in the first path segment is stored in the scope and
  removed from `path` and `raw_path` before the inner application is called.
- Otherwise, a path starting with one of the excluded prefixes is passed on
  unchanged.
- Otherwise the response is a redirect whose `Location` is the path prefixed
  with the language from `Accept-Language` (or the default), keeping the
  query string. The status is 302, or 301 when `redirect_default_as_301()` was
  set, the path is `/` and the chosen language is the default one.

A language is supported when its language subtag matches one of the supported
languages; an empty list of supported languages accepts every language.
Non-HTTP scopes (such as `lifespan` or `websocket`) are passed through
untouched.

## Formatting messages

```python
from l10nkit.localizer import Localizer, MessageAttribute

localizer = Localizer()
localizer.add_bundle("en", ["locales/en/main.ftl", "locales/en/sub.ftl"])

localizer.format_message("en", "test-key-a", None)
# 'Hello World'

localizer.format_message("en", "test-name", {"name": "Deadpool"})
# 'Peg \u2068Deadpool\u2069'

localizer.format_message(
    "en", MessageAttribute(key="attribute-test", attribute="attribute_a"), None
)
# 'Hello'
```

- Later files in `add_bundle` override messages with the same key from
  earlier files, so a fallback file can be listed first. A file that cannot be
  read or parsed raises `LocalizerError`.
- When a full locale such as `en-US` has no bundle, `get_locale` returns a
  bundle for the same language (`en`).
- `format_message` returns `None` when the locale, message or attribute cannot
  be found; `format_message_result` raises `LocalizerError` with the reason
  instead. Problems met while resolving a pattern (an unknown variable, message
  or function) are printed, and a placeholder such as `{$name}` is put in the
  text.
- Iterating a `Localizer` yields its locales; `items()` yields each locale with
  its `FluentBundle`, for example to register functions with
  `bundle.add_function(name, function)`. A function is called as
  `function(positional, named)` with a list and a dict of argument values.

The FTL parser and formatter live in `l10nkit.ftl`: `parse_resource(text)`
returns a `FluentResource` or raises `FluentParseError`, and
`FluentBundle.format_pattern(pattern, args)` returns the text together with a
list of errors. Placeables are wrapped in Unicode isolation marks
(U+2068/U+2069) unless the bundle is created with `use_isolating=False`.

## Using messages in templates

```python
from l10nkit.templating import TemplateFunction

translate = TemplateFunction(localizer)
translate(lang="en", key="test-name", name="Deadpool")
translate(lang="en", key="attribute-test", attribute="attribute_a")
```

Every keyword except `key` is passed to the message as an argument. Numbers
become `FluentNumber` values using the localizer's number options (set with
`localizer.set_fluent_number_options(NumberOptions(...))`); other non-string
values are passed as compact JSON text. The result is a `markupsafe.Markup`,
and `TemplateFunction.is_safe` is `True`, so it can be registered as a global
function in a template engine. A missing or invalid `lang`, a missing `key`,
or a message that cannot be formatted raises `TemplateFunctionError`.

## Limits

- No built-in Fluent functions such as `NUMBER()` or `DATETIME()` are
  provided; register your own with `add_function`.
- Plural selection knows only the categories `one` and `other`: a number
  selects `one` when it is exactly 1 shown without a fraction, and always
  `other` for Japanese, Chinese, Korean, Thai and Vietnamese.
- Number formatting follows `NumberOptions` (minimum integer digits and
  minimum/maximum fraction digits) and is not locale-aware: no grouping
  separators or locale decimal marks.