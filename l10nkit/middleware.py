"""ASGI middleware that detects the request language and redirects to localized paths."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Awaitable, Callable
from urllib.parse import quote, urlsplit

from l10nkit.langid import LanguageIdentifier, parse_language_identifier

ASGIApp = Callable[..., Awaitable[None]]

#: Scope key under which the detected language identifier is stored.
LANGUAGE_IDENTIFIER_SCOPE_KEY = "language_identifier"


class RedirectMode(Enum):
    """How the middleware treats requests without a language in their path."""

    #: Only detect the language from the Accept-Language header.
    NO_REDIRECT = "no_redirect"
    #: Redirect to ``/<lang>-<region>/...`` sub-paths.
    REDIRECT_TO_FULL_LOCALE_SUB_PATH = "full_locale_sub_path"
    #: Redirect to ``/<lang>/...`` sub-paths.
    REDIRECT_TO_LANGUAGE_SUB_PATH = "language_sub_path"


def _as_identifier(value: LanguageIdentifier | str) -> LanguageIdentifier:
    if isinstance(value, LanguageIdentifier):
        return value
    return parse_language_identifier(value)


def _try_parse(text: str) -> LanguageIdentifier | None:
    try:
        return parse_language_identifier(text)
    except ValueError:
        return None


def _visible_ascii(text: str) -> bool:
    return all(ch == "\t" or 32 <= ord(ch) < 127 for ch in text)


def _accept_language(headers: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> str | None:
    """Return the first Accept-Language header value, if readable."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    for name, value in items:
        if isinstance(name, bytes):
            name = name.decode("latin-1")
        if name.lower() != "accept-language":
            continue
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        return value if _visible_ascii(value) else None
    return None


class _RedirectSettings:
    """State and accessors shared by the middleware and its layer."""

    _default_lang: LanguageIdentifier
    _supported_langs: tuple[LanguageIdentifier, ...]
    _redirect_mode: RedirectMode
    _excluded_paths: tuple[str, ...]
    _redirect_default_as_301: bool

    def _with(self, **changes: Any):
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    @property
    def default_lang(self) -> LanguageIdentifier:
        return self._default_lang

    @property
    def supported_langs(self) -> tuple[LanguageIdentifier, ...]:
        return self._supported_langs

    @property
    def redirect_mode(self) -> RedirectMode:
        return self._redirect_mode

    @property
    def excluded_path_prefixes(self) -> tuple[str, ...]:
        return self._excluded_paths

    @property
    def permanent_default_redirect(self) -> bool:
        return self._redirect_default_as_301


class LanguageIdentifierExtractor(_RedirectSettings):
    """ASGI middleware storing the request language in the scope."""

    def __init__(
        self,
        inner: ASGIApp,
        supported_langs: Iterable[LanguageIdentifier | str],
        default_lang: LanguageIdentifier | str,
    ) -> None:
        self.inner = inner
        self._default_lang = _as_identifier(default_lang)
        self._supported_langs = tuple(_as_identifier(lang) for lang in supported_langs)
        self._redirect_mode = RedirectMode.NO_REDIRECT
        self._excluded_paths = ()
        self._redirect_default_as_301 = False

    def __repr__(self) -> str:
        langs = ", ".join(str(lang) for lang in self._supported_langs)
        return (
            f"LanguageIdentifierExtractor(default={self._default_lang}, "
            f"supported=[{langs}], mode={self._redirect_mode.name})"
        )

    def redirect(self, redirect_mode: RedirectMode) -> LanguageIdentifierExtractor:
        """Return a copy using ``redirect_mode``."""
        return self._with(_redirect_mode=RedirectMode(redirect_mode))

    def excluded_paths(self, paths_to_exclude: Iterable[str]) -> LanguageIdentifierExtractor:
        """Return a copy that never redirects paths starting with one of these prefixes."""
        return self._with(_excluded_paths=tuple(str(p) for p in paths_to_exclude))

    def redirect_default_as_301(self) -> LanguageIdentifierExtractor:
        """Return a copy that redirects ``/`` to the default language permanently."""
        return self._with(_redirect_default_as_301=True)

    def supported(self, ident: LanguageIdentifier) -> bool:
        """Whether ``ident``'s language is supported; an empty list supports all."""
        return not self._supported_langs or any(
            lang.matches_language(ident) for lang in self._supported_langs
        )

    def lang_code_from_uri(self, path: str) -> LanguageIdentifier | None:
        """Return the supported language in the first path segment, if any."""
        segments = urlsplit(path).path.split("/")
        if len(segments) < 2:
            return None
        ident = _try_parse(segments[1])
        if ident is not None and self.supported(ident):
            return ident
        return None

    def lang_code_from_headers(
        self, headers: Mapping[Any, Any] | Iterable[tuple[Any, Any]]
    ) -> LanguageIdentifier | None:
        """Return the first supported language from the Accept-Language header."""
        accept_lang = _accept_language(headers)
        if accept_lang is None:
            return None

        whole = _try_parse(accept_lang)
        if whole is not None and self.supported(whole):
            return whole

        for part in filter(None, accept_lang.split(",")):
            ident = _try_parse(part.split(";", 1)[0])
            if ident is not None and self.supported(ident):
                return ident
        return None

    def _lang_code(self, ident: LanguageIdentifier) -> str:
        if self._redirect_mode is RedirectMode.REDIRECT_TO_FULL_LOCALE_SUB_PATH:
            return str(ident)
        if self._redirect_mode is RedirectMode.REDIRECT_TO_LANGUAGE_SUB_PATH:
            return ident.language or "und"
        raise ValueError("no language sub-path is used when redirects are disabled")

    def rewrite_uri(self, uri: str, ident: LanguageIdentifier) -> str:
        """Return ``uri`` with its language sub-path removed."""
        return uri.replace(f"/{self._lang_code(ident)}/", "/", 1)

    def build_redirect_path(
        self,
        path: str,
        query: str | None,
        headers: Mapping[Any, Any] | Iterable[tuple[Any, Any]],
    ) -> tuple[str, LanguageIdentifier]:
        """Return the localized redirect target and the language chosen for it."""
        ident = self.lang_code_from_headers(headers)
        if ident is None:
            ident = self._default_lang
        new_path = f"/{self._lang_code(ident)}{path}"
        if query:
            new_path += f"?{query}"
        return new_path, ident

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope.get("type") != "http":
            await self.inner(scope, receive, send)
            return

        path = scope.get("path", "/")
        headers = scope.get("headers", ())

        if self._redirect_mode is RedirectMode.NO_REDIRECT:
            ident = self.lang_code_from_headers(headers)
            if ident is None:
                ident = self._default_lang
            await self.inner({**scope, LANGUAGE_IDENTIFIER_SCOPE_KEY: ident}, receive, send)
            return

        ident = self.lang_code_from_uri(path)
        if ident is not None:
            scope = {
                **scope,
                LANGUAGE_IDENTIFIER_SCOPE_KEY: ident,
                "path": self.rewrite_uri(path, ident),
            }
            raw_path = scope.get("raw_path")
            if raw_path is not None:
                scope["raw_path"] = self.rewrite_uri(
                    raw_path.decode("latin-1"), ident
                ).encode("latin-1")
            await self.inner(scope, receive, send)
            return

        if any(path.startswith(excluded) for excluded in self._excluded_paths):
            await self.inner(scope, receive, send)
            return

        raw_path = scope.get("raw_path")
        location_path = raw_path.decode("latin-1") if raw_path else quote(path)
        query = scope.get("query_string", b"").decode("latin-1") or None
        new_path, ident = self.build_redirect_path(location_path, query, headers)

        permanent = (
            self._redirect_default_as_301
            and path == "/"
            and ident.matches_language(self._default_lang)
        )
        await send(
            {
                "type": "http.response.start",
                "status": 301 if permanent else 302,
                "headers": [
                    (b"location", new_path.encode("latin-1")),
                    (b"content-length", b"0"),
                ],
            }
        )
        await send({"type": "http.response.body", "body": b""})


class LanguageIdentifierExtractorLayer(_RedirectSettings):
    """Settings that wrap ASGI applications in a LanguageIdentifierExtractor."""

    def __init__(
        self,
        default_lang: LanguageIdentifier | str,
        supported_langs: Iterable[LanguageIdentifier | str],
        redirect_mode: RedirectMode,
    ) -> None:
        self._default_lang = _as_identifier(default_lang)
        self._supported_langs = tuple(_as_identifier(lang) for lang in supported_langs)
        self._redirect_mode = RedirectMode(redirect_mode)
        self._excluded_paths = ()
        self._redirect_default_as_301 = False

    def redirect(self, redirect_mode: RedirectMode) -> LanguageIdentifierExtractorLayer:
        """Return a copy using ``redirect_mode``."""
        return self._with(_redirect_mode=RedirectMode(redirect_mode))

    def excluded_paths(
        self, paths_to_exclude: Iterable[str]
    ) -> LanguageIdentifierExtractorLayer:
        """Return a copy that never redirects paths starting with one of these prefixes."""
        return self._with(_excluded_paths=tuple(str(p) for p in paths_to_exclude))

    def redirect_default_as_301(self) -> LanguageIdentifierExtractorLayer:
        """Return a copy that redirects ``/`` to the default language permanently."""
        return self._with(_redirect_default_as_301=True)

    def layer(self, inner: ASGIApp) -> LanguageIdentifierExtractor:
        """Wrap ``inner`` in a middleware carrying these settings."""
        extractor = LanguageIdentifierExtractor(inner, self._supported_langs, self._default_lang)
        return extractor._with(
            _redirect_mode=self._redirect_mode,
            _excluded_paths=self._excluded_paths,
            _redirect_default_as_301=self._redirect_default_as_301,
        )