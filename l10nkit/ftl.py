"""A parser and formatter for Fluent (FTL) translation resources."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

_IDENTIFIER = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")
_NAMED_ARGUMENT = re.compile(r"([a-zA-Z][a-zA-Z0-9_-]*)[ \n]*:[ \n]*")
_NUMBER = re.compile(r"-?[0-9]+(?:\.([0-9]+))?")
_STRING = re.compile(r'"((?:[^"\\\n]|\\(?:["\\]|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{6}))*)"')
_ESCAPE = re.compile(r'\\(?:(["\\])|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{6}))')
_SPECIAL_LINE_START = ".[*}"
_MAX_DEPTH = 64
_FSI, _PDI = "\u2068", "\u2069"
_NO_PLURAL_LANGUAGES = frozenset({"ja", "zh", "ko", "th", "vi"})


@dataclass(frozen=True)
class NumberOptions:
    """Options controlling how numbers are turned into text."""

    minimum_integer_digits: int | None = None
    minimum_fraction_digits: int | None = None
    maximum_fraction_digits: int | None = None


@dataclass(frozen=True)
class FluentNumber:
    """A number together with the options used to format it."""

    value: float
    options: NumberOptions = field(default_factory=NumberOptions)

    def format(self) -> str:
        """Return the number as text, honouring its options."""
        value, opts = float(self.value), self.options
        if opts.maximum_fraction_digits is not None:
            text = f"{value:.{opts.maximum_fraction_digits}f}"
            if "." in text:
                text = text.rstrip("0").rstrip(".")
        else:
            text = str(int(value)) if value.is_integer() else repr(value)
        if opts.minimum_fraction_digits:
            int_part, _, frac = text.partition(".")
            text = f"{int_part}.{frac.ljust(opts.minimum_fraction_digits, '0')}"
        if opts.minimum_integer_digits:
            sign = "-" if text.startswith("-") else ""
            int_part, dot, frac = text.lstrip("-").partition(".")
            text = f"{sign}{int_part.zfill(opts.minimum_integer_digits)}{dot}{frac}"
        return text


@dataclass(frozen=True)
class _Str:
    value: str


@dataclass(frozen=True)
class _Num:
    value: FluentNumber


@dataclass(frozen=True)
class _Var:
    name: str


@dataclass(frozen=True)
class _Ref:
    id: str
    attribute: str | None
    term: bool
    named: tuple


@dataclass(frozen=True)
class _Call:
    name: str
    positional: tuple
    named: tuple


@dataclass(frozen=True)
class _Select:
    selector: Any
    variants: tuple  # of (key, pattern)
    default: int


@dataclass(frozen=True)
class _Indent:
    width: int


Pattern = tuple


@dataclass
class Message:
    """A message or term: an optional value and named attributes."""

    id: str
    value: Pattern | None
    attributes: dict[str, Pattern] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Pattern | None:
        """Return the pattern of attribute ``name``, or None."""
        return self.attributes.get(name)


@dataclass
class FluentResource:
    """The messages and terms of one parsed FTL source."""

    messages: dict[str, Message] = field(default_factory=dict)
    terms: dict[str, Message] = field(default_factory=dict)


class FluentParseError(ValueError):
    """Raised when FTL text contains entries that cannot be parsed."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class _SyntaxError(Exception):
    pass


def _unescape(match: re.Match) -> str:
    if match.group(1):
        return match.group(1)
    code = int(match.group(2) or match.group(3), 16)
    return chr(code) if code <= 0x10FFFF else "\ufffd"


class _Parser:
    def __init__(self, text: str) -> None:
        self.src = text
        self.pos = 0

    def _peek(self, offset: int = 0) -> str | None:
        index = self.pos + offset
        return self.src[index] if index < len(self.src) else None

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise _SyntaxError(f"expected {char!r} at offset {self.pos}")
        self.pos += 1

    def _blank_inline(self) -> None:
        while self._peek() == " ":
            self.pos += 1

    def _blank(self) -> None:
        while self._peek() in (" ", "\n"):
            self.pos += 1

    def _identifier(self) -> str:
        match = _IDENTIFIER.match(self.src, self.pos)
        if not match:
            raise _SyntaxError(f"expected an identifier at offset {self.pos}")
        self.pos = match.end()
        return match.group()

    def _end_of_line(self) -> int:
        end = self.src.find("\n", self.pos)
        return len(self.src) if end == -1 else end

    def _skip_line(self) -> None:
        self.pos = min(self._end_of_line() + 1, len(self.src))

    def parse(self) -> FluentResource:
        resource = FluentResource()
        errors: list[str] = []
        while self.pos < len(self.src):
            c = self.src[self.pos]
            if c == "#" or not self.src[self.pos:self._end_of_line()].strip(" "):
                self._skip_line()
                continue
            line = self.src.count("\n", 0, self.pos) + 1
            try:
                is_term = c == "-"
                if not (is_term or (c.isascii() and c.isalpha())):
                    raise _SyntaxError("expected a message, term or comment")
                self.pos += is_term
                entry = self._entry(is_term)
                (resource.terms if is_term else resource.messages)[entry.id] = entry
                if self._peek() not in (None, "\n"):
                    raise _SyntaxError(f"unexpected character {self._peek()!r}")
            except _SyntaxError as err:
                errors.append(f"line {line}: {err}")
                self._skip_junk()
        if errors:
            raise FluentParseError(errors)
        return resource

    def _skip_junk(self) -> None:
        while True:
            self._skip_line()
            c = self._peek()
            if c is None or c in "#-" or (c.isascii() and c.isalpha()):
                return

    def _entry(self, is_term: bool) -> Message:
        ident = self._identifier()
        self._blank_inline()
        self._expect("=")
        self._blank_inline()
        value = self._pattern()
        attributes = self._attributes()
        if is_term and value is None:
            raise _SyntaxError(f"term -{ident} has no value")
        if value is None and not attributes:
            raise _SyntaxError(f"message {ident} has neither value nor attributes")
        return Message(ident, value, attributes)

    def _attributes(self) -> dict[str, Pattern]:
        attributes: dict[str, Pattern] = {}
        while self._peek() == "\n":
            j = self.pos
            while j < len(self.src) and self.src[j] in " \n":
                j += 1
            if j >= len(self.src) or self.src[j] != "." or self.src[j - 1] != " ":
                break
            self.pos = j + 1
            name = self._identifier()
            self._blank_inline()
            self._expect("=")
            self._blank_inline()
            pattern = self._pattern()
            if pattern is None:
                raise _SyntaxError(f"attribute .{name} has no value")
            attributes[name] = pattern
        return attributes

    def _continuation(self) -> tuple[int, int] | None:
        """Move to the next indented line of a pattern; return (newlines, indent)."""
        src, n = self.src, len(self.src)
        i, newlines = self.pos, 0
        while i < n and src[i] == "\n":
            newlines += 1
            j = i + 1
            while j < n and src[j] == " ":
                j += 1
            if j >= n:
                return None
            if src[j] == "\n":
                i = j
                continue
            indent = j - (i + 1)
            if indent == 0 or src[j] in _SPECIAL_LINE_START:
                return None
            self.pos = j
            return newlines, indent
        return None

    def _pattern(self) -> Pattern | None:
        raw: list[Any] = []
        start = self.pos
        if self._peek() == "\n":
            cont = self._continuation()
            if cont is None:
                return None
            raw.append(_Indent(cont[1]))
            start = self.pos
        while True:
            c = self._peek()
            if c in (None, "\n", "{"):
                raw.append(self.src[start:self.pos])
            if c is None:
                break
            if c == "\n":
                cont = self._continuation()
                if cont is None:
                    break
                raw += ["\n" * cont[0], _Indent(cont[1])]
            elif c == "{":
                raw.append(self._placeable())
            elif c == "}":
                raise _SyntaxError(f"unbalanced closing brace at offset {self.pos}")
            else:
                self.pos += 1
                continue
            start = self.pos
        return _finish_pattern(raw)

    def _placeable(self) -> Any:
        self._expect("{")
        self._blank()
        expression = self._inline()
        self._blank()
        if self.src.startswith("->", self.pos):
            self.pos += 2
            expression = self._select(expression)
        self._blank()
        self._expect("}")
        return expression

    def _select(self, selector: Any) -> _Select:
        self._blank()
        variants: list[tuple] = []
        default: int | None = None
        while self._peek() in ("[", "*"):
            if self._peek() == "*":
                if default is not None:
                    raise _SyntaxError("more than one default variant")
                default = len(variants)
                self.pos += 1
            self._expect("[")
            self._blank()
            c = self._peek()
            is_number = c is not None and (c.isdigit() or c == "-")
            key: Union[str, float] = self._number().value.value if is_number else self._identifier()
            self._blank()
            self._expect("]")
            self._blank_inline()
            pattern = self._pattern()
            if pattern is None:
                raise _SyntaxError("variant has no value")
            variants.append((key, pattern))
            self._blank()
        if default is None:
            raise _SyntaxError("select expression has no default variant")
        return _Select(selector, tuple(variants), default)

    def _inline(self) -> Any:
        c = self._peek()
        if c == '"':
            return self._string()
        if c is not None and (c.isdigit() or (c == "-" and (self._peek(1) or "").isdigit())):
            return self._number()
        if c == "$":
            self.pos += 1
            return _Var(self._identifier())
        if c == "{":
            return self._placeable()
        is_term = c == "-"
        self.pos += is_term
        ident = self._identifier()
        if not is_term and self._peek() == "(":
            return _Call(ident, *self._call_arguments())
        attribute = None
        if self._peek() == ".":
            self.pos += 1
            attribute = self._identifier()
        named = self._call_arguments()[1] if is_term and self._peek() == "(" else ()
        return _Ref(ident, attribute, is_term, named)

    def _string(self) -> _Str:
        match = _STRING.match(self.src, self.pos)
        if not match:
            raise _SyntaxError(f"invalid string literal at offset {self.pos}")
        self.pos = match.end()
        return _Str(_ESCAPE.sub(_unescape, match.group(1)))

    def _number(self) -> _Num:
        match = _NUMBER.match(self.src, self.pos)
        if not match:
            raise _SyntaxError(f"expected a number at offset {self.pos}")
        self.pos = match.end()
        fraction = match.group(1)
        options = NumberOptions(minimum_fraction_digits=len(fraction) if fraction else None)
        return _Num(FluentNumber(float(match.group()), options))

    def _call_arguments(self) -> tuple[tuple, tuple]:
        self._expect("(")
        self._blank()
        positional: list[Any] = []
        named: dict[str, Any] = {}
        while self._peek() != ")":
            match = _NAMED_ARGUMENT.match(self.src, self.pos)
            if match:
                self.pos = match.end()
                value = self._string() if self._peek() == '"' else self._number()
                named[match.group(1)] = value
            else:
                positional.append(self._inline())
            self._blank()
            if self._peek() == ",":
                self.pos += 1
                self._blank()
            elif self._peek() != ")":
                raise _SyntaxError("expected ',' or ')' in call arguments")
        self.pos += 1
        return tuple(positional), tuple(named.items())


def _finish_pattern(raw: list[Any]) -> Pattern | None:
    common = min((x.width for x in raw if isinstance(x, _Indent)), default=0)
    elements: list[Any] = []
    for item in raw:
        if isinstance(item, _Indent):
            item = " " * (item.width - common)
        if isinstance(item, str) and elements and isinstance(elements[-1], str):
            elements[-1] += item
        elif item != "":
            elements.append(item)
    if elements and isinstance(elements[-1], str):
        elements[-1] = elements[-1].rstrip(" \n")
        if not elements[-1]:
            elements.pop()
    return tuple(elements) or None


def parse_resource(text: str) -> FluentResource:
    """Parse FTL text, raising FluentParseError if any entry is invalid."""
    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    return _Parser(text).parse()


@dataclass(frozen=True)
class _Fallback:
    text: str


def _to_fluent(value: Any) -> Any:
    if value is None or isinstance(value, (str, FluentNumber, _Fallback)):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return FluentNumber(float(value))
    return str(value)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, FluentNumber):
        return value.format()
    if isinstance(value, _Fallback):
        return value.text
    return str(value)


class FluentBundle:
    """A set of messages for one locale, able to format their patterns."""

    def __init__(self, locales: Iterable[Any], use_isolating: bool = True) -> None:
        self.locales = list(locales)
        self.use_isolating = use_isolating
        self.messages: dict[str, Message] = {}
        self.terms: dict[str, Message] = {}
        self.functions: dict[str, Callable[[list, dict], Any]] = {}

    def add_resource_overriding(self, resource: FluentResource) -> None:
        """Add all entries of ``resource``, replacing entries with the same id."""
        self.messages.update(resource.messages)
        self.terms.update(resource.terms)

    def get_message(self, key: str) -> Message | None:
        return self.messages.get(key)

    def add_function(self, name: str, function: Callable[[list, dict], Any]) -> None:
        """Register ``function(positional, named)`` under ``name``."""
        self.functions[name] = function

    def format_pattern(
        self, pattern: Pattern, args: Mapping[str, Any] | None = None
    ) -> tuple[str, list[str]]:
        """Format ``pattern``; return the text and any errors met on the way."""
        scope = _Scope(self, dict(args or {}))
        return scope.pattern(pattern), scope.errors

    def _plural_category(self, number: FluentNumber) -> str:
        if not self.locales:
            language = ""
        else:
            locale = self.locales[0]
            language = getattr(locale, "language", None) or str(locale).split("-")[0]
        value = float(number.value)
        if language.lower() in _NO_PLURAL_LANGUAGES:
            return "other"
        shows_fraction = bool(number.options.minimum_fraction_digits) or not value.is_integer()
        return "one" if value == 1 and not shows_fraction else "other"


class _Scope:
    def __init__(self, bundle: FluentBundle, args: dict[str, Any]) -> None:
        self.bundle = bundle
        self.args = args
        self.local_args: dict[str, Any] | None = None
        self.errors: list[str] = []
        self.depth = 0

    def pattern(self, pattern: Pattern) -> str:
        parts: list[str] = []
        for element in pattern:
            if isinstance(element, str):
                parts.append(element)
                continue
            text = _to_text(self.expression(element))
            isolate = (
                self.bundle.use_isolating
                and len(pattern) > 1
                and not isinstance(element, (_Ref, _Str))
            )
            parts.append(f"{_FSI}{text}{_PDI}" if isolate else text)
        return "".join(parts)

    def expression(self, expr: Any) -> Any:
        if isinstance(expr, (_Str, _Num)):
            return expr.value
        if isinstance(expr, _Var):
            source = self.local_args if self.local_args is not None else self.args
            if expr.name in source:
                return _to_fluent(source[expr.name])
            if self.local_args is None:
                self.errors.append(f"Unknown variable: ${expr.name}")
            return _Fallback(f"{{${expr.name}}}")
        if isinstance(expr, _Ref):
            return self._reference(expr)
        if isinstance(expr, _Call):
            return self._call(expr)
        return self._select(expr)

    def _reference(self, ref: _Ref) -> Any:
        prefix = "-" if ref.term else ""
        name = f"{prefix}{ref.id}" + (f".{ref.attribute}" if ref.attribute else "")
        fallback = _Fallback(f"{{{name}}}")
        entry = (self.bundle.terms if ref.term else self.bundle.messages).get(ref.id)
        if entry is None:
            kind = "term" if ref.term else "message"
            self.errors.append(f"Unknown {kind}: {prefix}{ref.id}")
            return fallback
        pattern = entry.get_attribute(ref.attribute) if ref.attribute else entry.value
        if pattern is None:
            self.errors.append(f"No value: {name}")
            return fallback
        if self.depth >= _MAX_DEPTH:
            self.errors.append(f"Cyclic reference: {name}")
            return fallback
        saved_local = self.local_args
        if ref.term:
            self.local_args = {key: self.expression(value) for key, value in ref.named}
        self.depth += 1
        try:
            return self.pattern(pattern)
        finally:
            self.depth -= 1
            self.local_args = saved_local

    def _call(self, expr: _Call) -> Any:
        function = self.bundle.functions.get(expr.name)
        if function is None:
            self.errors.append(f"Unknown function: {expr.name}()")
            return _Fallback(f"{{{expr.name}()}}")
        positional = [self.expression(arg) for arg in expr.positional]
        named = {key: self.expression(value) for key, value in expr.named}
        return _to_fluent(function(positional, named))

    def _select(self, expr: _Select) -> str:
        selector = self.expression(expr.selector)
        for key, pattern in expr.variants:
            if isinstance(key, float):
                matched = isinstance(selector, FluentNumber) and float(selector.value) == key
            elif isinstance(selector, FluentNumber):
                matched = self.bundle._plural_category(selector) == key
            else:
                matched = isinstance(selector, str) and selector == key
            if matched:
                return self.pattern(pattern)
        return self.pattern(expr.variants[expr.default][1])