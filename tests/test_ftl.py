import pytest

from l10nkit.ftl import (
    FluentBundle,
    FluentNumber,
    FluentParseError,
    NumberOptions,
    parse_resource,
)


def _bundle(text, locale="en", **kwargs):
    bundle = FluentBundle([locale], **kwargs)
    bundle.add_resource_overriding(parse_resource(text))
    return bundle


def _format(bundle, key, args=None):
    return bundle.format_pattern(bundle.get_message(key).value, args)


def test_simple_message():
    bundle = _bundle("hello = Hello World\n")
    assert _format(bundle, "hello") == ("Hello World", [])


def test_variable_is_isolated():
    bundle = _bundle("test-name = Peg { $name }\n")
    text, errors = _format(bundle, "test-name", {"name": "Deadpool"})
    assert text == "Peg \u2068Deadpool\u2069"
    assert errors == []


def test_no_isolation_when_disabled():
    bundle = _bundle("greet = Hi { $name }!\n", use_isolating=False)
    assert _format(bundle, "greet", {"name": "Ann"})[0] == "Hi Ann!"


def test_missing_variable_reports_error():
    bundle = _bundle("greet = Hi { $who }\n", use_isolating=False)
    text, errors = _format(bundle, "greet")
    assert text == "Hi {$who}"
    assert len(errors) == 1


def test_multiline_is_dedented():
    bundle = _bundle("key =\n    Line one\n    Line two\n")
    assert _format(bundle, "key")[0] == "Line one\nLine two"


def test_attributes_are_parsed():
    resource = parse_resource("btn = Button\n    .title = Click me\n")
    message = resource.messages["btn"]
    assert message.get_attribute("missing") is None
    bundle = FluentBundle(["en"])
    bundle.add_resource_overriding(resource)
    assert bundle.format_pattern(message.get_attribute("title"))[0] == "Click me"


def test_message_without_value_but_attribute():
    resource = parse_resource("only-attr =\n    .a = A\n")
    assert resource.messages["only-attr"].value is None


def test_select_plural():
    text = "items = { $n ->\n    [one] one item\n   *[other] many items\n}\n"
    bundle = _bundle(text)
    assert _format(bundle, "items", {"n": 1})[0] == "one item"
    assert _format(bundle, "items", {"n": 5})[0] == "many items"


def test_select_exact_number_and_string():
    text = "s = { $v ->\n    [0] zero\n    [a] letter\n   *[other] else\n}\n"
    bundle = _bundle(text)
    assert _format(bundle, "s", {"v": 0})[0] == "zero"
    assert _format(bundle, "s", {"v": "a"})[0] == "letter"


def test_term_and_message_reference():
    bundle = _bundle("-brand = Acme\nabout = About { -brand }\nref = { about }!\n")
    assert _format(bundle, "about")[0] == "About Acme"
    assert _format(bundle, "ref")[0] == "About Acme!"


def test_string_literal_escape():
    bundle = _bundle('q = { "a\\"b" }\n')
    assert _format(bundle, "q")[0] == 'a"b'


def test_later_resource_overrides():
    bundle = _bundle("k = first\n")
    bundle.add_resource_overriding(parse_resource("k = second\n"))
    assert _format(bundle, "k")[0] == "second"


def test_custom_function():
    bundle = _bundle("u = { UPPER($x) }\n", use_isolating=False)
    bundle.add_function("UPPER", lambda pos, named: str(pos[0]).upper())
    assert _format(bundle, "u", {"x": "abc"})[0] == "ABC"


def test_unknown_message_reference():
    bundle = _bundle("r = { nothing }\n")
    text, errors = _format(bundle, "r")
    assert text == "{nothing}"
    assert errors


def test_comments_are_ignored():
    resource = parse_resource("# a comment\n## group\nk = v\n")
    assert list(resource.messages) == ["k"]


@pytest.mark.parametrize("text", ["= no id\n", "k = { unclosed\n", "k = a }\n", "-t =\n"])
def test_parse_errors(text):
    with pytest.raises(FluentParseError) as info:
        parse_resource(text)
    assert info.value.errors


def test_number_formatting():
    assert FluentNumber(2.0).format() == "2"
    opts = NumberOptions(minimum_fraction_digits=2)
    assert FluentNumber(2.0, opts).format() == "2.00"


def test_number_equality_includes_options():
    assert FluentNumber(2.0) == FluentNumber(2.0, NumberOptions())
    assert FluentNumber(2.0) != FluentNumber(2.0, NumberOptions(minimum_fraction_digits=1))