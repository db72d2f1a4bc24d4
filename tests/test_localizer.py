import pytest

from l10nkit.langid import parse_language_identifier
from l10nkit.localizer import Localizer, LocalizerError, MessageAttribute

ENGLISH = parse_language_identifier("en")
JAPANESE = parse_language_identifier("ja")

MAIN_FTL = """test-key-a = Hello World
test-name = Peg { $name }
attribute-test =
    .attribute_a = Hello
"""

SUB_FTL = """sub-key = Sub
"""


@pytest.fixture
def paths(tmp_path):
    main = tmp_path / "main.ftl"
    sub = tmp_path / "sub.ftl"
    main.write_text(MAIN_FTL, encoding="utf-8")
    sub.write_text(SUB_FTL, encoding="utf-8")
    return [main, sub]


@pytest.fixture
def loc(paths):
    localizer = Localizer()
    localizer.add_bundle(ENGLISH, paths)
    localizer.add_bundle(JAPANESE, paths)
    return localizer


def test_can_add_bundles(loc):
    assert set(loc) == {ENGLISH, JAPANESE}


def test_can_get_bundles(loc):
    assert loc.get_locale(ENGLISH).get_message("sub-key").id == "sub-key"


def test_can_get_bundle_on_lang(loc):
    assert loc.get_locale(parse_language_identifier("en-US")) is loc.get_locale(ENGLISH)


def test_missing_locale(loc):
    assert loc.get_locale("de") is None


def test_compiles_with_borrowed_string(loc):
    assert loc.format_message(ENGLISH, str("test-key-a"), None) == "Hello World"


def test_use_attributes(loc):
    message = loc.format_message(ENGLISH, MessageAttribute("attribute-test", "attribute_a"))
    assert message == "Hello"


def test_not_existing_attribute(loc):
    assert loc.format_message(ENGLISH, MessageAttribute("attribute-test", "does_not_exist")) is None


def test_can_format_pattern(loc):
    assert loc.format_message(ENGLISH, "test-key-a") == "Hello World"
    message = loc.format_message(ENGLISH, "test-name", {"name": "Deadpool"})
    assert message == "Peg \u2068Deadpool\u2069"


def test_message_without_value_raises(loc):
    with pytest.raises(LocalizerError, match="does not have a standalone message"):
        loc.format_message_result(ENGLISH, "attribute-test")


def test_unknown_locale_raises(loc):
    with pytest.raises(LocalizerError, match="could not find locale"):
        loc.format_message_result("de", "test-key-a")


def test_later_file_overrides(tmp_path, paths):
    override = tmp_path / "override.ftl"
    override.write_text("test-key-a = Replaced\n", encoding="utf-8")
    localizer = Localizer()
    localizer.add_bundle("en", [*paths, override])
    assert localizer.format_message("en", "test-key-a") == "Replaced"


def test_unreadable_path(tmp_path):
    with pytest.raises(LocalizerError, match="failed to read from path"):
        Localizer().add_bundle("en", [tmp_path / "missing.ftl"])


def test_invalid_ftl(tmp_path):
    bad = tmp_path / "bad.ftl"
    bad.write_text("= broken\n", encoding="utf-8")
    with pytest.raises(LocalizerError, match="failed to parse FTL"):
        Localizer().add_bundle("en", [bad])


def test_error_message_prefix():
    assert str(LocalizerError("boom")) == "Localizer error: boom"


def test_items_and_repr(loc):
    assert dict(loc.items()).keys() == {ENGLISH, JAPANESE}
    assert repr(loc).startswith("Localizer - ")
    assert "ja" in repr(loc)