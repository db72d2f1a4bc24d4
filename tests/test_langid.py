import pytest

from l10nkit.langid import LanguageIdentifier, parse_language_identifier


def test_parse_language_and_region():
    ident = parse_language_identifier("en-US")
    assert ident.language == "en"
    assert ident.region == "US"
    assert ident.script is None
    assert str(ident) == "en-US"


def test_parse_normalises_case_and_separator():
    assert str(parse_language_identifier("EN_us")) == "en-US"


def test_parse_script_and_region():
    assert str(parse_language_identifier("zh-hant-tw")) == "zh-Hant-TW"


def test_undetermined_language():
    ident = parse_language_identifier("und")
    assert ident.language is None
    assert str(ident) == "und"


def test_classmethod_parse_equals_function():
    assert LanguageIdentifier.parse("ja-JP") == parse_language_identifier("ja-JP")


@pytest.mark.parametrize(
    "text",
    ["en", "ja", "en-US", "sr-Latn-RS", "de-CH-1996", "es-419", "en-US-posix-valencia"],
)
def test_round_trip(text):
    ident = parse_language_identifier(text)
    assert parse_language_identifier(str(ident)) == ident


def test_variants_are_sorted_and_unique():
    ident = parse_language_identifier("en-valencia-posix-valencia")
    assert ident.variants == tuple(sorted(set(ident.variants)))
    assert len(ident.variants) == 2


@pytest.mark.parametrize("text", ["", "*", "en-", "abcd", "en US", "e", "en-US-x", "en;q=0.5"])
def test_invalid_identifiers_raise(text):
    with pytest.raises(ValueError):
        parse_language_identifier(text)


def test_matches_language():
    en = parse_language_identifier("en")
    en_us = parse_language_identifier("en-US")
    ja = parse_language_identifier("ja")
    assert en.matches_language(en_us)
    assert en_us.matches_language(en)
    assert not en.matches_language(ja)


def test_full_identifiers_differ_when_region_differs():
    assert parse_language_identifier("en") != parse_language_identifier("en-US")