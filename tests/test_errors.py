from l10nkit.errors import LanguageIdentifierExtractorError

MESSAGE = "Failed to extract language identifier from request."


def test_message_text():
    err = LanguageIdentifierExtractorError()
    assert str(err) == MESSAGE


def test_repr_matches_message():
    err = LanguageIdentifierExtractorError()
    assert repr(err) == str(err)


def test_message_used_in_formatting():
    err = LanguageIdentifierExtractorError()
    assert f"error: {err}" == f"error: {MESSAGE}"