"""Errors raised while determining the language of a request."""


class LanguageIdentifierExtractorError(Exception):
    """Raised when no language identifier can be taken from a request."""

    MESSAGE = "Failed to extract language identifier from request."

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)

    def __repr__(self) -> str:
        return self.MESSAGE