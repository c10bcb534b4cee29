"""Exceptions raised by the sentiment pipeline."""


class AustenSentimentError(Exception):
    """Base class for pipeline errors."""


class InvalidConfiguration(AustenSentimentError, ValueError):
    """A configuration value (e.g. window size) is out of range."""


class LexiconNotFound(AustenSentimentError, LookupError):
    """A named lexicon is unknown or its source file is missing."""


class MalformedToken(AustenSentimentError, ValueError):
    """A token cannot be joined against a lexicon."""
