class WordChainError(Exception):
    """Base class for errors raised by the word chain services."""


class OracleError(WordChainError):
    """The scoring oracle failed or returned something unusable."""
