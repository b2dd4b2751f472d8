"""Keyword and pattern tables for Switchboard analyzers."""

from switchboard.lexicon.tables import DEFAULT_LEXICON, LEXICON_VERSION, Lexicon, get_lexicon

__all__ = [
    "LEXICON_VERSION",
    "Lexicon",
    "DEFAULT_LEXICON",
    "get_lexicon",
]
