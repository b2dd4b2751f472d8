"""Tests for the vocabulary tables."""

from __future__ import annotations

import pytest

from switchboard.analysis.text import KeywordMatcher, normalize, tokenize
from switchboard.lexicon import DEFAULT_LEXICON, LEXICON_VERSION, Lexicon, get_lexicon
from switchboard.schemas import Intent, NudgeType


class TestDefaultLexicon:
    """Consistency of the built-in tables."""

    def test_shared_instance(self):
        assert get_lexicon() is DEFAULT_LEXICON
        assert DEFAULT_LEXICON.version == LEXICON_VERSION

    def test_intent_lists_disjoint(self):
        seen = {}
        for intent, terms in DEFAULT_LEXICON.intent_terms.items():
            for term in terms:
                assert seen.setdefault(term, intent) == intent

    def test_scored_intents(self):
        assert Intent.QUICK not in DEFAULT_LEXICON.scored_intents
        assert set(DEFAULT_LEXICON.scored_intents) == set(Intent) - {Intent.QUICK}

    def test_personal_weighs_most(self):
        weights = DEFAULT_LEXICON.intent_weights
        assert weights[Intent.PERSONAL] == max(weights.values())

    def test_ambiguous_terms_have_two_to_four_meanings(self):
        for meanings in DEFAULT_LEXICON.ambiguous_terms.values():
            assert 2 <= len(meanings) <= 4

    def test_every_nudge_has_pattern_and_text(self):
        for nudge in NudgeType:
            assert nudge in DEFAULT_LEXICON.nudge_patterns
            assert DEFAULT_LEXICON.nudge_texts[nudge]

    def test_tables_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_LEXICON.ambiguous_terms["new"] = ("a", "b")


class TestLexiconValidation:
    """Custom lexicons are validated on construction."""

    def test_overlapping_terms_rejected(self):
        terms = dict(DEFAULT_LEXICON.intent_terms)
        terms[Intent.LEARNING] = terms[Intent.LEARNING] + ("docker",)
        with pytest.raises(ValueError, match="docker"):
            Lexicon(intent_terms=terms)

    def test_missing_weight_rejected(self):
        weights = dict(DEFAULT_LEXICON.intent_weights)
        del weights[Intent.CREATIVE]
        with pytest.raises(ValueError, match="CREATIVE"):
            Lexicon(intent_weights=weights)

    def test_single_meaning_rejected(self):
        with pytest.raises(ValueError, match="2-4 meanings"):
            Lexicon(ambiguous_terms={"rust": ("Rust language",)})

    def test_missing_nudge_rejected(self):
        patterns = dict(DEFAULT_LEXICON.nudge_patterns)
        del patterns[NudgeType.ACTION]
        with pytest.raises(ValueError, match="ACTION"):
            Lexicon(nudge_patterns=patterns)

    def test_custom_ambiguous_terms(self):
        lexicon = Lexicon(ambiguous_terms={"rust": ("Rust language", "Iron oxide")})
        assert "rust" in lexicon.ambiguous_terms
        assert "python" not in lexicon.ambiguous_terms


class TestTextHelpers:
    """Tests for normalisation and keyword matching."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  hello   world \n", "hello world"),
            ("kya hal hai।", "kya hal hai."),
            ("done॥", "done."),
            (None, ""),
            (12, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize(raw) == expected

    def test_tokenize(self):
        assert tokenize("I'm OK, thanks!") == ["i'm", "ok", "thanks"]

    def test_matcher_plurals_and_phrases(self):
        matcher = KeywordMatcher(["bug", "system design", "competitor"])
        assert matcher.matches("Two BUGS in the System Design of our competitors") == [
            "bug",
            "system design",
            "competitor",
        ]
        assert len(matcher) == 3

    def test_matcher_word_boundaries(self):
        matcher = KeywordMatcher(["api"])
        assert matcher.matches("capital") == []
        assert matcher.any("an api call") is True
        assert matcher.any("") is False
