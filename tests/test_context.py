"""Tests for follow-up detection, topic inference and action suggestion.

Test Coverage:
- Follow-up patterns in English and Hinglish
- Topic detection over the trailing history window
- Keyword extraction with stop words removed
- Suggested action precedence
"""

from __future__ import annotations

import pytest

from switchboard.analysis.context import CONTEXT_QUESTION, GENERIC_CLARIFICATION, ContextAnalyzer
from switchboard.schemas import (
    AmbiguityDescriptor,
    AmbiguityLevel,
    ContextDescriptor,
    HistoryTurn,
    Intent,
    Role,
    SuggestedAction,
)


@pytest.fixture
def analyzer():
    return ContextAnalyzer()


def turns(*texts):
    return tuple(HistoryTurn(role=Role.USER, text=text) for text in texts)


class TestFollowUp:
    """Tests for is_follow_up."""

    @pytest.mark.parametrize(
        "message",
        ["aur batao", "that one please", "why?", "how", "continue", "same as before", "ok so what now"],
    )
    def test_follow_ups(self, analyzer, message):
        assert analyzer.is_follow_up(message) is True

    @pytest.mark.parametrize("message", ["", "Tell me about Rust", "Why is the sky blue"])
    def test_not_follow_ups(self, analyzer, message):
        assert analyzer.is_follow_up(message) is False


class TestTopicDetection:
    """Tests for detect_topic."""

    def test_no_history(self, analyzer):
        assert analyzer.detect_topic(()) is None

    def test_no_matching_terms(self, analyzer):
        assert analyzer.detect_topic(turns("hello there", "thanks")) is None

    def test_weighted_topic(self, analyzer):
        history = turns("my docker deploy keeps failing with an error", "write a poem")
        assert analyzer.detect_topic(history) == Intent.TECHNICAL

    def test_window_limits_turns(self):
        """Only the trailing turns are considered."""
        analyzer = ContextAnalyzer(topic_history_turns=1)
        history = turns("my docker deploy keeps failing with an error", "write a poem")
        assert analyzer.detect_topic(history) == Intent.CREATIVE

    def test_zero_window(self):
        analyzer = ContextAnalyzer(topic_history_turns=0)
        assert analyzer.detect_topic(turns("debug my python code")) is None


class TestKeywords:
    """Tests for extract_keywords."""

    def test_stop_words_removed(self, analyzer):
        keywords = analyzer.extract_keywords("What is the best Python framework for web APIs?")
        assert keywords == ("best", "python", "framework", "web", "apis")

    def test_deduplicated_and_capped(self, analyzer):
        message = "alpha beta gamma delta alpha epsilon zeta theta iota kappa lambda omicron"
        keywords = analyzer.extract_keywords(message)
        assert len(keywords) == 10
        assert keywords.count("alpha") == 1

    def test_short_words_dropped(self, analyzer):
        assert analyzer.extract_keywords("go to db") == ()


class TestAnalyze:
    """Tests for analyze."""

    def test_pronoun_requires_context(self, analyzer):
        result = analyzer.analyze("uska price kya hai")
        assert result.is_follow_up is True
        assert result.requires_context is True
        assert result.detected_topic is None

    def test_topic_from_history(self, analyzer):
        result = analyzer.analyze("and the cost?", turns("Our startup growth strategy for next year"))
        assert result.detected_topic == Intent.STRATEGIC

    def test_plain_message(self, analyzer):
        result = analyzer.analyze("Recommend a good sci-fi novel")
        assert result.requires_context is False
        assert result.is_follow_up is False


class TestSuggestAction:
    """Tests for suggest_action precedence."""

    def test_context_checked_before_ambiguity(self, analyzer):
        action = analyzer.suggest_action(
            AmbiguityDescriptor(level=AmbiguityLevel.HIGH, possible_intents=("A", "B")),
            ContextDescriptor(requires_context=True),
            has_history=False,
        )
        assert action.action == SuggestedAction.ASK_FOR_CONTEXT
        assert action.clarification_question == CONTEXT_QUESTION
        assert action.needs_clarification is True

    def test_detected_topic_skips_context_question(self, analyzer):
        action = analyzer.suggest_action(
            AmbiguityDescriptor(level=AmbiguityLevel.HIGH, possible_intents=("A", "B")),
            ContextDescriptor(requires_context=True, detected_topic=Intent.TECHNICAL),
            has_history=False,
        )
        assert action.action == SuggestedAction.ASK_FOR_CLARIFICATION
        assert action.clarification_question == "Did you mean A or B?"

    def test_high_ambiguity_without_candidates(self, analyzer):
        action = analyzer.suggest_action(
            AmbiguityDescriptor(level=AmbiguityLevel.HIGH),
            ContextDescriptor(),
            has_history=True,
        )
        assert action.clarification_question == GENERIC_CLARIFICATION

    def test_medium_proceeds_with_assumption(self, analyzer):
        action = analyzer.suggest_action(
            AmbiguityDescriptor(level=AmbiguityLevel.MEDIUM), ContextDescriptor(), has_history=False
        )
        assert action.action == SuggestedAction.PROCEED_WITH_ASSUMPTION
        assert action.needs_clarification is False

    @pytest.mark.parametrize("level", [AmbiguityLevel.NONE, AmbiguityLevel.LOW])
    def test_low_proceeds(self, analyzer, level):
        action = analyzer.suggest_action(
            AmbiguityDescriptor(level=level), ContextDescriptor(), has_history=False
        )
        assert action.action == SuggestedAction.PROCEED
        assert action.clarification_question is None
