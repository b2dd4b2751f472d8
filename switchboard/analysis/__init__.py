"""Message analyzers: ambiguity, complexity, context and nudges."""

from switchboard.analysis.ambiguity import AmbiguityAnalyzer
from switchboard.analysis.complexity import ComplexityAnalyzer
from switchboard.analysis.context import ContextAnalyzer
from switchboard.analysis.nudge import NudgeDetector
from switchboard.analysis.text import KeywordMatcher, normalize, tokenize

__all__ = [
    "AmbiguityAnalyzer",
    "ComplexityAnalyzer",
    "ContextAnalyzer",
    "NudgeDetector",
    "KeywordMatcher",
    "normalize",
    "tokenize",
]
