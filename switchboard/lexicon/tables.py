"""Versioned keyword and pattern tables used by every analyzer.

All the vocabulary the engine reacts to lives here as plain data, so a change
to routing behaviour is a reviewable diff of this file rather than of
classifier control flow. Nothing in this module compiles regexes or keeps
state; analyzers compile what they need once, at construction time.

Key Components:
    LEXICON_VERSION: Version tag carried into logs and decision metadata.
    Lexicon: Frozen container for every table.
    DEFAULT_LEXICON: The built-in tables.
    get_lexicon: Accessor for the process-wide default.

Example:
    >>> lexicon = get_lexicon()
    >>> lexicon.intent_weights[Intent.PERSONAL]
    4
    >>> "python" in lexicon.ambiguous_terms
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from switchboard.schemas import Intent, NudgeType


LEXICON_VERSION = "2.0"


# =============================================================================
# Intent Vocabulary
# =============================================================================

# Terms must not appear under more than one intent.
_INTENT_TERMS: dict[Intent, tuple[str, ...]] = {
    Intent.PERSONAL: (
        "feel", "feeling", "stressed", "stress", "anxious", "anxiety",
        "worried", "lonely", "sad", "depressed", "overwhelmed", "heartbroken",
        "breakup", "relationship", "my life", "my career", "should i",
        "advice", "struggling", "kya karu", "upset", "scared", "hurt", "grief",
    ),
    Intent.TECHNICAL: (
        "code", "coding", "api", "database", "sql", "bug", "debug", "error",
        "exception", "typescript", "javascript", "python", "react", "node",
        "deploy", "deployment", "server", "docker", "kubernetes", "aws", "gcp",
        "azure", "backend", "frontend", "algorithm", "function",
        "system design", "microservice", "git", "latency",
    ),
    Intent.STRATEGIC: (
        "strategy", "strategic", "roadmap", "long term", "long-term",
        "business", "startup", "investment", "invest", "growth", "expansion",
        "revenue", "market", "competitive", "competitor", "positioning",
        "stakeholder", "go-to-market", "gtm", "forecast", "okr", "kpi",
        "business model", "pricing", "fundraising",
    ),
    Intent.CREATIVE: (
        "story", "narrative", "write", "poem", "fiction", "creative", "script",
        "dialogue", "lyrics", "design", "brand", "branding", "logo", "tagline",
        "slogan", "campaign", "ad copy", "brainstorm", "ideate", "imagine",
        "idea",
    ),
    Intent.LEARNING: (
        "explain", "understand", "learn", "teach", "what is", "how does",
        "concept", "basics", "beginner", "tutorial", "samjhao", "batao",
        "definition", "lesson", "study", "exam", "homework",
    ),
    Intent.ANALYTICAL: (
        "analyze", "analyse", "analysis", "evaluate", "assess", "examine",
        "investigate", "research", "review", "why", "reasoning",
        "implications", "consequences", "impact", "cause", "root cause",
        "diagnose", "optimize", "improve", "solve", "troubleshoot", "thorough",
    ),
}

# PERSONAL carries the heaviest weight so emotional messages are never
# outscored by incidental technical or business vocabulary.
_INTENT_WEIGHTS: dict[Intent, int] = {
    Intent.PERSONAL: 4,
    Intent.TECHNICAL: 3,
    Intent.STRATEGIC: 2,
    Intent.CREATIVE: 2,
    Intent.LEARNING: 2,
    Intent.ANALYTICAL: 1,
}

_CROSS_DOMAIN_TERMS: tuple[str, ...] = (
    "compare", "comparison", "versus", "vs", "tradeoff", "trade-off",
    "combine", "architecture", "integrate", "synthesize", "holistic",
    "end-to-end", "full stack", "pros and cons", "build vs buy",
    "scalability", "cost-benefit", "feasibility", "deep dive",
    "from all angles", "cross-functional", "multi-dimensional",
)

_DEPTH_TERMS: tuple[str, ...] = (
    "explain", "why", "how", "analyze", "analyse", "compare", "help me",
    "strategy",
)

_TOOL_TERMS: tuple[str, ...] = (
    "search", "find", "lookup", "look up", "fetch", "calculate", "compute",
    "convert", "translate", "current", "latest", "today", "now", "real-time",
    "weather", "stock", "price", "news",
)

_DATA_CONTEXT_TERMS: tuple[str, ...] = (
    "price", "data", "search", "fetch", "stock", "weather", "news",
)


# =============================================================================
# Ambiguity Vocabulary
# =============================================================================

_AMBIGUOUS_TERMS: dict[str, tuple[str, ...]] = {
    # Tech vs general
    "border": ("CSS border (tech)", "India-Pakistan border (geo)", "Border movie (entertainment)"),
    "python": ("Python language (tech)", "Python snake (animal)"),
    "java": ("Java language (tech)", "Java island (place)", "Java coffee (food)"),
    "apple": ("Apple company (tech)", "Apple fruit (food)"),
    "cell": ("Cell phone (tech)", "Cell biology (science)", "Prison cell (general)"),
    "bug": ("Software bug (tech)", "Insect bug (animal)"),
    "cloud": ("Cloud computing (tech)", "Weather cloud (nature)"),
    "tablet": ("Tablet device (tech)", "Medicine tablet (health)"),
    "mouse": ("Computer mouse (tech)", "Animal mouse (animal)"),
    "virus": ("Computer virus (tech)", "Biological virus (health)"),
    "server": ("Computer server (tech)", "Restaurant server (job)"),
    "cookie": ("Browser cookie (tech)", "Food cookie (food)"),
    "spam": ("Email spam (tech)", "Spam food (food)"),
    "stream": ("Data stream (tech)", "Water stream (nature)", "Streaming video (entertainment)"),
    # Everyday homonyms
    "bank": ("Bank (finance)", "River bank (nature)"),
    "film": ("Movie film (entertainment)", "Plastic film (material)"),
    "light": ("Light (physics)", "Light weight (property)", "Traffic light (object)"),
    "book": ("Book (reading)", "Book ticket (action)"),
    "train": ("Train (vehicle)", "Train/practice (action)"),
    "match": ("Match (sports)", "Match (fire)", "Match (compare)"),
    "plant": ("Plant (nature)", "Factory plant (industry)"),
    "bat": ("Cricket bat (sports)", "Bat animal (animal)"),
    "nail": ("Finger nail (body)", "Metal nail (tool)"),
    "date": ("Calendar date (time)", "Romantic date (relationship)", "Date fruit (food)"),
    "ring": ("Finger ring (jewelry)", "Phone ring (action)", "Boxing ring (sports)"),
    "seal": ("Animal seal (animal)", "Seal/stamp (object)", "Seal/close (action)"),
    "wave": ("Hand wave (action)", "Ocean wave (nature)", "Sound wave (physics)"),
    "trunk": ("Elephant trunk (animal)", "Car trunk (vehicle)", "Tree trunk (nature)"),
    "bark": ("Dog bark (animal)", "Tree bark (nature)"),
    "saw": ("Saw tool (tool)", "Saw/see past tense (action)"),
    # References that need a subject
    "uska": ("Reference to previous topic", "Needs context"),
    "iska": ("Reference to previous topic", "Needs context"),
    "woh": ("Reference to previous topic", "Needs context"),
    "ye": ("Reference to current topic", "Needs context"),
    "kaisa": ("Needs subject", "What or who?"),
    "kab": ("Needs subject", "Which event?"),
    "kahan": ("Needs subject", "Which place?"),
}

_PRONOUNS: frozenset[str] = frozenset({
    "uska", "iska", "uski", "iski", "woh", "ye", "it", "this", "that",
    "they", "those", "these",
})

_PLEASANTRIES: frozenset[str] = frozenset({
    "hi", "hello", "hey", "hola", "namaste", "bye", "goodbye", "alvida",
    "thanks", "thank", "thx", "shukriya", "dhanyavaad", "ok", "okay",
    "theek", "acha", "haan", "yes", "no", "nahi",
})

_VAGUE_QUESTION_PATTERN = r"^(kaisa|kaise|kya|how|what)\s*(hai|hua|hoga|is|was)?\s*\??$"


# =============================================================================
# Complexity Vocabulary
# =============================================================================

_SIMPLE_PATTERNS: tuple[str, ...] = (
    r"^(hi|hello|hey|hola|namaste)\b",
    r"^(thanks|thank you|shukriya|dhanyavaad)\b",
    r"^(ok|okay|theek|acha|haan|nahi|yes|no)\b",
    r"^(bye|goodbye|alvida)\b",
    r"^what is \w+\??$",
    r"^kya hai \w+\??$",
    r"^\w+ kya hai\??$",
)

_COMPLEX_PATTERNS: tuple[str, ...] = (
    r"compare|\bvs\b|versus|difference between",
    r"analy[sz]e|evaluation|assessment",
    r"step.?by.?step|detailed|comprehensive",
    r"multiple|several|various|different ways",
    r"pros and cons|advantages and disadvantages",
    r"trade.?offs?|cost.?benefit",
    r"explain.*how.*and.*why",
    r"code.*with.*example.*and.*explanation",
)

_COMPLEX_KEYWORDS: tuple[str, ...] = (
    "architecture", "implementation", "optimization", "strategy",
    "algorithm", "framework", "integration", "deployment",
    "scalability", "performance", "security", "authentication",
)


# =============================================================================
# Context Vocabulary
# =============================================================================

_FOLLOW_UP_PATTERNS: tuple[str, ...] = (
    r"^(aur|and|also|bhi)\s",
    r"^(uska|iska|uski|iski|unka|unki)\s",
    r"^(woh|ye|that|this|it)\s",
    r"^(haan|yes|ok|okay|theek|acha)\s*[,.]?\s*(ab|now|toh|so)\b",
    r"\b(previous|pehle|earlier|last time|abhi)\b",
    r"^(continue|jari|aage)\b",
    r"\b(same|wahi|usi)\b",
    r"^(why|kyu|kyon)\s*\??\s*$",
    r"^(how|kaise)\s*\??\s*$",
)

_STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been",
    "hai", "hain", "tha", "thi", "ho", "hota", "hoti",
    "ka", "ki", "ke", "ko", "se", "me", "mein", "par", "pe",
    "kya", "kaise", "kaisa", "kaisi", "kab", "kahan", "kaun",
    "ye", "woh", "yeh", "wo", "us", "in", "un",
    "aur", "ya", "lekin", "magar", "toh", "bhi",
    "i", "my", "you", "your", "we", "our", "they", "their",
    "what", "how", "when", "where", "who", "why", "which",
    "can", "could", "would", "should", "will", "do", "does", "did",
    "and", "for", "with", "about", "this", "that", "it",
})


# =============================================================================
# Nudge Vocabulary
# =============================================================================

_NUDGE_PATTERNS: dict[NudgeType, str] = {
    NudgeType.DECIDE: (
        r"\b(should i|which one|recommend|choose between|decide|better option|"
        r"what do you think|kya karu|konsa|sahi rahega)\b"
    ),
    NudgeType.SIMPLIFY: (
        r"\b(confused|confusing|overwhelming|complicated|dont understand|"
        r"don't understand|not sure|lost|stuck|samajh nahi|clear nahi)\b"
    ),
    NudgeType.ACTION: (
        r"\b(how do i|how to|next step|where do i start|get started|first step|"
        r"kaise karu|shuru karu|steps batao)\b"
    ),
}

_NUDGE_TEXTS: dict[NudgeType, str] = {
    NudgeType.DECIDE: "Want me to help you decide?",
    NudgeType.SIMPLIFY: "Want this explained more simply?",
    NudgeType.ACTION: "Want clear next steps?",
}


# =============================================================================
# Lexicon Container
# =============================================================================


def _freeze(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Lexicon:
    """Read-only bundle of every vocabulary table.

    Attributes:
        version: Lexicon version tag.
        intent_terms: Per-intent keyword lists (mutually disjoint).
        intent_weights: Points added per keyword hit, per intent.
        cross_domain_terms: Terms signalling a multi-domain request.
        depth_terms: Terms that disable the classifier fast path.
        tool_terms: Terms suggesting an external tool call.
        data_context_terms: Terms suggesting live data is involved.
        ambiguous_terms: Homonyms mapped to 2-4 candidate meanings.
        pronouns: Deictic terms that need a referent.
        pleasantries: Greetings, farewells and acknowledgements.
        vague_question_pattern: Regex for subject-less questions.
        simple_patterns: Regexes that short-circuit complexity to SIMPLE.
        complex_patterns: Regexes that each add a complexity point.
        complex_keywords: Domain keywords that each add half a point.
        follow_up_patterns: Regexes that mark a follow-up message.
        stop_words: Words excluded from keyword extraction.
        nudge_patterns: One regex per nudge type.
        nudge_texts: UI text per nudge type.
    """

    version: str = LEXICON_VERSION
    intent_terms: Mapping[Intent, tuple[str, ...]] = field(default_factory=lambda: _freeze(_INTENT_TERMS))
    intent_weights: Mapping[Intent, int] = field(default_factory=lambda: _freeze(_INTENT_WEIGHTS))
    cross_domain_terms: tuple[str, ...] = _CROSS_DOMAIN_TERMS
    depth_terms: tuple[str, ...] = _DEPTH_TERMS
    tool_terms: tuple[str, ...] = _TOOL_TERMS
    data_context_terms: tuple[str, ...] = _DATA_CONTEXT_TERMS
    ambiguous_terms: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _freeze(_AMBIGUOUS_TERMS))
    pronouns: frozenset[str] = _PRONOUNS
    pleasantries: frozenset[str] = _PLEASANTRIES
    vague_question_pattern: str = _VAGUE_QUESTION_PATTERN
    simple_patterns: tuple[str, ...] = _SIMPLE_PATTERNS
    complex_patterns: tuple[str, ...] = _COMPLEX_PATTERNS
    complex_keywords: tuple[str, ...] = _COMPLEX_KEYWORDS
    follow_up_patterns: tuple[str, ...] = _FOLLOW_UP_PATTERNS
    stop_words: frozenset[str] = _STOP_WORDS
    nudge_patterns: Mapping[NudgeType, str] = field(default_factory=lambda: _freeze(_NUDGE_PATTERNS))
    nudge_texts: Mapping[NudgeType, str] = field(default_factory=lambda: _freeze(_NUDGE_TEXTS))

    def __post_init__(self) -> None:
        """Validate table consistency."""
        seen: dict[str, Intent] = {}
        for intent, terms in self.intent_terms.items():
            if intent not in self.intent_weights:
                raise ValueError(f"No weight configured for intent {intent.value}")
            for term in terms:
                owner = seen.get(term)
                if owner is not None and owner != intent:
                    raise ValueError(
                        f"Term '{term}' is listed under both {owner.value} and {intent.value}"
                    )
                seen[term] = intent
        for term, meanings in self.ambiguous_terms.items():
            if not 2 <= len(meanings) <= 4:
                raise ValueError(
                    f"Ambiguous term '{term}' needs 2-4 meanings, got {len(meanings)}"
                )
        missing = set(NudgeType) - set(self.nudge_patterns)
        if missing:
            raise ValueError(f"Missing nudge patterns for: {sorted(n.value for n in missing)}")

    @property
    def scored_intents(self) -> tuple[Intent, ...]:
        """Intents that have keyword lists (every intent except QUICK)."""
        return tuple(self.intent_terms)


DEFAULT_LEXICON = Lexicon()


def get_lexicon() -> Lexicon:
    """Return the process-wide default lexicon."""
    return DEFAULT_LEXICON


__all__ = [
    "LEXICON_VERSION",
    "Lexicon",
    "DEFAULT_LEXICON",
    "get_lexicon",
]
