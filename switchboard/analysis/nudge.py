"""Nudge detection: a UI hint offered next to the answer.

Three pattern sets are tried in priority order and the first match wins.
The default order is DECIDE, SIMPLIFY, ACTION. This departs from the
DECIDE, ACTION, SIMPLIFY order of the earlier classifier so that "I'm
confused, how do I start?" is offered a simpler explanation before a list of
next steps. A custom order may list only some types; the rest are never
detected.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.schemas import NudgeType

DEFAULT_ORDER = (NudgeType.DECIDE, NudgeType.SIMPLIFY, NudgeType.ACTION)


class NudgeDetector:
    """Stateless, first-match-wins nudge detector.

    Example:
        >>> detector = NudgeDetector()
        >>> detector.detect("Should I pick Postgres or Mongo?")
        <NudgeType.DECIDE: 'DECIDE'>
        >>> detector.text_for(NudgeType.DECIDE)
        'Want me to help you decide?'
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        priority: Optional[Sequence[NudgeType]] = None,
    ) -> None:
        self.lexicon = lexicon or get_lexicon()
        self.priority = DEFAULT_ORDER if priority is None else tuple(priority)
        self._patterns = [
            (nudge, re.compile(self.lexicon.nudge_patterns[nudge], re.IGNORECASE))
            for nudge in self.priority
        ]

    def detect(self, text: str) -> Optional[NudgeType]:
        if not text:
            return None
        for nudge, pattern in self._patterns:
            if pattern.search(text):
                return nudge
        return None

    def text_for(self, nudge: Optional[NudgeType]) -> str:
        """UI text for a nudge; empty string for None."""
        if nudge is None:
            return ""
        return self.lexicon.nudge_texts.get(nudge, "")


__all__ = ["NudgeDetector", "DEFAULT_ORDER"]
