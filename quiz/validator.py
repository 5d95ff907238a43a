# quiz/validator.py - Content screening for provider questions

import logging
import re
from typing import Optional, Set

from quiz.models import Question
from quiz.normalize import MAX_OPTIONS, is_avoided
from quiz import vocabulary

logger = logging.getLogger(__name__)

MAX_QUESTION_LENGTH = 250
MAX_OPTION_LENGTH = 100
MAX_NUMERALS = 4

_NUMERAL = re.compile(r"\d+")
_OPTION_MARKER = re.compile(r"(?<![\w.])([A-Da-d])[\).:]\s")


def _term_pattern(terms) -> re.Pattern:
    alternatives = "|".join(re.escape(term) for term in sorted(terms, key=len, reverse=True))
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE)


class ContentValidator:
    """Decides whether a provider question is on-topic, answerable and new.

    Terms are matched on word boundaries, so short honorifics like "kun"
    do not fire inside unrelated words.
    """

    def __init__(
        self,
        strong_indicators=None,
        titles=None,
        question_patterns=None,
        character_names=None,
        off_domain_markers=None,
        production_markers=None,
        trusted_sources=None,
    ):
        self._strong = _term_pattern(strong_indicators or vocabulary.STRONG_INDICATORS)
        self._titles = _term_pattern(titles or vocabulary.ANIME_TITLES)
        self._patterns = [
            re.compile(p, re.IGNORECASE)
            for p in (question_patterns or vocabulary.QUESTION_PATTERNS)
        ]
        self._characters = _term_pattern(character_names or vocabulary.CHARACTER_NAMES)
        self._off_domain = _term_pattern(off_domain_markers or vocabulary.OFF_DOMAIN_MARKERS)
        self._production = _term_pattern(production_markers or vocabulary.PRODUCTION_MARKERS)
        self._trusted = set(trusted_sources or vocabulary.TRUSTED_SOURCES)

    def accept(self, candidate: Question, avoid_set: Optional[Set[str]] = None) -> bool:
        reason = self.reject_reason(candidate, avoid_set)
        if reason:
            logger.debug(f"Rejected ({reason}): {candidate.question[:60]}")
            return False
        return True

    def reject_reason(self, candidate: Question, avoid_set: Optional[Set[str]] = None) -> Optional[str]:
        """Return why the candidate is rejected, or None when it is acceptable"""
        if not candidate.question or not candidate.answer:
            return "missing fields"
        if len(candidate.options) < 2:
            return "too few options"
        if len(candidate.options) > MAX_OPTIONS:
            return "too many options"
        if candidate.answer not in candidate.options:
            return "answer not in options"
        if len(candidate.question) > MAX_QUESTION_LENGTH:
            return "question too long"
        if any(len(option) > MAX_OPTION_LENGTH for option in candidate.options):
            return "option too long"
        if avoid_set and is_avoided(candidate, avoid_set):
            return "recently asked"

        text = candidate.question
        if self._off_domain.search(text):
            return "off-domain"
        if self._production.search(text):
            return "production trivia"

        # Quality gate
        if len({m.upper() for m in _OPTION_MARKER.findall(text)}) >= 2:
            return "inline option markers"
        if len(_NUMERAL.findall(text)) > MAX_NUMERALS:
            return "too many numerals"

        if self.has_domain_signal(candidate):
            return None
        return "no anime signal"

    def has_domain_signal(self, candidate: Question) -> bool:
        text = candidate.question
        if self._strong.search(text) or self._titles.search(text):
            return True
        lowered = text.lower()
        if any(pattern.search(lowered) for pattern in self._patterns):
            return True
        # Weak signal: options name known titles or characters, trusted sources only
        if candidate.source in self._trusted:
            return any(
                self._titles.search(option) or self._characters.search(option)
                for option in candidate.options
            )
        return False
