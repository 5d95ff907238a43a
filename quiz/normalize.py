# quiz/normalize.py - Shared question normalization, keys and hashes

import hashlib
import html
import random
import re
from typing import Any, Iterable, Optional, Sequence, Set

from quiz.models import Difficulty, Question

MAX_OPTIONS = 4

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

_EASY_SPELLINGS = {"easy", "beginner"}
_HARD_SPELLINGS = {"hard", "expert", "difficult"}


def clean_text(text: Optional[str]) -> str:
    """Decode HTML entities and trim whitespace"""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", html.unescape(str(text))).strip()


def normalize_difficulty(value: Any) -> Difficulty:
    """Map a provider's difficulty spelling onto Easy/Medium/Hard"""
    if isinstance(value, Difficulty):
        return value
    spelling = str(value or "").strip().lower()
    if spelling in _EASY_SPELLINGS:
        return Difficulty.EASY
    if spelling in _HARD_SPELLINGS:
        return Difficulty.HARD
    return Difficulty.MEDIUM


def normalize_question(
    question: Any,
    answer: Any,
    options: Iterable[Any],
    difficulty: Any,
    source: str,
    rng: Optional[random.Random] = None,
) -> Question:
    """Build a Question from raw provider fields.

    Every text field is entity-decoded and trimmed, duplicate options are
    dropped, the answer is always among the options, surplus distractors
    beyond MAX_OPTIONS are cut and the option order is shuffled so the answer
    position carries no signal.
    """
    answer_text = clean_text(answer)
    distractors = []
    for option in options:
        text = clean_text(option)
        if text and text != answer_text and text not in distractors:
            distractors.append(text)

    # Keep the answer, drop surplus distractors beyond MAX_OPTIONS
    if answer_text:
        cleaned = distractors[:MAX_OPTIONS - 1] + [answer_text]
    else:
        cleaned = distractors[:MAX_OPTIONS]

    (rng or random).shuffle(cleaned)

    return Question(
        question=clean_text(question),
        answer=answer_text,
        options=tuple(cleaned),
        difficulty=normalize_difficulty(difficulty),
        source=source,
    )


def question_key(text: str) -> str:
    """Case-insensitive, trimmed question text used for de-duplication"""
    return text.lower().strip()


def question_hash(text: str) -> str:
    """Stable hash of the question text, ignoring case and punctuation"""
    stripped = _PUNCTUATION.sub("", text.lower().strip())
    return hashlib.md5(stripped.encode("utf-8")).hexdigest()


def is_avoided(question: Question, avoid_set: Set[str]) -> bool:
    """Check the question against an avoid-set holding keys and/or hashes"""
    if not avoid_set:
        return False
    return question_key(question.question) in avoid_set or question_hash(question.question) in avoid_set


def pad_options(options: Sequence[str], fillers: Sequence[str], target: int = 4) -> list:
    """Pad an option list up to `target` entries with unused fillers"""
    padded = list(options)
    for filler in fillers:
        if len(padded) >= target:
            break
        if filler not in padded:
            padded.append(filler)
    while len(padded) < target:
        padded.append(f"Option {len(padded)}")
    return padded
