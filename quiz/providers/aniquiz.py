# quiz/providers/aniquiz.py - AniQuizAPI provider (one question per call)

from typing import Any, List

from quiz.models import Question
from quiz.normalize import clean_text, normalize_question, pad_options
from quiz.providers.base import QuestionProvider
from quiz.vocabulary import DUMMY_OPTIONS


class AniQuizProvider(QuestionProvider):
    """Provider for AniQuizAPI, which returns a single question object.

    Its option lists are sometimes short, so they are padded to four
    choices with anime-themed fillers.
    """

    @property
    def name(self) -> str:
        return "AniQuizAPI"

    def parse(self, data: Any) -> List[Question]:
        if not isinstance(data, dict) or not data.get("question"):
            return []

        answer = clean_text(data.get("answer"))
        options = [clean_text(option) for option in data.get("options") or []]
        options = [option for option in options if option]
        if answer and answer not in options:
            options.append(answer)

        return [normalize_question(
            data["question"],
            answer,
            pad_options(options, DUMMY_OPTIONS),
            data.get("difficulty") or "medium",
            self.name,
            rng=self._rng,
        )]
