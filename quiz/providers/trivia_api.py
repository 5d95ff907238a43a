# quiz/providers/trivia_api.py - The Trivia API provider

from typing import Any, List

from quiz.models import Question
from quiz.normalize import normalize_question
from quiz.providers.base import QuestionProvider


class TriviaAPIProvider(QuestionProvider):
    """Provider for The Trivia API (the-trivia-api.com), anime_and_manga category"""

    @property
    def name(self) -> str:
        return "TriviaAPI"

    def parse(self, data: Any) -> List[Question]:
        if not isinstance(data, list):
            return []

        questions = []
        for item in data:
            text = item["question"]
            # v2 nests the text, v1 used a plain string
            if isinstance(text, dict):
                text = text.get("text")
            questions.append(normalize_question(
                text,
                item["correctAnswer"],
                item.get("incorrectAnswers", []),
                item.get("difficulty") or "medium",
                self.name,
                rng=self._rng,
            ))
        return questions
