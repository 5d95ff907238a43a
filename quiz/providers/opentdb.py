# quiz/providers/opentdb.py - Open Trivia Database provider

import logging
from typing import Any, List

from quiz.models import Question
from quiz.normalize import normalize_question
from quiz.providers.base import QuestionProvider

logger = logging.getLogger(__name__)


class OpenTDBProvider(QuestionProvider):
    """Provider for Open Trivia Database (opentdb.com), Anime & Manga category"""

    @property
    def name(self) -> str:
        return "OpenTDB"

    def parse(self, data: Any) -> List[Question]:
        # OpenTDB reports empty categories and rate limits through response_code
        response_code = data.get("response_code", 0)
        if response_code != 0:
            logger.warning(f"{self.provider_id} returned response_code {response_code}")
            return []

        questions = []
        for item in data.get("results") or []:
            questions.append(normalize_question(
                item["question"],
                item["correct_answer"],
                item.get("incorrect_answers", []),
                item.get("difficulty") or "medium",
                self.name,
                rng=self._rng,
            ))
        return questions
