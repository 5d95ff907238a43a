# quiz/history.py - Per-participant question history used to avoid repeats

import logging
from typing import Set

from quiz.errors import StoreUnavailable
from quiz.models import Question, QuestionHistoryEntry
from quiz.normalize import question_hash, question_key
from quiz.storage.durable import QuizDatabase
from quiz.storage.keys import recent_questions_key
from quiz.storage.volatile import VolatileStore

logger = logging.getLogger(__name__)

DAY = 24 * 60 * 60


class QuestionHistory:
    """Remembers which questions each participant has been shown.

    Redis keeps a short-lived set of hashes; SQLite keeps the full log.
    Both are best-effort: losing history only risks a repeat question.
    """

    def __init__(self, volatile: VolatileStore, db: QuizDatabase, clock, settings):
        self.volatile = volatile
        self.db = db
        self.clock = clock
        self.recent_ttl = settings.recent_questions_ttl
        self.lookback_days = settings.history_lookback_days

    async def avoid_set(self, participant_id: str, community_id: str) -> Set[str]:
        """Hashes and normalized texts of recently asked questions, from both tiers"""
        avoid: Set[str] = set()

        if self.volatile.available:
            try:
                avoid |= await self.volatile.members(recent_questions_key(participant_id, community_id))
            except StoreUnavailable as e:
                logger.warning(f"Could not read recent questions from cache: {e}")

        since = self.clock.timestamp() - self.lookback_days * DAY
        try:
            entries = await self.db.recent_history(participant_id, community_id, since)
        except StoreUnavailable as e:
            logger.warning(f"Could not read question history: {e}")
            entries = []

        for entry in entries:
            avoid.add(entry.question_hash)
            avoid.add(question_key(entry.question_text))

        logger.debug(f"Avoid-set for {participant_id} in {community_id}: {len(avoid)} entries")
        return avoid

    async def record(self, participant_id: str, community_id: str, question: Question):
        digest = question_hash(question.question)

        if self.volatile.available:
            try:
                await self.volatile.add_members(
                    recent_questions_key(participant_id, community_id), [digest], ttl=self.recent_ttl
                )
            except StoreUnavailable as e:
                logger.warning(f"Could not cache asked question: {e}")

        try:
            await self.db.add_history(QuestionHistoryEntry(
                participant_id=participant_id,
                community_id=community_id,
                question_hash=digest,
                question_text=question.question,
                asked_at=self.clock.timestamp(),
            ))
        except StoreUnavailable as e:
            logger.warning(f"Could not record question history: {e}")
