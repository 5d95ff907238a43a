# quiz/completion.py - Once-per-service-day completion records

import logging
from typing import List, Optional

from quiz.errors import StoreUnavailable
from quiz.models import CompletionRecord
from quiz.storage.dual_tier import DualTierStore
from quiz.storage.durable import QuizDatabase
from quiz.storage.keys import leaderboard_key
from quiz.storage.volatile import VolatileStore

logger = logging.getLogger(__name__)


class CompletionService:
    """Answers "has this participant played today?" and records finished sessions.

    The completions store requires durability, so a durable failure on
    read or write surfaces as StoreUnavailable instead of silently
    letting someone play twice.
    """

    def __init__(self, store: DualTierStore, db: QuizDatabase, volatile: VolatileStore, clock, settings):
        self.store = store
        self.db = db
        self.volatile = volatile
        self.clock = clock
        self.max_score = settings.total_questions
        self.leaderboard_ttl = settings.leaderboard_ttl

    async def has_completed_today(self, participant_id: str, community_id: str) -> Optional[CompletionRecord]:
        service_date = self.clock.service_date()
        return await self.store.read((participant_id, community_id, service_date))

    async def record(self, participant_id: str, community_id: str, score: int,
                     tier: Optional[int] = None) -> CompletionRecord:
        """Upsert today's completion; a second record for the same day replaces the first"""
        if tier is None:
            tier = score
        if not 0 <= score <= self.max_score:
            raise ValueError(f"Score {score} outside 0..{self.max_score}")
        if not 0 <= tier <= self.max_score:
            raise ValueError(f"Tier {tier} outside 0..{self.max_score}")

        record = CompletionRecord(
            participant_id=participant_id,
            community_id=community_id,
            service_date=self.clock.service_date(),
            score=score,
            tier=tier,
            completed_at=self.clock.timestamp(),
        )
        await self.store.write((participant_id, community_id, record.service_date), record)
        await self._invalidate_leaderboard(community_id, record.service_date)

        logger.info(
            f"🏁 Recorded completion for {participant_id} in {community_id}: "
            f"{score}/{self.max_score} on {record.service_date}"
        )
        return record

    async def completions_for_day(self, service_date: Optional[str] = None,
                                  community_id: Optional[str] = None) -> List[CompletionRecord]:
        return await self.db.list_completions(service_date or self.clock.service_date(), community_id)

    async def leaderboard(self, community_id: str, limit: Optional[int] = None) -> List[CompletionRecord]:
        """Today's completions in a community, best tier first, earliest finish breaking ties"""
        service_date = self.clock.service_date()
        cache_key = leaderboard_key(community_id, service_date)

        records = None
        if self.volatile.available:
            try:
                cached = await self.volatile.get_json(cache_key)
            except StoreUnavailable as e:
                logger.warning(f"Leaderboard cache read failed: {e}")
                cached = None
            if cached is not None:
                records = [CompletionRecord.from_dict(item) for item in cached]

        if records is None:
            records = await self.db.list_completions(service_date, community_id)
            if self.volatile.available:
                try:
                    await self.volatile.set_json(
                        cache_key, [r.to_dict() for r in records], ttl=self.leaderboard_ttl
                    )
                except StoreUnavailable as e:
                    logger.warning(f"Leaderboard cache write failed: {e}")

        return records[:limit] if limit else records

    async def _invalidate_leaderboard(self, community_id: str, service_date: str):
        if not self.volatile.available:
            return
        try:
            await self.volatile.delete(leaderboard_key(community_id, service_date))
        except StoreUnavailable as e:
            logger.warning(f"Leaderboard cache invalidation failed: {e}")
