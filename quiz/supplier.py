# quiz/supplier.py - Builds balanced, repeat-free question sets

import asyncio
import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from quiz.errors import InsufficientContent
from quiz.fallback_bank import FALLBACK_BANK
from quiz.history import QuestionHistory
from quiz.models import Difficulty, Question, QuestionSet
from quiz.normalize import is_avoided, question_key
from quiz.providers.gateway import ProviderGateway
from quiz.storage.dual_tier import DualTierStore
from quiz.validator import ContentValidator

logger = logging.getLogger(__name__)

SessionKey = Tuple[str, str]

DIFFICULTY_ORDER = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


class QuestionSupplier:
    """Prepares the question set for a participant's daily session.

    Pipeline: build the avoid-set, fetch every provider concurrently,
    validate, merge with the fallback bank, de-duplicate, bucket by
    difficulty, shuffle each bucket, take the difficulty quota for the
    active sequence and the remainder's head as reroll reserve.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        validator: ContentValidator,
        history: QuestionHistory,
        question_sets: DualTierStore,
        settings,
        clock,
        fallback_bank: Optional[Dict[Difficulty, List[Question]]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.gateway = gateway
        self.validator = validator
        self.history = history
        self.question_sets = question_sets
        self.clock = clock
        self.fallback_bank = fallback_bank if fallback_bank is not None else FALLBACK_BANK
        self.rng = rng or random.Random()

        self.total_questions = settings.total_questions
        self.reserve_size = settings.reserve_questions
        self.quota = {Difficulty(name): count for name, count in settings.difficulty_quota.items()}
        self.batch_delay = settings.batch_prepare_delay

        self._inflight: Dict[SessionKey, asyncio.Task] = {}

    async def prepare(self, participant_id: str, community_id: str) -> QuestionSet:
        """Run the full pipeline; raises InsufficientContent below the session size"""
        avoid = await self.history.avoid_set(participant_id, community_id)
        candidates = await self.gateway.fetch_all(accept=lambda q: self.validator.accept(q, avoid))
        question_set = self.assemble(candidates, avoid)
        logger.info(
            f"Prepared {len(question_set.active)}+{len(question_set.reserve)} questions "
            f"for {participant_id} in {community_id}"
        )
        return question_set

    def assemble(self, candidates: Iterable[Question], avoid: Set[str]) -> QuestionSet:
        """Merge validated candidates with the fallback bank into a QuestionSet"""
        buckets = self._bucket(candidates, avoid)
        for bucket in buckets.values():
            self.rng.shuffle(bucket)

        active: List[Question] = []
        for difficulty in DIFFICULTY_ORDER:
            wanted = self.quota.get(difficulty, 0)
            bucket = buckets[difficulty]
            taken, buckets[difficulty] = bucket[:wanted], bucket[wanted:]
            if len(taken) < wanted:
                logger.warning(
                    f"Only {len(taken)}/{wanted} {difficulty.value} questions available"
                )
            active.extend(taken)

        remainder = [q for difficulty in DIFFICULTY_ORDER for q in buckets[difficulty]]
        self.rng.shuffle(remainder)

        shortfall = self.total_questions - len(active)
        if shortfall > 0:
            logger.warning(f"Filling {shortfall} active slots from other difficulties")
            active.extend(remainder[:shortfall])
            remainder = remainder[shortfall:]

        if len(active) < self.total_questions:
            raise InsufficientContent(len(active), self.total_questions)

        reserve = remainder[:self.reserve_size]
        if len(reserve) < self.reserve_size:
            logger.warning(f"Only {len(reserve)}/{self.reserve_size} reserve questions available")

        return QuestionSet(active=active, reserve=reserve, created_at=self.clock.timestamp())

    def _bucket(self, candidates: Iterable[Question], avoid: Set[str]) -> Dict[Difficulty, List[Question]]:
        """De-duplicate by normalized text, provider questions first, and bucket by difficulty"""
        buckets: Dict[Difficulty, List[Question]] = {d: [] for d in DIFFICULTY_ORDER}
        seen: Set[str] = set()

        fallback = [q for d in DIFFICULTY_ORDER for q in self.fallback_bank.get(d, [])]
        provider_count = 0
        for question in list(candidates) + fallback:
            key = question_key(question.question)
            if key in seen:
                continue
            if question.source == "Fallback" and is_avoided(question, avoid):
                continue
            seen.add(key)
            buckets[question.difficulty].append(question)
            if question.source != "Fallback":
                provider_count += 1

        logger.debug(
            f"Pool: {provider_count} provider questions, "
            + ", ".join(f"{len(buckets[d])} {d.value}" for d in DIFFICULTY_ORDER)
        )
        return buckets

    async def get_or_prepare(self, participant_id: str, community_id: str) -> QuestionSet:
        """Return the cached set for this participant, preparing one if needed"""
        key = (participant_id, community_id)

        task = self._inflight.get(key)
        if task is not None:
            return await asyncio.shield(task)

        cached = await self.question_sets.read(key)
        if cached is not None:
            logger.debug(f"Using cached question set for {participant_id} in {community_id}")
            return cached

        return await asyncio.shield(self.prefetch(participant_id, community_id))

    def prefetch(self, participant_id: str, community_id: str) -> asyncio.Task:
        """Start preparing a set in the background and cache it when done"""
        key = (participant_id, community_id)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._prepare_and_cache(key))
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._prefetch_done(key, t))
        return task

    def _prefetch_done(self, key: SessionKey, task: asyncio.Task):
        self._inflight.pop(key, None)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Question set preparation failed for {key}: {task.exception()}")

    async def _prepare_and_cache(self, key: SessionKey) -> QuestionSet:
        question_set = await self.prepare(*key)
        await self.question_sets.write(key, question_set)
        return question_set

    async def prepare_batch(
        self, keys: Sequence[SessionKey]
    ) -> Dict[SessionKey, Union[QuestionSet, Exception]]:
        """Prepare sets one after another with a pause between them"""
        results: Dict[SessionKey, Union[QuestionSet, Exception]] = {}
        for i, key in enumerate(keys):
            if i > 0 and self.batch_delay:
                await asyncio.sleep(self.batch_delay)
            try:
                results[key] = await self._prepare_and_cache(key)
            except InsufficientContent as e:
                logger.warning(f"Batch preparation failed for {key}: {e}")
                results[key] = e
        return results

    async def discard(self, participant_id: str, community_id: str):
        """Drop the cached set once a session has consumed it"""
        await self.question_sets.delete((participant_id, community_id))

    async def close(self):
        """Cancel background preparations so none outlive the provider session"""
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} pending question set preparation(s)")
        self._inflight.clear()
