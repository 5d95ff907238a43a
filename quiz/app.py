# quiz/app.py - Wires storage, providers and the session engine together

import logging
import random
from typing import Optional

from quiz.completion import CompletionService
from quiz.engine import SessionEngine, SessionListener
from quiz.errors import AlreadyCompletedToday, ConcurrentStartConflict
from quiz.history import QuestionHistory
from quiz.models import CompletionRecord, QuestionSet, QuizSession
from quiz.providers.gateway import ProviderGateway, build_providers
from quiz.reset import CommunityLister, ResetCoordinator, RoleResetHook
from quiz.service_day import ServiceClock
from quiz.settings import QuizSettings, load_settings
from quiz.storage import keys
from quiz.storage.dual_tier import CompletionTier, DualTierStore, KeyValueTier
from quiz.storage.durable import QuizDatabase
from quiz.storage.memory import MemoryCache
from quiz.storage.volatile import VolatileStore
from quiz.supplier import QuestionSupplier
from quiz.validator import ContentValidator

logger = logging.getLogger(__name__)


class QuizApp:
    """Owns every quiz component for the lifetime of the process"""

    def __init__(
        self,
        settings: Optional[QuizSettings] = None,
        listener: Optional[SessionListener] = None,
        role_reset: Optional[RoleResetHook] = None,
        list_communities: Optional[CommunityLister] = None,
        clock: Optional[ServiceClock] = None,
        volatile: Optional[VolatileStore] = None,
        gateway: Optional[ProviderGateway] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or load_settings()
        self.clock = clock or ServiceClock(self.settings)
        self.listener = listener
        self.role_reset = role_reset
        self.list_communities = list_communities
        self.rng = rng

        self.volatile = volatile
        self.gateway = gateway
        self.db = QuizDatabase(self.settings.database_path)

        self.engine: Optional[SessionEngine] = None
        self.supplier: Optional[QuestionSupplier] = None
        self.completions: Optional[CompletionService] = None
        self.reset: Optional[ResetCoordinator] = None
        self._started = False

    async def start(self, schedule_reset: bool = True):
        if self._started:
            return
        settings = self.settings

        await self.db.connect()
        if self.volatile is None:
            self.volatile = await VolatileStore.connect(settings.redis_url, settings.redis_key_prefix)
        if self.gateway is None:
            self.gateway = ProviderGateway(
                build_providers(settings.provider_endpoints, rng=self.rng),
                timeout=settings.provider_timeout,
                user_agent=settings.provider_user_agent,
            )
        await self.gateway.initialize()

        timestamp = self.clock.timestamp
        session_memory = MemoryCache(clock=timestamp) if settings.memory_cache_enabled else None

        completion_store = DualTierStore(
            "completions", keys.completion_key,
            CompletionRecord.to_dict, CompletionRecord.from_dict,
            self.volatile, CompletionTier(self.db),
            default_ttl=settings.completion_ttl, durable_required=True,
        )
        session_store = DualTierStore(
            "active-sessions", keys.active_session_key,
            QuizSession.to_dict, QuizSession.from_dict,
            self.volatile,
            KeyValueTier(self.db, keys.active_session_key, QuizSession.to_dict, QuizSession.from_dict, timestamp),
            default_ttl=settings.active_session_ttl, memory=session_memory,
        )
        question_set_store = DualTierStore(
            "question-sets", keys.question_set_key,
            QuestionSet.to_dict, QuestionSet.from_dict,
            self.volatile,
            KeyValueTier(self.db, keys.question_set_key, QuestionSet.to_dict, QuestionSet.from_dict, timestamp),
            default_ttl=settings.question_set_ttl,
        )

        # Timers do not survive a restart, so sessions left behind by the last process are dead
        orphaned = await self.db.kv_delete_prefix("active-session:")
        if orphaned:
            logger.warning(f"Discarded {orphaned} sessions orphaned by the previous run")

        history = QuestionHistory(self.volatile, self.db, self.clock, settings)
        self.completions = CompletionService(completion_store, self.db, self.volatile, self.clock, settings)
        self.supplier = QuestionSupplier(
            self.gateway, ContentValidator(), history, question_set_store, settings, self.clock, rng=self.rng
        )
        self.engine = SessionEngine(
            self.supplier, self.completions, session_store, history, settings, self.clock, self.listener
        )
        self.reset = ResetCoordinator(
            self.volatile, self.db, self.clock, settings,
            role_reset=self.role_reset,
            list_communities=self.list_communities,
            memory_caches=[session_memory] if session_memory else [],
        )
        if schedule_reset:
            self.reset.start()

        self._started = True
        logger.info("✅ Quiz system ready")

    async def close(self):
        if self.reset:
            self.reset.stop()
        if self.engine:
            await self.engine.close()
        if self.supplier:
            await self.supplier.close()
        if self.gateway:
            self.gateway.monitor.log_summary()
            await self.gateway.cleanup()
        if self.volatile:
            await self.volatile.close()
        await self.db.close()
        self._started = False
        logger.info("Quiz system shut down")

    async def request_quiz(self, participant_id: str, community_id: str) -> None:
        """Pre-start check: reject replays and duplicates, then warm the question set.

        Called when the participant first asks to play, before they confirm.
        """
        if self.engine.has_active_session(participant_id, community_id):
            raise ConcurrentStartConflict(participant_id, community_id)
        record = await self.completions.has_completed_today(participant_id, community_id)
        if record is not None:
            raise AlreadyCompletedToday(record)
        self.supplier.prefetch(participant_id, community_id)

    async def start_quiz(self, participant_id: str, community_id: str) -> QuizSession:
        return await self.engine.start_session(participant_id, community_id)
