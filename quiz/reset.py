"""
Daily reset - idempotent per service day.

Runs once a day at the configured reset time in the reference timezone:
hands each community to the role-reset hook, prunes old data and marks
the service date as done so a restart or a second trigger is a no-op.
"""

import asyncio
import datetime
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Set
from zoneinfo import ZoneInfo

from discord.ext import tasks

from quiz.errors import StoreUnavailable
from quiz.storage.durable import QuizDatabase
from quiz.storage.keys import reset_marker_key
from quiz.storage.memory import MemoryCache
from quiz.storage.volatile import VolatileStore

logger = logging.getLogger(__name__)

DAY = 24 * 60 * 60

RoleResetHook = Callable[[str], Awaitable[int]]
CommunityLister = Callable[[], Awaitable[Iterable[str]]]


@dataclass
class ResetResult:
    service_date: str
    already_completed: bool = False
    communities_processed: int = 0
    roles_removed: int = 0
    errors: List[str] = field(default_factory=list)
    cleanup: dict = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors


class ResetCoordinator:
    def __init__(
        self,
        volatile: VolatileStore,
        db: QuizDatabase,
        clock,
        settings,
        role_reset: Optional[RoleResetHook] = None,
        list_communities: Optional[CommunityLister] = None,
        memory_caches: Iterable[MemoryCache] = (),
    ):
        self.volatile = volatile
        self.db = db
        self.clock = clock
        self.settings = settings
        self.role_reset = role_reset
        self.list_communities = list_communities
        self.memory_caches = list(memory_caches)

        self._local_markers: Set[str] = set()
        self._loop: Optional[tasks.Loop] = None
        self._running = asyncio.Lock()

    def scheduled_time(self) -> datetime.time:
        return datetime.time(
            hour=self.settings.reset_hour,
            minute=self.settings.reset_minute,
            tzinfo=ZoneInfo(self.settings.reset_timezone),
        )

    def next_reset_time(self, now: Optional[datetime.datetime] = None) -> datetime.datetime:
        return self.clock.next_reset(now)

    def start(self):
        """Schedule the daily reset"""
        if self._loop is not None and self._loop.is_running():
            return
        self._loop = tasks.loop(time=self.scheduled_time())(self._scheduled_reset)
        self._loop.start()
        logger.info(
            f"[Daily Reset] Scheduler started ({self.settings.reset_hour:02d}:"
            f"{self.settings.reset_minute:02d} {self.settings.reset_timezone})"
        )

    def stop(self):
        if self._loop is not None:
            self._loop.cancel()
            self._loop = None
            logger.info("[Daily Reset] Scheduler stopped")

    async def _scheduled_reset(self):
        try:
            await self.perform_daily_reset()
        except Exception as e:
            logger.error(f"[Daily Reset] Scheduled reset failed: {e}", exc_info=True)

    async def was_reset_completed(self, service_date: str) -> bool:
        if service_date in self._local_markers:
            return True
        if self.volatile.available:
            try:
                return await self.volatile.exists(reset_marker_key(service_date))
            except StoreUnavailable as e:
                logger.warning(f"[Daily Reset] Could not read reset marker: {e}")
        return False

    async def mark_reset_completed(self, service_date: str):
        self._local_markers.add(service_date)
        if self.volatile.available:
            try:
                await self.volatile.set_json(
                    reset_marker_key(service_date),
                    {"completed_at": self.clock.timestamp()},
                    ttl=self.settings.reset_marker_ttl,
                )
            except StoreUnavailable as e:
                logger.warning(f"[Daily Reset] Could not store reset marker: {e}")

    async def perform_daily_reset(self, now: Optional[datetime.datetime] = None) -> ResetResult:
        """Reset the service day that starts at `now`; repeated calls are no-ops"""
        async with self._running:
            service_date = self.clock.service_date(now)
            result = ResetResult(service_date=service_date)

            if await self.was_reset_completed(service_date):
                logger.info(f"[Daily Reset] Reset for {service_date} already done, skipping")
                result.already_completed = True
                return result

            logger.info(f"🔄 [Daily Reset] Starting reset for {service_date}")
            communities = await self._communities(now)

            for i, community_id in enumerate(communities):
                if i > 0 and self.settings.reset_community_delay:
                    await asyncio.sleep(self.settings.reset_community_delay)
                result.communities_processed += 1
                if self.role_reset is None:
                    continue
                try:
                    result.roles_removed += await self.role_reset(community_id) or 0
                except Exception as e:
                    logger.error(f"[Daily Reset] Role reset failed for {community_id}: {e}")
                    result.errors.append(f"{community_id}: {e}")

            try:
                result.cleanup = await self.cleanup_old_data()
            except StoreUnavailable as e:
                logger.error(f"[Daily Reset] Cleanup failed: {e}")
                result.errors.append(f"cleanup: {e}")

            await self.mark_reset_completed(service_date)
            logger.info(
                f"✅ [Daily Reset] Done for {service_date}: {result.communities_processed} communities, "
                f"{result.roles_removed} roles removed, {len(result.errors)} errors"
            )
            return result

    async def _communities(self, now: Optional[datetime.datetime]) -> List[str]:
        if self.list_communities is not None:
            return list(await self.list_communities())
        # Without a lister, only communities that played yesterday have roles to strip
        try:
            return await self.db.communities_for_date(self.clock.previous_service_date(now))
        except StoreUnavailable as e:
            logger.error(f"[Daily Reset] Could not list communities: {e}")
            return []

    async def cleanup_old_data(self) -> dict:
        """Prune completions and history past retention, and expired cache rows"""
        today = datetime.date.fromisoformat(self.clock.service_date())
        completion_cutoff = (today - datetime.timedelta(days=self.settings.completion_retention_days)).isoformat()
        history_cutoff = self.clock.timestamp() - self.settings.history_retention_days * DAY

        stats = {
            "completions": await self.db.delete_completions_before(completion_cutoff),
            "history": await self.db.delete_history_before(history_cutoff),
            "expired_rows": await self.db.purge_expired_kv(self.clock.timestamp()),
            "memory_entries": sum(cache.purge_expired() for cache in self.memory_caches),
        }
        logger.info(
            f"🧹 Cleaned {stats['completions']} completions, {stats['history']} history rows, "
            f"{stats['expired_rows']} expired rows"
        )
        return stats
