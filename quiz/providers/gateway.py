# quiz/providers/gateway.py - Concurrent fan-out over every configured provider

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Type
from urllib.parse import urlparse

import aiohttp

from quiz.errors import ProviderFailure
from quiz.models import Question
from quiz.providers.aniquiz import AniQuizProvider
from quiz.providers.base import QuestionProvider
from quiz.providers.monitor import ProviderMonitor
from quiz.providers.opentdb import OpenTDBProvider
from quiz.providers.trivia_api import TriviaAPIProvider

logger = logging.getLogger(__name__)

PROVIDER_TYPES: Dict[str, Type[QuestionProvider]] = {
    "opentdb.com": OpenTDBProvider,
    "the-trivia-api.com": TriviaAPIProvider,
    "aniquizapi.vercel.app": AniQuizProvider,
}


def build_providers(endpoints: Sequence[str], rng=None) -> List[QuestionProvider]:
    """Create a provider for each endpoint whose host is supported"""
    providers = []
    for url in endpoints:
        parsed = urlparse(url)
        provider_cls = PROVIDER_TYPES.get(parsed.hostname or "")
        if provider_cls is None:
            logger.warning(f"No provider registered for endpoint {url}, skipping")
            continue

        providers.append(provider_cls(url, rng=rng))
    return providers


class ProviderGateway:
    """Fetches from all providers concurrently; a failing provider contributes nothing"""

    def __init__(
        self,
        providers: Sequence[QuestionProvider],
        timeout: float = 10,
        user_agent: str = "AnimeQuizBot/1.0",
        monitor: Optional[ProviderMonitor] = None,
    ):
        self.providers = list(providers)
        self.timeout = timeout
        self.user_agent = user_agent
        self.monitor = monitor or ProviderMonitor()
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Create HTTP session for API calls"""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=10,
                limit_per_host=3,
                ttl_dns_cache=300,
                use_dns_cache=True
            )
            timeout = aiohttp.ClientTimeout(total=self.timeout, connect=5)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=timeout,
                headers={'User-Agent': self.user_agent}
            )
            logger.info(f"Provider gateway session created ({len(self.providers)} endpoints)")

    async def cleanup(self) -> None:
        """Close HTTP session"""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.info("Provider gateway session closed")
        self._session = None

    async def fetch_all(self, accept: Optional[Callable[[Question], bool]] = None) -> List[Question]:
        """Fetch every provider at once and return the combined candidates.

        When `accept` is given each batch is filtered through it and the
        monitor records how many questions survived per provider.
        """
        if not self.providers:
            return []
        if self._session is None or self._session.closed:
            await self.initialize()

        results = await asyncio.gather(*(self._fetch_one(p, accept) for p in self.providers))

        candidates = [question for batch in results for question in batch]
        succeeded = sum(1 for batch in results if batch)
        logger.info(
            f"Fetched {len(candidates)} candidates from {succeeded}/{len(self.providers)} providers"
        )
        return candidates

    async def _fetch_one(self, provider: QuestionProvider, accept=None) -> List[Question]:
        started = time.monotonic()
        try:
            questions = await asyncio.wait_for(provider.fetch(self._session), timeout=self.timeout)
        except asyncio.TimeoutError:
            self._record_failure(provider, started, f"timed out after {self.timeout}s")
            return []
        except aiohttp.ClientError as e:
            self._record_failure(provider, started, f"{type(e).__name__}: {e}")
            return []
        except ProviderFailure as e:
            self._record_failure(provider, started, e.reason)
            return []

        self.monitor.record_call(
            provider.provider_id, True, len(questions), time.monotonic() - started
        )
        if accept is None:
            logger.debug(f"{provider.provider_id}: parsed {len(questions)} questions")
            return questions

        valid = [q for q in questions if accept(q)]
        self.monitor.record_validation(provider.provider_id, len(valid))
        logger.info(f"✅ {provider.provider_id}: {len(valid)}/{len(questions)} valid questions")
        return valid

    def _record_failure(self, provider: QuestionProvider, started: float, reason: str):
        logger.warning(f"⚠️ {provider.provider_id} failed: {reason}")
        self.monitor.record_call(
            provider.provider_id, False, response_time=time.monotonic() - started, error=reason
        )

    def get_statistics(self) -> Dict:
        stats = self.monitor.get_statistics()
        stats["endpoints"] = [p.get_statistics() for p in self.providers]
        return stats
