# quiz/providers/base.py - Abstract base class for question providers

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging
import random
from urllib.parse import parse_qs, urlparse

import aiohttp

from quiz.errors import ProviderFailure
from quiz.models import Question

logger = logging.getLogger(__name__)


class QuestionProvider(ABC):
    """One external question endpoint.

    Subclasses only know how to turn a decoded JSON body into Questions;
    the gateway owns the HTTP session, timeouts and failure accounting.
    """

    def __init__(self, url: str, label: Optional[str] = None, rng: Optional[random.Random] = None):
        self.url = url
        self._label = label
        self._rng = rng

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name, also used as the Question source tag"""
        pass

    @property
    def provider_id(self) -> str:
        """Unique identifier for this endpoint, e.g. OpenTDB-Hard"""
        if self._label:
            return self._label
        difficulty = parse_qs(urlparse(self.url).query).get("difficulty")
        if difficulty:
            return f"{self.name}-{difficulty[0].capitalize()}"
        return self.name

    @abstractmethod
    def parse(self, data: Any) -> List[Question]:
        """Convert a decoded response body into normalized Questions"""
        pass

    async def fetch(self, session: aiohttp.ClientSession) -> List[Question]:
        """Fetch and parse one batch of questions"""
        async with session.get(self.url) as response:
            if response.status != 200:
                raise ProviderFailure(self.provider_id, f"HTTP {response.status}")
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raise ProviderFailure(self.provider_id, f"invalid JSON: {e}")

        try:
            return self.parse(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderFailure(self.provider_id, f"unexpected response shape: {e}")

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "provider_id": self.provider_id,
            "url": self.url,
        }
