# quiz/providers/monitor.py - Per-provider call statistics and health grading

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Optional

logger = logging.getLogger(__name__)

MAX_RECENT_ERRORS = 5


@dataclass
class ProviderStats:
    calls: int = 0
    successes: int = 0
    failures: int = 0
    total_questions: int = 0
    valid_questions: int = 0
    total_response_time: float = 0.0
    last_success: Optional[float] = None
    last_failure: Optional[float] = None
    recent_errors: Deque[str] = field(default_factory=lambda: deque(maxlen=MAX_RECENT_ERRORS))

    @property
    def success_rate(self) -> float:
        return (self.successes / self.calls) * 100 if self.calls else 0.0

    @property
    def validation_rate(self) -> float:
        return (self.valid_questions / self.total_questions) * 100 if self.total_questions else 0.0

    @property
    def average_response_time(self) -> float:
        return self.total_response_time / self.calls if self.calls else 0.0


class ProviderMonitor:
    """Tracks how each provider endpoint behaves over the process lifetime"""

    def __init__(self):
        self.stats: Dict[str, ProviderStats] = {}
        self.started_at = time.time()

    def _stats_for(self, provider_id: str) -> ProviderStats:
        if provider_id not in self.stats:
            self.stats[provider_id] = ProviderStats()
        return self.stats[provider_id]

    def record_call(self, provider_id: str, success: bool, question_count: int = 0,
                    response_time: float = 0.0, error: Optional[str] = None):
        stats = self._stats_for(provider_id)
        stats.calls += 1
        stats.total_response_time += response_time
        if success:
            stats.successes += 1
            stats.total_questions += question_count
            stats.last_success = time.time()
        else:
            stats.failures += 1
            stats.last_failure = time.time()
            if error:
                stats.recent_errors.append(error)

    def record_validation(self, provider_id: str, valid_count: int):
        self._stats_for(provider_id).valid_questions += valid_count

    def get_health(self, provider_id: str) -> str:
        stats = self.stats.get(provider_id)
        if not stats:
            return "unknown"
        if stats.success_rate >= 90 and stats.validation_rate >= 70:
            return "excellent"
        if stats.success_rate >= 70 and stats.validation_rate >= 50:
            return "good"
        if stats.success_rate >= 50 and stats.validation_rate >= 30:
            return "fair"
        return "poor"

    def get_statistics(self) -> Dict[str, Any]:
        total_calls = sum(s.calls for s in self.stats.values())
        successes = sum(s.successes for s in self.stats.values())
        return {
            "runtime_seconds": round(time.time() - self.started_at),
            "total_calls": total_calls,
            "success_rate": round((successes / total_calls) * 100, 1) if total_calls else 0.0,
            "total_questions": sum(s.total_questions for s in self.stats.values()),
            "valid_questions": sum(s.valid_questions for s in self.stats.values()),
            "providers": {
                provider_id: {
                    "calls": s.calls,
                    "successes": s.successes,
                    "failures": s.failures,
                    "success_rate": round(s.success_rate, 1),
                    "validation_rate": round(s.validation_rate, 1),
                    "avg_response_ms": round(s.average_response_time * 1000),
                    "health": self.get_health(provider_id),
                    "last_error": s.recent_errors[-1] if s.recent_errors else None,
                }
                for provider_id, s in self.stats.items()
            },
        }

    def log_summary(self):
        stats = self.get_statistics()
        logger.info(
            f"📊 Provider summary: {stats['total_calls']} calls, "
            f"{stats['success_rate']}% success, {stats['valid_questions']}/{stats['total_questions']} valid"
        )
        for provider_id, info in stats["providers"].items():
            if info["health"] == "poor" and info["calls"] > 2:
                logger.warning(f"🔴 {provider_id} is consistently failing ({info['last_error']})")
