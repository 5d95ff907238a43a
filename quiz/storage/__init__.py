# quiz/storage/__init__.py - Dual-tier persistence for quiz state

from quiz.storage.durable import QuizDatabase
from quiz.storage.dual_tier import CompletionTier, DualTierStore, DurableTier, KeyValueTier
from quiz.storage.memory import MemoryCache
from quiz.storage.volatile import VolatileStore

__all__ = [
    "QuizDatabase",
    "DualTierStore",
    "DurableTier",
    "KeyValueTier",
    "CompletionTier",
    "MemoryCache",
    "VolatileStore",
]
