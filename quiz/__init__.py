"""
Daily Quiz Package

Once-per-day timed anime quiz: multi-provider question supply, session
state machine and Redis/SQLite persistence.
"""

from .app import QuizApp
from .engine import SessionEngine, SessionListener
from .errors import (
    AlreadyCompletedToday,
    ConcurrentStartConflict,
    InsufficientContent,
    InvalidTransition,
    ProviderFailure,
    QuizError,
    StoreUnavailable,
)
from .models import CompletionRecord, Difficulty, Question, QuestionSet, QuizSession, SessionState
from .settings import QuizSettings, load_settings

__all__ = [
    'QuizApp',
    'SessionEngine',
    'SessionListener',
    'QuizError',
    'ProviderFailure',
    'InsufficientContent',
    'StoreUnavailable',
    'InvalidTransition',
    'ConcurrentStartConflict',
    'AlreadyCompletedToday',
    'CompletionRecord',
    'Difficulty',
    'Question',
    'QuestionSet',
    'QuizSession',
    'SessionState',
    'QuizSettings',
    'load_settings',
]
