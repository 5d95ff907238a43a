# quiz/providers/__init__.py - Question provider package

from quiz.providers.base import QuestionProvider
from quiz.providers.opentdb import OpenTDBProvider
from quiz.providers.trivia_api import TriviaAPIProvider
from quiz.providers.aniquiz import AniQuizProvider
from quiz.providers.gateway import ProviderGateway, build_providers
from quiz.providers.monitor import ProviderMonitor

__all__ = [
    "QuestionProvider",
    "OpenTDBProvider",
    "TriviaAPIProvider",
    "AniQuizProvider",
    "ProviderGateway",
    "ProviderMonitor",
    "build_providers",
]
