import asyncio
import datetime
import random
from types import SimpleNamespace

import pytest
import pytz
from fakeredis import aioredis as fake_aioredis

from quiz.app import QuizApp
from quiz.models import Difficulty, Question
from quiz.providers.gateway import ProviderGateway
from quiz.service_day import ServiceClock
from quiz.settings import QuizSettings
from quiz.storage.durable import QuizDatabase
from quiz.storage.volatile import VolatileStore

PARTICIPANT = "user-1"
COMMUNITY = "guild-1"

FAST_CONFIG = {
    "QUESTION_TIME_LIMIT": 0.4,
    "COUNTDOWN_INTERVAL": 0.1,
    "REVEAL_DELAY": 0.05,
    "CONTINUATION_TIMEOUT": 5,
    "BATCH_PREPARE_DELAY": 0,
    "RESET_COMMUNITY_DELAY": 0,
    "DATABASE_PATH": ":memory:",
    "PROVIDER_ENDPOINTS": [],
}


class FakeNow:
    """Settable wall clock"""

    def __init__(self, value: datetime.datetime):
        self.value = value

    def __call__(self):
        return self.value

    def advance(self, **kwargs):
        self.value += datetime.timedelta(**kwargs)


class StubGateway(ProviderGateway):
    """Gateway that returns canned candidates instead of calling HTTP"""

    def __init__(self, candidates=None):
        super().__init__([])
        self.candidates = list(candidates or [])
        self.calls = 0

    async def fetch_all(self, accept=None):
        self.calls += 1
        await asyncio.sleep(0)
        if accept is None:
            return list(self.candidates)
        return [q for q in self.candidates if accept(q)]


class RecordingListener:
    def __init__(self):
        self.events = []

    def names(self):
        return [name for name, _ in self.events]

    async def on_question(self, session, question):
        self.events.append(("question", question))

    async def on_tick(self, session):
        self.events.append(("tick", session.time_remaining))

    async def on_answer(self, session, answer):
        self.events.append(("answer", answer))

    async def on_reveal(self, session, answer):
        self.events.append(("reveal", answer))

    async def on_continuation(self, session):
        self.events.append(("continuation", session.current_index))

    async def on_completed(self, session, record):
        self.events.append(("completed", record))

    async def on_abandoned(self, session):
        self.events.append(("abandoned", session.state))


def make_question(text, difficulty=Difficulty.MEDIUM, source="OpenTDB", answer="Naruto Uzumaki"):
    options = (answer, "Sasuke Uchiha", "Sakura Haruno", "Kakashi Hatake")
    return Question(question=text, answer=answer, options=options, difficulty=difficulty, source=source)


def make_settings(**overrides):
    return QuizSettings(SimpleNamespace(**dict(FAST_CONFIG, **overrides)))


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def now():
    # Noon in New York, well inside the 2024-06-15 service day
    return FakeNow(pytz.utc.localize(datetime.datetime(2024, 6, 15, 16, 0)))


@pytest.fixture
def clock(settings, now):
    return ServiceClock(settings, now)


@pytest.fixture
async def db():
    database = QuizDatabase(":memory:")
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
def redis_client():
    return fake_aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def volatile(redis_client):
    return VolatileStore(redis_client, "Quiz-Bot:")


@pytest.fixture
async def make_app(now):
    apps = []

    async def factory(gateway=None, listener=None, volatile=None, **overrides):
        settings = make_settings(**overrides)
        app = QuizApp(
            settings,
            listener=listener,
            clock=ServiceClock(settings, now),
            volatile=volatile or VolatileStore(fake_aioredis.FakeRedis(decode_responses=True)),
            gateway=gateway or StubGateway(),
            rng=random.Random(7),
        )
        await app.start(schedule_reset=False)
        apps.append(app)
        return app

    yield factory
    for app in apps:
        await app.close()
