import asyncio

import pytest

from quiz.errors import AlreadyCompletedToday, ConcurrentStartConflict, InvalidTransition
from quiz.models import TIMEOUT_ANSWER, SessionState
from tests.conftest import COMMUNITY, PARTICIPANT, RecordingListener, StubGateway, wait_until


def correct_option(session):
    question = session.current_question
    return question.options.index(question.answer)


def wrong_option(session):
    question = session.current_question
    return next(i for i, option in enumerate(question.options) if option != question.answer)


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
async def app(make_app, listener):
    return await make_app(listener=listener)


async def answer(app, session, correct=True):
    option = correct_option(session) if correct else wrong_option(session)
    return await app.engine.submit_answer(PARTICIPANT, COMMUNITY, session.current_index, option)


class TestStart:
    async def test_first_question_is_asked(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)

        assert session.state == SessionState.QUESTION_ASKED
        assert session.current_index == 0
        assert len(session.questions) == 10
        assert len(session.reserve) == 3
        assert listener.names() == ["question"]
        assert app.engine.has_active_session(PARTICIPANT, COMMUNITY)

    async def test_session_is_persisted(self, app):
        await app.start_quiz(PARTICIPANT, COMMUNITY)

        stored = await app.engine.sessions.read((PARTICIPANT, COMMUNITY))
        assert stored.state == SessionState.QUESTION_ASKED
        assert stored.time_remaining == pytest.approx(0.4)

    async def test_concurrent_starts_admit_one(self, app):
        results = await asyncio.gather(
            app.start_quiz(PARTICIPANT, COMMUNITY),
            app.start_quiz(PARTICIPANT, COMMUNITY),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConcurrentStartConflict)]
        assert len(conflicts) == 1
        assert app.engine.active_count == 1

    async def test_second_start_while_active_is_rejected(self, app):
        await app.start_quiz(PARTICIPANT, COMMUNITY)
        with pytest.raises(ConcurrentStartConflict):
            await app.start_quiz(PARTICIPANT, COMMUNITY)

    async def test_other_community_is_independent(self, app):
        await app.start_quiz(PARTICIPANT, COMMUNITY)
        await app.start_quiz(PARTICIPANT, "guild-2")
        assert app.engine.active_count == 2

    async def test_listener_errors_do_not_break_the_session(self, make_app):
        class BrokenListener(RecordingListener):
            async def on_question(self, session, question):
                raise RuntimeError("render failed")

        app = await make_app(listener=BrokenListener())
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        assert session.state == SessionState.QUESTION_ASKED


class TestAnswering:
    async def test_correct_answer_goes_to_continuation(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)

        assert session.state == SessionState.CONTINUATION
        assert session.score == 1
        assert session.current_index == 1
        assert session.last_answer.is_correct
        assert listener.names() == ["question", "answer", "continuation"]

    async def test_wrong_answer_reveals_then_continues(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session, correct=False)

        assert session.state == SessionState.ANSWER_REVEALED
        assert session.score == 0
        await wait_until(lambda: session.state == SessionState.CONTINUATION)
        assert listener.names() == ["question", "answer", "reveal", "continuation"]
        _, revealed = listener.events[2]
        assert revealed.correct_answer == session.questions[0].answer

    async def test_continue_asks_next_question(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        await app.engine.continue_session(PARTICIPANT, COMMUNITY)

        assert session.state == SessionState.QUESTION_ASKED
        assert listener.events[-1] == ("question", session.questions[1])

    async def test_stale_question_index_is_rejected(self, app):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        await app.engine.continue_session(PARTICIPANT, COMMUNITY)

        with pytest.raises(InvalidTransition):
            await app.engine.submit_answer(PARTICIPANT, COMMUNITY, 0, 0)
        assert session.score == 1

    async def test_answer_during_continuation_is_rejected(self, app):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        with pytest.raises(InvalidTransition):
            await app.engine.submit_answer(PARTICIPANT, COMMUNITY, 1, 0)

    async def test_out_of_range_option_is_rejected(self, app):
        await app.start_quiz(PARTICIPANT, COMMUNITY)
        with pytest.raises(InvalidTransition):
            await app.engine.submit_answer(PARTICIPANT, COMMUNITY, 0, 9)

    async def test_answer_without_session_is_rejected(self, app):
        with pytest.raises(InvalidTransition):
            await app.engine.submit_answer(PARTICIPANT, COMMUNITY, 0, 0)


class TestCompletion:
    async def test_full_run_records_completion(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        for i in range(10):
            await answer(app, session, correct=i not in (0, 4, 8))
            if i < 9:
                await wait_until(lambda: session.state == SessionState.CONTINUATION)
                await app.engine.continue_session(PARTICIPANT, COMMUNITY)

        assert session.state == SessionState.COMPLETED
        assert session.score == 7
        assert session.score == sum(a.is_correct for a in session.answers)
        assert not app.engine.has_active_session(PARTICIPANT, COMMUNITY)
        assert await app.engine.sessions.read((PARTICIPANT, COMMUNITY)) is None

        name, record = listener.events[-1]
        assert name == "completed"
        assert (record.score, record.tier) == (7, 7)
        assert record.service_date == "2024-06-15"
        assert await app.completions.has_completed_today(PARTICIPANT, COMMUNITY) == record

        with pytest.raises(AlreadyCompletedToday):
            await app.start_quiz(PARTICIPANT, COMMUNITY)

    async def test_score_never_exceeds_answered(self, app):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        assert session.score <= session.current_index


class TestReroll:
    async def test_reroll_swaps_in_reserve_question(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        replacement = session.reserve[0]

        await app.engine.request_reroll(PARTICIPANT, COMMUNITY)

        assert session.questions[0] == replacement
        assert session.current_index == 0
        assert session.rerolls_used == 1
        assert len(session.reserve) == 2
        assert listener.names() == ["question", "question"]

    async def test_reroll_limit(self, app):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        for _ in range(3):
            await app.engine.request_reroll(PARTICIPANT, COMMUNITY)
        before = session.to_dict()

        with pytest.raises(InvalidTransition):
            await app.engine.request_reroll(PARTICIPANT, COMMUNITY)
        assert session.rerolls_used == 3
        assert session.to_dict() == before

    async def test_reroll_needs_reserve(self, make_app):
        app = await make_app(MAX_REROLLS=5)
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        for _ in range(3):
            await app.engine.request_reroll(PARTICIPANT, COMMUNITY)

        with pytest.raises(InvalidTransition):
            await app.engine.request_reroll(PARTICIPANT, COMMUNITY)
        assert session.reserve == []

    async def test_reroll_only_while_question_is_open(self, app):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        with pytest.raises(InvalidTransition):
            await app.engine.request_reroll(PARTICIPANT, COMMUNITY)


class TestTimers:
    async def test_countdown_ticks_then_times_out(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)

        await wait_until(lambda: session.answers)

        answer_ = session.answers[0]
        assert answer_.selected_answer == TIMEOUT_ANSWER
        assert not answer_.is_correct
        assert session.score == 0
        assert "tick" in listener.names()
        ticks = [remaining for name, remaining in listener.events if name == "tick"]
        assert ticks == sorted(ticks, reverse=True)
        await wait_until(lambda: session.state == SessionState.CONTINUATION)

    async def test_answer_cancels_countdown(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        await asyncio.sleep(0.5)

        assert len(session.answers) == 1
        assert session.state == SessionState.CONTINUATION

    async def test_continuation_times_out(self, make_app, listener):
        app = await make_app(listener=listener, CONTINUATION_TIMEOUT=0.1)
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)

        await wait_until(lambda: not app.engine.has_active_session(PARTICIPANT, COMMUNITY))

        assert session.state == SessionState.TIMED_OUT
        assert session.state.is_terminal
        assert listener.events[-1] == ("abandoned", SessionState.TIMED_OUT)
        assert await app.engine.sessions.read((PARTICIPANT, COMMUNITY)) is None
        assert await app.completions.has_completed_today(PARTICIPANT, COMMUNITY) is None
        await app.start_quiz(PARTICIPANT, COMMUNITY)


class TestAbandon:
    async def test_abandon_from_continuation(self, app, listener):
        session = await app.start_quiz(PARTICIPANT, COMMUNITY)
        await answer(app, session)
        await app.engine.abandon(PARTICIPANT, COMMUNITY)

        assert session.state == SessionState.ABANDONED
        assert listener.events[-1] == ("abandoned", SessionState.ABANDONED)
        assert app.engine.active_count == 0
        assert await app.engine.sessions.read((PARTICIPANT, COMMUNITY)) is None
        assert await app.completions.has_completed_today(PARTICIPANT, COMMUNITY) is None

        # Abandoning forfeits nothing: a new session can start
        await app.start_quiz(PARTICIPANT, COMMUNITY)

    async def test_abandon_rejected_while_question_open(self, app):
        await app.start_quiz(PARTICIPANT, COMMUNITY)
        with pytest.raises(InvalidTransition):
            await app.engine.abandon(PARTICIPANT, COMMUNITY)


class TestApp:
    async def test_request_quiz_warms_the_question_set(self, make_app):
        gateway = StubGateway()
        app = await make_app(gateway=gateway)

        await app.request_quiz(PARTICIPANT, COMMUNITY)
        await app.start_quiz(PARTICIPANT, COMMUNITY)

        assert gateway.calls == 1

    async def test_request_quiz_rejects_active_and_completed(self, app, now):
        await app.start_quiz(PARTICIPANT, COMMUNITY)
        with pytest.raises(ConcurrentStartConflict):
            await app.request_quiz(PARTICIPANT, COMMUNITY)

        await app.completions.record("player-2", COMMUNITY, 5)
        with pytest.raises(AlreadyCompletedToday):
            await app.request_quiz("player-2", COMMUNITY)

    async def test_orphaned_sessions_are_discarded_on_start(self, make_app, tmp_path):
        path = str(tmp_path / "quiz.db")
        first = await make_app(DATABASE_PATH=path)
        await first.start_quiz(PARTICIPANT, COMMUNITY)
        await first.close()

        second = await make_app(DATABASE_PATH=path)
        assert await second.db.kv_get(f"active-session:{PARTICIPANT}:{COMMUNITY}", 0) is None
        await second.start_quiz(PARTICIPANT, COMMUNITY)

    async def test_close_cancels_pending_prefetch(self, make_app):
        class SlowGateway(StubGateway):
            cancelled = False

            async def fetch_all(self, accept=None):
                self.calls += 1
                try:
                    await asyncio.sleep(5)
                except asyncio.CancelledError:
                    self.cancelled = True
                    raise
                return []

        gateway = SlowGateway()
        app = await make_app(gateway=gateway)
        await app.request_quiz(PARTICIPANT, COMMUNITY)
        await wait_until(lambda: gateway.calls == 1)

        await app.close()

        assert gateway.cancelled
        assert app.supplier._inflight == {}
        assert gateway._session is None
