# quiz/engine.py - Quiz session state machine

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple

from quiz.completion import CompletionService
from quiz.errors import (
    AlreadyCompletedToday,
    ConcurrentStartConflict,
    InvalidTransition,
    StoreUnavailable,
)
from quiz.history import QuestionHistory
from quiz.models import Answer, CompletionRecord, Question, QuizSession, SessionState, TIMEOUT_ANSWER
from quiz.storage.dual_tier import DualTierStore
from quiz.supplier import QuestionSupplier

logger = logging.getLogger(__name__)

SessionKey = Tuple[str, str]
Event = Tuple[str, tuple]


class SessionListener:
    """Callbacks for whatever renders the quiz. Every hook is optional."""

    async def on_question(self, session: QuizSession, question: Question):
        pass

    async def on_tick(self, session: QuizSession):
        pass

    async def on_answer(self, session: QuizSession, answer: Answer):
        pass

    async def on_reveal(self, session: QuizSession, answer: Answer):
        pass

    async def on_continuation(self, session: QuizSession):
        pass

    async def on_completed(self, session: QuizSession, record: Optional[CompletionRecord]):
        pass

    async def on_abandoned(self, session: QuizSession):
        pass


@dataclass
class _SessionHandle:
    session: QuizSession
    lock: asyncio.Lock
    timer: Optional[asyncio.Task] = None
    token: int = 0


class SessionEngine:
    """Drives every active session through its states.

    One handle per (participant, community) holds the session, a lock that
    serializes its transitions and the timer for the current stage. Every
    transition bumps the handle's token, so a timer that fires after the
    stage it belonged to has ended does nothing. Listener hooks run after
    the lock is released, so a listener may call back into the engine.
    """

    def __init__(
        self,
        supplier: QuestionSupplier,
        completions: CompletionService,
        sessions: DualTierStore,
        history: QuestionHistory,
        settings,
        clock,
        listener: Optional[SessionListener] = None,
    ):
        self.supplier = supplier
        self.completions = completions
        self.sessions = sessions
        self.history = history
        self.clock = clock
        self.listener = listener or SessionListener()

        self.total_questions = settings.total_questions
        self.max_rerolls = settings.max_rerolls
        self.time_limit = settings.question_time_limit
        self.tick_interval = settings.countdown_interval
        self.reveal_delay = settings.reveal_delay
        self.continuation_timeout = settings.continuation_timeout

        self._registry: Dict[SessionKey, _SessionHandle] = {}
        self._starting: Set[SessionKey] = set()

    # ---- boundary ----

    async def start_session(self, participant_id: str, community_id: str) -> QuizSession:
        key = (participant_id, community_id)
        if key in self._registry or key in self._starting:
            raise ConcurrentStartConflict(participant_id, community_id)

        self._starting.add(key)
        try:
            record = await self.completions.has_completed_today(participant_id, community_id)
            if record is not None:
                raise AlreadyCompletedToday(record)

            question_set = await self.supplier.get_or_prepare(participant_id, community_id)
            session = QuizSession(
                participant_id=participant_id,
                community_id=community_id,
                questions=list(question_set.active[:self.total_questions]),
                reserve=list(question_set.reserve),
                started_at=self.clock.timestamp(),
            )

            if not await self.sessions.insert_if_absent(key, session):
                raise ConcurrentStartConflict(participant_id, community_id)

            handle = _SessionHandle(session=session, lock=asyncio.Lock())
            self._registry[key] = handle
        finally:
            self._starting.discard(key)

        logger.info(f"🎮 Quiz started for {participant_id} in {community_id}")
        await self.supplier.discard(participant_id, community_id)

        async with handle.lock:
            events = await self._ask(handle)
        await self._emit(events)
        return session

    async def submit_answer(self, participant_id: str, community_id: str,
                            question_index: int, option_index: int) -> QuizSession:
        """Answer the current question by option position; correctness is decided here"""
        handle = self._require_handle(participant_id, community_id, "answer")
        async with handle.lock:
            session = handle.session
            if session.state != SessionState.QUESTION_ASKED:
                raise InvalidTransition("answer", session.state)
            if question_index != session.current_index:
                raise InvalidTransition(f"answer question {question_index + 1}", session.state)
            question = session.current_question
            if not 0 <= option_index < len(question.options):
                raise InvalidTransition(f"choose option {option_index}", session.state)

            events = await self._resolve_answer(handle, question.options[option_index])
        await self._emit(events)
        return session

    async def request_reroll(self, participant_id: str, community_id: str) -> QuizSession:
        """Swap the current question for the next reserve question"""
        handle = self._require_handle(participant_id, community_id, "reroll")
        async with handle.lock:
            session = handle.session
            if session.state != SessionState.QUESTION_ASKED:
                raise InvalidTransition("reroll", session.state)
            if session.rerolls_used >= self.max_rerolls:
                raise InvalidTransition("reroll (no rerolls left)", session.state)
            if not session.reserve:
                raise InvalidTransition("reroll (no reserve questions)", session.state)

            self._cancel_timer(handle)
            replacement = session.reserve.pop(0)
            session.questions[session.current_index] = replacement
            session.rerolls_used += 1
            logger.info(
                f"🎲 Reroll {session.rerolls_used}/{self.max_rerolls} for {participant_id} "
                f"on question {session.current_index + 1}"
            )
            events = await self._ask(handle)
        await self._emit(events)
        return session

    async def continue_session(self, participant_id: str, community_id: str) -> QuizSession:
        handle = self._require_handle(participant_id, community_id, "continue")
        async with handle.lock:
            session = handle.session
            if session.state != SessionState.CONTINUATION:
                raise InvalidTransition("continue", session.state)
            self._cancel_timer(handle)
            events = await self._ask(handle)
        await self._emit(events)
        return session

    async def abandon(self, participant_id: str, community_id: str) -> QuizSession:
        """Quit at a continuation prompt; no completion is recorded"""
        handle = self._require_handle(participant_id, community_id, "abandon")
        async with handle.lock:
            session = handle.session
            if session.state != SessionState.CONTINUATION:
                raise InvalidTransition("abandon", session.state)
            session.state = SessionState.ABANDONED
            events = await self._end_without_credit(handle)
        await self._emit(events)
        return session

    def get_session(self, participant_id: str, community_id: str) -> Optional[QuizSession]:
        handle = self._registry.get((participant_id, community_id))
        return handle.session if handle else None

    def has_active_session(self, participant_id: str, community_id: str) -> bool:
        key = (participant_id, community_id)
        return key in self._registry or key in self._starting

    @property
    def active_count(self) -> int:
        return len(self._registry)

    async def close(self):
        """Stop every stage timer; persisted sessions expire on their own"""
        for handle in list(self._registry.values()):
            self._cancel_timer(handle)
        self._registry.clear()
        logger.info("Session engine stopped")

    # ---- transitions (caller holds the handle lock) ----

    async def _ask(self, handle: _SessionHandle) -> List[Event]:
        session = handle.session
        session.state = SessionState.QUESTION_ASKED
        session.time_remaining = self.time_limit
        await self._persist(session)
        self._arm(handle, self._run_countdown)

        question = session.current_question
        await self.history.record(session.participant_id, session.community_id, question)
        return [("on_question", (session, question))]

    async def _resolve_answer(self, handle: _SessionHandle, selected: str,
                              timed_out: bool = False) -> List[Event]:
        self._cancel_timer(handle)
        session = handle.session
        question = session.current_question
        is_correct = not timed_out and selected == question.answer

        answer = Answer(
            question_index=session.current_index,
            selected_answer=selected,
            correct_answer=question.answer,
            is_correct=is_correct,
        )
        session.answers.append(answer)
        if is_correct:
            session.score += 1
        session.current_index += 1
        events: List[Event] = [("on_answer", (session, answer))]

        if session.current_index >= self.total_questions:
            session.state = SessionState.COMPLETED
            events.extend(await self._complete(handle))
        elif is_correct:
            events.extend(await self._enter_continuation(handle))
        else:
            session.state = SessionState.ANSWER_REVEALED
            await self._persist(session)
            self._arm(handle, self._run_reveal)
            events.append(("on_reveal", (session, answer)))
        return events

    async def _enter_continuation(self, handle: _SessionHandle) -> List[Event]:
        session = handle.session
        session.state = SessionState.CONTINUATION
        await self._persist(session)
        self._arm(handle, self._run_continuation_timeout)
        return [("on_continuation", (session,))]

    async def _complete(self, handle: _SessionHandle) -> List[Event]:
        session = handle.session
        record = None
        try:
            record = await self.completions.record(
                session.participant_id, session.community_id, session.score, tier=session.score
            )
        except StoreUnavailable as e:
            logger.error(f"Could not record completion for {session.participant_id}: {e}")
        await self._teardown(handle)
        logger.info(
            f"🏆 Quiz completed by {session.participant_id} in {session.community_id}: "
            f"{session.score}/{self.total_questions}"
        )
        return [("on_completed", (session, record))]

    async def _end_without_credit(self, handle: _SessionHandle) -> List[Event]:
        session = handle.session
        await self._teardown(handle)
        logger.info(
            f"Quiz {session.state.value} for {session.participant_id} in {session.community_id} "
            f"after {session.current_index} questions"
        )
        return [("on_abandoned", (session,))]

    async def _teardown(self, handle: _SessionHandle):
        self._cancel_timer(handle)
        # Stored copy goes first so an inactive session is never still readable
        await self.sessions.delete(handle.session.key)
        self._registry.pop(handle.session.key, None)

    async def _persist(self, session: QuizSession):
        await self.sessions.write(session.key, session)

    # ---- stage timers ----

    def _arm(self, handle: _SessionHandle, runner: Callable[[_SessionHandle, int], Awaitable[None]]):
        self._cancel_timer(handle)
        token = handle.token
        handle.timer = asyncio.create_task(runner(handle, token))

    def _cancel_timer(self, handle: _SessionHandle):
        handle.token += 1
        timer = handle.timer
        handle.timer = None
        if timer is not None and not timer.done() and timer is not asyncio.current_task():
            timer.cancel()

    async def _run_countdown(self, handle: _SessionHandle, token: int):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.time_limit
        try:
            while True:
                remaining = deadline - loop.time()
                await asyncio.sleep(max(0.0, min(self.tick_interval, remaining)))
                async with handle.lock:
                    if handle.token != token:
                        return
                    remaining = max(0.0, deadline - loop.time())
                    handle.session.time_remaining = remaining
                    if remaining > 0:
                        events = [("on_tick", (handle.session,))]
                    else:
                        logger.info(
                            f"⏰ Question {handle.session.current_index + 1} timed out "
                            f"for {handle.session.participant_id}"
                        )
                        events = await self._resolve_answer(handle, TIMEOUT_ANSWER, timed_out=True)
                await self._emit(events)
                if remaining <= 0:
                    return
        except Exception as e:
            logger.error(f"Countdown failed for {handle.session.key}: {e}", exc_info=True)

    async def _run_reveal(self, handle: _SessionHandle, token: int):
        try:
            await asyncio.sleep(self.reveal_delay)
            async with handle.lock:
                if handle.token != token:
                    return
                events = await self._enter_continuation(handle)
            await self._emit(events)
        except Exception as e:
            logger.error(f"Reveal timer failed for {handle.session.key}: {e}", exc_info=True)

    async def _run_continuation_timeout(self, handle: _SessionHandle, token: int):
        try:
            await asyncio.sleep(self.continuation_timeout)
            async with handle.lock:
                if handle.token != token:
                    return
                handle.session.state = SessionState.TIMED_OUT
                events = await self._end_without_credit(handle)
            await self._emit(events)
        except Exception as e:
            logger.error(f"Continuation timer failed for {handle.session.key}: {e}", exc_info=True)

    # ---- helpers ----

    def _require_handle(self, participant_id: str, community_id: str, action: str) -> _SessionHandle:
        handle = self._registry.get((participant_id, community_id))
        if handle is None:
            raise InvalidTransition(action, "no active session")
        return handle

    async def _emit(self, events: List[Event]):
        for hook_name, args in events:
            hook: Callable[..., Any] = getattr(self.listener, hook_name)
            try:
                await hook(*args)
            except Exception as e:
                logger.error(f"Listener {hook_name} failed: {e}", exc_info=True)
