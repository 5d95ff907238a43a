# quiz/errors.py - Error taxonomy shared by every quiz component

from typing import Optional


class QuizError(Exception):
    """Base class for quiz errors. user_message is safe to show to a participant."""

    user_message = "Something went wrong with the quiz. Please try again."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class ProviderFailure(QuizError):
    """A single provider fetch failed (timeout, HTTP error, malformed body)"""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class InsufficientContent(QuizError):
    user_message = "No quiz is available right now. Please try again later."

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(f"Only {available} usable questions, need {required}")


class StoreUnavailable(QuizError):
    user_message = "Quiz storage is temporarily unavailable. Please try again later."

    def __init__(self, tier: str, reason: str = ""):
        self.tier = tier
        self.reason = reason
        super().__init__(f"{tier} store unavailable: {reason}" if reason else f"{tier} store unavailable")


class InvalidTransition(QuizError):
    user_message = "That action isn't available right now."

    def __init__(self, action: str, state):
        self.action = action
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(f"Cannot {action} while session is {state_name}")


class ConcurrentStartConflict(QuizError):
    user_message = "You already have a quiz in progress."

    def __init__(self, participant_id: str, community_id: str):
        self.participant_id = participant_id
        self.community_id = community_id
        super().__init__(f"Session already active for {participant_id} in {community_id}")


class AlreadyCompletedToday(QuizError):
    user_message = "You already played today's quiz. Come back after the daily reset!"

    def __init__(self, record):
        self.record = record
        super().__init__(
            f"{record.participant_id} already completed {record.service_date} with {record.score}/10"
        )
