# quiz/models.py - Core data types for the daily quiz

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

TIMEOUT_ANSWER = "No answer (timeout)"


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionState(Enum):
    """Lifecycle of a quiz session.

    COMPLETED is the only terminal state that records a completion.
    ABANDONED is an explicit quit at a continuation prompt and TIMED_OUT is
    the same abandonment triggered by the continuation timeout; both end the
    session without credit, so the participant may start again that day.
    """

    IDLE = "idle"
    QUESTION_ASKED = "question_asked"
    ANSWER_REVEALED = "answer_revealed"
    CONTINUATION = "continuation"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ABANDONED, SessionState.TIMED_OUT)


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question in the normalized format"""
    question: str
    answer: str
    options: Tuple[str, ...]
    difficulty: Difficulty
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "answer": self.answer,
            "options": list(self.options),
            "difficulty": self.difficulty.value,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            question=data["question"],
            answer=data["answer"],
            options=tuple(data["options"]),
            difficulty=Difficulty(data["difficulty"]),
            source=data.get("source", "unknown"),
        )


@dataclass
class QuestionSet:
    """Prepared questions for one session: the active sequence plus reroll reserve"""
    active: List[Question]
    reserve: List[Question] = field(default_factory=list)
    created_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": [q.to_dict() for q in self.active],
            "reserve": [q.to_dict() for q in self.reserve],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionSet":
        return cls(
            active=[Question.from_dict(q) for q in data["active"]],
            reserve=[Question.from_dict(q) for q in data.get("reserve", [])],
            created_at=data.get("created_at", 0.0),
        )


@dataclass
class Answer:
    question_index: int
    selected_answer: str
    correct_answer: str
    is_correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_index": self.question_index,
            "selected_answer": self.selected_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Answer":
        return cls(**data)


@dataclass
class QuizSession:
    """In-flight state of one participant's daily quiz.

    At most one session exists per (participant_id, community_id). The score
    always equals the number of correct answers and never exceeds
    current_index.
    """
    participant_id: str
    community_id: str
    questions: List[Question]
    reserve: List[Question] = field(default_factory=list)
    current_index: int = 0
    score: int = 0
    answers: List[Answer] = field(default_factory=list)
    started_at: float = 0.0
    time_remaining: float = 0.0
    rerolls_used: int = 0
    state: SessionState = SessionState.IDLE

    @property
    def key(self) -> Tuple[str, str]:
        return (self.participant_id, self.community_id)

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def last_answer(self) -> Optional[Answer]:
        return self.answers[-1] if self.answers else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "community_id": self.community_id,
            "questions": [q.to_dict() for q in self.questions],
            "reserve": [q.to_dict() for q in self.reserve],
            "current_index": self.current_index,
            "score": self.score,
            "answers": [a.to_dict() for a in self.answers],
            "started_at": self.started_at,
            "time_remaining": self.time_remaining,
            "rerolls_used": self.rerolls_used,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuizSession":
        return cls(
            participant_id=data["participant_id"],
            community_id=data["community_id"],
            questions=[Question.from_dict(q) for q in data["questions"]],
            reserve=[Question.from_dict(q) for q in data.get("reserve", [])],
            current_index=data.get("current_index", 0),
            score=data.get("score", 0),
            answers=[Answer.from_dict(a) for a in data.get("answers", [])],
            started_at=data.get("started_at", 0.0),
            time_remaining=data.get("time_remaining", 0.0),
            rerolls_used=data.get("rerolls_used", 0),
            state=SessionState(data.get("state", SessionState.IDLE.value)),
        )


@dataclass
class CompletionRecord:
    participant_id: str
    community_id: str
    service_date: str  # YYYY-MM-DD
    score: int
    tier: int
    completed_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "community_id": self.community_id,
            "service_date": self.service_date,
            "score": self.score,
            "tier": self.tier,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompletionRecord":
        return cls(
            participant_id=str(data["participant_id"]),
            community_id=str(data["community_id"]),
            service_date=data["service_date"],
            score=int(data["score"]),
            tier=int(data["tier"]),
            completed_at=float(data["completed_at"]),
        )


@dataclass
class QuestionHistoryEntry:
    participant_id: str
    community_id: str
    question_hash: str
    question_text: str
    asked_at: float
