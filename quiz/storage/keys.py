# quiz/storage/keys.py - Key layout for every stored record kind

from typing import Tuple

SessionKey = Tuple[str, str]
CompletionKey = Tuple[str, str, str]


def completion_key(key: CompletionKey) -> str:
    participant_id, community_id, service_date = key
    return f"completion:{participant_id}:{community_id}:{service_date}"


def active_session_key(key: SessionKey) -> str:
    participant_id, community_id = key
    return f"active-session:{participant_id}:{community_id}"


def question_set_key(key: SessionKey) -> str:
    participant_id, community_id = key
    return f"question-set:{participant_id}:{community_id}"


def recent_questions_key(participant_id: str, community_id: str) -> str:
    return f"recent-question-set:{participant_id}:{community_id}"


def reset_marker_key(service_date: str) -> str:
    return f"reset-marker:{service_date}"


def leaderboard_key(community_id: str, service_date: str) -> str:
    return f"leaderboard:{community_id}:{service_date}"
