# quiz/settings.py - Quiz configuration read from the optional config module

import logging

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_ENDPOINTS = [
    # Anime & Manga category, mixed difficulty
    'https://opentdb.com/api.php?amount=5&category=31&type=multiple',
    'https://the-trivia-api.com/v2/questions?categories=anime_and_manga&limit=5',

    # Difficulty-specific batches
    'https://opentdb.com/api.php?amount=3&category=31&type=multiple&difficulty=easy',
    'https://opentdb.com/api.php?amount=3&category=31&type=multiple&difficulty=medium',
    'https://opentdb.com/api.php?amount=3&category=31&type=multiple&difficulty=hard',

    'https://aniquizapi.vercel.app/api/quiz?difficulty=medium',
    'https://aniquizapi.vercel.app/api/quiz?difficulty=easy',
    'https://aniquizapi.vercel.app/api/quiz?difficulty=hard',
]

HOUR = 60 * 60
DAY = 24 * HOUR


class QuizSettings:
    """Configuration for the quiz system"""

    def __init__(self, config_module=None):
        self.config = config_module

        # Session timing (seconds)
        self.question_time_limit = self._get_config_value('QUESTION_TIME_LIMIT', 20)
        self.countdown_interval = self._get_config_value('COUNTDOWN_INTERVAL', 2)
        self.reveal_delay = self._get_config_value('REVEAL_DELAY', 3)
        self.continuation_timeout = self._get_config_value('CONTINUATION_TIMEOUT', 60)

        # Session shape
        self.total_questions = self._get_config_value('TOTAL_QUESTIONS', 10)
        self.max_rerolls = self._get_config_value('MAX_REROLLS', 3)
        self.reserve_questions = self._get_config_value('RESERVE_QUESTIONS', 3)
        self.difficulty_quota = self._get_config_value(
            'DIFFICULTY_QUOTA', {'easy': 2, 'medium': 4, 'hard': 4}
        )

        # Daily reset
        self.reset_hour = self._get_config_value('DAILY_RESET_HOUR', 0)
        self.reset_minute = self._get_config_value('DAILY_RESET_MINUTE', 30)
        self.reset_timezone = self._get_config_value('RESET_TIMEZONE', 'America/New_York')
        self.reset_community_delay = self._get_config_value('RESET_COMMUNITY_DELAY', 1.0)

        # Storage
        self.redis_url = self._get_config_value('REDIS_URL', None)
        self.redis_key_prefix = self._get_config_value('REDIS_KEY_PREFIX', 'Quiz-Bot:')
        self.database_path = self._get_config_value('DATABASE_PATH', 'data/quiz.db')
        self.memory_cache_enabled = self._get_config_value('MEMORY_CACHE_ENABLED', True)

        # Time-to-live per record kind (seconds)
        self.completion_ttl = self._get_config_value('COMPLETION_TTL', 25 * HOUR)
        self.active_session_ttl = self._get_config_value('ACTIVE_SESSION_TTL', 30 * 60)
        self.question_set_ttl = self._get_config_value('QUESTION_SET_TTL', 20 * 60)
        self.recent_questions_ttl = self._get_config_value('RECENT_QUESTIONS_TTL', 7 * DAY)
        self.reset_marker_ttl = self._get_config_value('RESET_MARKER_TTL', 48 * HOUR)
        self.leaderboard_ttl = self._get_config_value('LEADERBOARD_TTL', HOUR)

        # Retention (days)
        self.history_lookback_days = self._get_config_value('HISTORY_LOOKBACK_DAYS', 30)
        self.completion_retention_days = self._get_config_value('COMPLETION_RETENTION_DAYS', 30)
        self.history_retention_days = self._get_config_value('HISTORY_RETENTION_DAYS', 60)

        # Providers
        self.provider_endpoints = list(self._get_config_value('PROVIDER_ENDPOINTS', DEFAULT_PROVIDER_ENDPOINTS))
        self.provider_timeout = self._get_config_value('PROVIDER_TIMEOUT', 10)
        self.provider_user_agent = self._get_config_value('PROVIDER_USER_AGENT', 'AnimeQuizBot/1.0')
        self.batch_prepare_delay = self._get_config_value('BATCH_PREPARE_DELAY', 0.5)

        self._validate()

    def _get_config_value(self, key: str, default):
        """Get configuration value with fallback to default"""
        if self.config and hasattr(self.config, key):
            return getattr(self.config, key)
        return default

    def _validate(self):
        if sum(self.difficulty_quota.values()) != self.total_questions:
            raise ValueError(
                f"DIFFICULTY_QUOTA adds up to {sum(self.difficulty_quota.values())}, "
                f"expected {self.total_questions}"
            )
        if not 0 <= self.reset_hour <= 23 or not 0 <= self.reset_minute <= 59:
            raise ValueError(f"Invalid daily reset time {self.reset_hour}:{self.reset_minute:02d}")
        if self.question_time_limit <= 0:
            raise ValueError("QUESTION_TIME_LIMIT must be positive")


def load_settings() -> QuizSettings:
    """Build settings from the local config module when one exists"""
    try:
        import config
    except ImportError:
        logger.info("No config module found, using default quiz settings")
        return QuizSettings()
    return QuizSettings(config)
