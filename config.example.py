# Copy to config.py and adjust. Every setting is optional.

# Storage
REDIS_URL = "redis://localhost:6379/0"
REDIS_KEY_PREFIX = "Quiz-Bot:"
DATABASE_PATH = "data/quiz.db"

# Session timing (seconds)
QUESTION_TIME_LIMIT = 20
COUNTDOWN_INTERVAL = 2
REVEAL_DELAY = 3
CONTINUATION_TIMEOUT = 60

# Daily reset in the reference timezone
DAILY_RESET_HOUR = 0
DAILY_RESET_MINUTE = 30
RESET_TIMEZONE = "America/New_York"

# Providers
PROVIDER_TIMEOUT = 10

# Logging
LOG_LEVEL = 20  # logging.INFO
LOGS_DIR = "logs"
ENABLE_FILE_LOGGING = True
