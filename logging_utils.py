# logging_utils.py
"""
Process-wide logging for the quiz service.

Records go to a size-rotated file under LOGS_DIR and to the console. The
quiz packages log under the ``quiz`` namespace; storage and HTTP libraries
are held at WARNING unless the config module lowers them.
"""

import logging
import os
import platform
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, List, Optional

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Library logger name -> config key overriding its level
LIBRARY_LEVEL_KEYS = {
    'aiohttp': 'AIOHTTP_LOG_LEVEL',
    'aiosqlite': 'AIOSQLITE_LOG_LEVEL',
    'redis': 'REDIS_LOG_LEVEL',
    'discord': 'DISCORD_LOG_LEVEL',
    'asyncio': 'ASYNCIO_LOG_LEVEL',
}


class LoggingConfig:
    """Logging options read from the config module"""

    def __init__(self, config_module=None):
        self.config = config_module

        self.log_level = self._get_config_value('LOG_LEVEL', logging.INFO)
        self.file_log_level = self._get_config_value('FILE_LOG_LEVEL', logging.DEBUG)
        self.logs_dir = self._get_config_value('LOGS_DIR', 'logs')
        self.log_file = self._get_config_value('LOG_FILE', 'quiz.log')
        self.max_bytes = self._get_config_value('MAX_LOG_SIZE', 5 * 1024 * 1024)
        self.backup_count = self._get_config_value('LOG_BACKUP_COUNT', 3)

        self.enable_file_logging = self._get_config_value('ENABLE_FILE_LOGGING', True)
        self.enable_console_logging = self._get_config_value('ENABLE_CONSOLE_LOGGING', True)

        self.third_party_levels: Dict[str, int] = {
            name: self._get_config_value(key, logging.WARNING)
            for name, key in LIBRARY_LEVEL_KEYS.items()
        }

    @property
    def log_path(self) -> str:
        return os.path.join(self.logs_dir, self.log_file)

    def _get_config_value(self, key: str, default):
        """Get configuration value with fallback to default"""
        if self.config and hasattr(self.config, key):
            return getattr(self.config, key)
        return default


class EnhancedLogger:
    """Installs the quiz handlers on the root logger, once per instance"""

    def __init__(self, config_module=None):
        self.config = LoggingConfig(config_module)
        self.logger: Optional[logging.Logger] = None

    def setup_logging(self) -> logging.Logger:
        if self.logger is not None:
            return self.logger

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)
        root.handlers.clear()
        for handler in self._build_handlers():
            root.addHandler(handler)

        for name, level in self.config.third_party_levels.items():
            logging.getLogger(name).setLevel(level)

        self.logger = logging.getLogger('quiz')
        return self.logger

    def _build_handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []
        if self.config.enable_file_logging:
            file_handler = self._file_handler()
            if file_handler is not None:
                handlers.append(file_handler)
        if self.config.enable_console_logging:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            console.setLevel(self.config.log_level)
            handlers.append(console)
        return handlers

    def _file_handler(self) -> Optional[RotatingFileHandler]:
        try:
            os.makedirs(self.config.logs_dir, exist_ok=True)
            handler = RotatingFileHandler(
                self.config.log_path,
                maxBytes=self.config.max_bytes,
                backupCount=self.config.backup_count,
                encoding='utf-8',
            )
        except OSError as e:
            print(f"Warning: file logging disabled, {self.config.log_path}: {e}", file=sys.stderr)
            return None
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handler.setLevel(self.config.file_log_level)
        return handler


def setup_logging(config_module=None) -> logging.Logger:
    """Setup logging and return the quiz logger"""
    return EnhancedLogger(config_module).setup_logging()


def log_system_info(logger: logging.Logger, additional_info: Optional[dict] = None):
    """Write the startup banner: interpreter, platform, then service details"""
    rule = "=" * 50
    logger.info(rule)
    logger.info("SYSTEM INFORMATION")
    logger.info(rule)
    logger.info(f"Python Version: {sys.version.split()[0]}")
    logger.info(f"Platform: {platform.platform()}")
    for key, value in (additional_info or {}).items():
        logger.info(f"{key}: {value}")
    logger.info(rule)
