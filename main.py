import asyncio
import signal
from typing import Optional

from logging_utils import setup_logging, log_system_info
from quiz.app import QuizApp
from quiz.settings import load_settings

try:
    import config
except ImportError:
    config = None


class QuizRunner:
    """Runs the quiz backend until SIGINT/SIGTERM"""

    def __init__(self):
        self.logger = setup_logging(config)
        self.settings = load_settings()
        self.app: Optional[QuizApp] = None
        self._stop: Optional[asyncio.Event] = None

        log_system_info(self.logger, {
            'Version': getattr(config, 'BOT_VERSION', '1.0.0'),
            'Database': self.settings.database_path,
            'Redis': 'configured' if self.settings.redis_url else 'disabled',
            'Providers': len(self.settings.provider_endpoints),
            'Daily reset': f"{self.settings.reset_hour:02d}:{self.settings.reset_minute:02d} "
                           f"{self.settings.reset_timezone}",
        })

    def _setup_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._request_stop, signum)
            except NotImplementedError:
                # Windows event loops have no signal handler support
                pass

    def _request_stop(self, signum):
        self.logger.info(f"📡 Received signal {signum}, initiating shutdown...")
        if self._stop is not None:
            self._stop.set()

    async def run(self):
        # Bound to the running loop; asyncio.run creates a fresh one
        self._stop = asyncio.Event()
        self.app = QuizApp(self.settings)
        try:
            await self.app.start()
            self._setup_signal_handlers()
            self.logger.info(f"🕛 Next daily reset at {self.app.reset.next_reset_time().isoformat()}")
            await self._stop.wait()
        finally:
            await self.app.close()
            self.logger.info("🔚 Quiz process ended")


async def main():
    await QuizRunner().run()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nQuiz interrupted by user")
