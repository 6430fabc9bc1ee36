"""Playbot — Main entry point."""

import asyncio
import logging
import os

from .channels.telegram import TelegramChannel
from .commands import PlaygroundCommands
from .config import PlaybotSettings, load_settings
from .playground.client import PlaygroundClient
from .playground.rustfmt import RustFormatter
from .playground.tools import PlaygroundServices

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_log_file = os.path.expanduser("~/playbot.log")

logger = logging.getLogger("playbot")


def setup_logging(debug: bool = False):
    """Log to stderr and ~/playbot.log."""
    logging.basicConfig(
        level=logging.INFO,
        format=_log_format,
        handlers=[
            logging.StreamHandler(),                          # stderr (console)
            logging.FileHandler(_log_file, encoding="utf-8"), # ~/playbot.log
        ],
    )
    if debug:
        logger.setLevel(logging.DEBUG)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_services(settings: PlaybotSettings) -> PlaygroundServices:
    """Wire the playground collaborators from settings."""
    return PlaygroundServices(
        client=PlaygroundClient(
            base_url=settings.playground_url,
            timeout=settings.http_timeout,
            referer=settings.referer,
        ),
        formatter=RustFormatter(
            executable=settings.rustfmt_path,
            timeout=settings.rustfmt_timeout,
        ),
        max_message_length=settings.max_message_length,
    )


async def run(settings: PlaybotSettings | None = None):
    """Main run loop."""
    settings = settings or load_settings()

    if not settings.telegram_bot_token:
        logger.error("No Telegram bot token configured. Set PLAYBOT_TELEGRAM_BOT_TOKEN in .env.")
        return

    commands = PlaygroundCommands(build_services(settings))
    telegram = TelegramChannel(settings, commands)
    stop = asyncio.Event()

    try:
        await telegram.start()
        logger.info("Playbot is running. Press Ctrl+C to stop.")
        await stop.wait()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    except Exception as e:
        logger.critical(f"Fatal error: {type(e).__name__}: {e}", exc_info=True)
    finally:
        await telegram.stop()


def main():
    """Entry point."""
    setup_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
