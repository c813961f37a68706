"""irchook — main relay loop."""

import logging
from typing import Optional

from .config import HookSettings
from .dispatch import DispatchTarget, WebhookPublisher
from .handler import MessageHandler
from .irc import IrcConnection
from .matching import MatchEngine

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("irchook")


def setup_logging(level: str = "warning"):
    """Configure root logging for the process."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
        force=True,
    )
    # httpx logs every request at INFO; keep it out unless debugging
    if numeric_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


async def run(settings: HookSettings, connection: Optional[IrcConnection] = None):
    """Connect to IRC and relay matches until the stream ends."""
    engine = MatchEngine.from_settings(settings)
    publisher = WebhookPublisher(
        DispatchTarget.from_settings(settings),
        timeout=settings.webhook_timeout,
    )
    connection = connection or IrcConnection.from_settings(settings)
    handler = MessageHandler(engine, publisher)

    logger.info("starting irchook")
    try:
        await connection.connect()
        await handler.run(connection.lines())
    except Exception as e:
        logger.critical(f"Fatal error: {type(e).__name__}: {e}", exc_info=True)
        raise
    finally:
        await connection.close()
        await publisher.aclose()
