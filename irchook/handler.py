"""Message handler — the single sequential consumer of incoming lines."""

import logging
from typing import AsyncIterable

from .dispatch import WebhookPublisher
from .extract import extract_content
from .matching import MatchEngine

logger = logging.getLogger("irchook.handler")


class MessageHandler:
    """Feeds raw lines through extraction and matching, then publishes matches."""

    def __init__(self, engine: MatchEngine, publisher: WebhookPublisher):
        self.engine = engine
        self.publisher = publisher

    async def handle_line(self, raw_line: str) -> int:
        """Process one raw line. Returns the number of capture-group sets published."""
        content = extract_content(raw_line)
        if content is None:
            return 0
        logger.debug(f"Checking for matches: {content!r}")

        groups = self.engine.classify(content)
        if not groups:
            return 0
        await self.publisher.publish(groups)
        return len(groups)

    async def run(self, lines: AsyncIterable[str]) -> int:
        """Consume lines until the stream ends. Returns the number of lines handled.

        Errors raised by the stream propagate; dispatch errors never do.
        """
        count = 0
        async for line in lines:
            await self.handle_line(line)
            count += 1
        logger.info(f"Line stream ended after {count} lines")
        return count
