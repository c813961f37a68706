"""Match engine — turn chat payloads into capture-group sets.

Two modes:
- single-line: every payload is searched on its own
- multi-line: payloads are buffered between an init trigger and a
  conclusion (line limit or conclude pattern), then the buffered lines are
  joined with spaces and searched as one candidate

The accumulation buffer belongs to one MatchEngine instance, so the
instance must live for the whole chat session. It is mutated only by the
single consumer that calls classify().
"""

import logging
import re
from typing import Optional

from .errors import compile_pattern

logger = logging.getLogger("irchook.matching")

CaptureGroups = list[str]


def match_groups(pattern: re.Pattern, content: str) -> list[CaptureGroups]:
    """Find all non-overlapping matches of pattern in content.

    Each match yields [full_match, group1, group2, ...]. Groups that did not
    participate in the match are omitted, not padded with None.
    """
    return [
        [g for g in (m.group(0), *m.groups()) if g is not None]
        for m in pattern.finditer(content)
    ]


class MatchEngine:
    """Stateful classifier for incoming payloads."""

    def __init__(
        self,
        search_pattern: str,
        multi_line: bool = False,
        line_init_pattern: Optional[str] = None,
        line_conclude_pattern: Optional[str] = None,
        line_limit: int = 10,
    ):
        self.pattern = compile_pattern("search_pattern", search_pattern)
        self.multi_line = multi_line
        self.init_pattern: Optional[re.Pattern] = None
        self.conclude_pattern: Optional[re.Pattern] = None
        self.line_limit = line_limit
        self._buffer: list[str] = []

        if multi_line:
            if not line_init_pattern:
                raise ValueError("line_init_pattern is required in multi-line mode")
            if line_limit < 1:
                raise ValueError(f"line_limit must be at least 1, got {line_limit}")
            self.init_pattern = compile_pattern("line_init_pattern", line_init_pattern)
            if line_conclude_pattern:
                self.conclude_pattern = compile_pattern(
                    "line_conclude_pattern", line_conclude_pattern
                )

    @classmethod
    def from_settings(cls, settings) -> "MatchEngine":
        return cls(
            search_pattern=settings.search_pattern,
            multi_line=settings.multi_line,
            line_init_pattern=settings.line_init_pattern,
            line_conclude_pattern=settings.line_conclude_pattern,
            line_limit=settings.line_limit,
        )

    @property
    def accumulating(self) -> bool:
        return bool(self._buffer)

    @property
    def buffer(self) -> tuple[str, ...]:
        """Snapshot of the lines collected since the last init trigger."""
        return tuple(self._buffer)

    def reset(self):
        """Drop any partially accumulated lines."""
        self._buffer.clear()

    def classify(self, payload: str) -> list[CaptureGroups]:
        """Consume one payload and return the capture-group sets ready to dispatch."""
        if not self.multi_line:
            return self._search(payload)

        if not self._buffer:
            if self.init_pattern.search(payload):
                logger.debug(f"Init trigger seen, accumulating: {payload!r}")
                self._buffer.append(payload)
                # line_limit == 1 concludes on the init line itself; the
                # conclude pattern only applies to lines after the init line
                if len(self._buffer) >= self.line_limit:
                    return self._conclude()
            return []

        self._buffer.append(payload)
        if self._concluded(payload):
            return self._conclude()
        return []

    def _concluded(self, payload: str) -> bool:
        if len(self._buffer) >= self.line_limit:
            return True
        return bool(self.conclude_pattern and self.conclude_pattern.search(payload))

    def _conclude(self) -> list[CaptureGroups]:
        candidate = " ".join(self._buffer)
        logger.debug(f"Buffer concluded after {len(self._buffer)} lines")
        self._buffer.clear()
        return self._search(candidate)

    def _search(self, content: str) -> list[CaptureGroups]:
        if not self.pattern.search(content):
            logger.debug(f"No match: {content!r}")
            return []
        groups = match_groups(self.pattern, content)
        logger.info(f"Matched {len(groups)} time(s): {content!r}")
        return groups
