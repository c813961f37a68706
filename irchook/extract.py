"""Content extraction — strip IRC framing from a raw protocol line."""

from typing import Optional


def extract_content(raw_line: str) -> Optional[str]:
    """Return the payload of a raw IRC line, or None if it carries none.

    The first character (the ``:`` that opens the prefix) is skipped, then
    everything after the next ``:`` is the payload. Surrounding whitespace,
    including the trailing CRLF, is trimmed.

    >>> extract_content(":nick!user@host PRIVMSG #chan :hello there\\r\\n")
    'hello there'
    """
    idx = raw_line.find(":", 1)
    if idx == -1:
        return None
    return raw_line[idx + 1:].strip()
