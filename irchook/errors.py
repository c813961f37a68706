"""Error types and dispatch error classification."""

import asyncio
import re

import httpx


class HookError(Exception):
    """Base class for irchook errors."""


class InvalidPatternError(HookError, ValueError):
    """A configured regular expression failed to compile."""

    def __init__(self, key: str, pattern: str, error: re.error):
        self.key = key
        self.pattern = pattern
        self.error = error
        super().__init__(f"Invalid {key} {pattern!r}: {error}")


def compile_pattern(key: str, pattern: str) -> re.Pattern:
    """Compile a regex, raising InvalidPatternError with the config key on failure."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(key, pattern, e) from e


def describe_dispatch_error(e: BaseException) -> str:
    """Classify a webhook dispatch failure into a short log message."""
    # 1: HTTP status errors (raise_for_status)
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code == 429:
            return "Webhook rate limited (HTTP 429)."
        if code in (401, 403):
            return f"Webhook rejected credentials (HTTP {code})."
        if 400 <= code < 500:
            return f"Webhook rejected the request (HTTP {code})."
        if 500 <= code < 600:
            return f"Webhook server error (HTTP {code})."
        return f"Webhook returned HTTP {code}."

    # 2-3: Network / timeout errors
    if isinstance(e, httpx.ConnectError):
        return "Cannot connect to webhook endpoint."
    if isinstance(e, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "Webhook request timed out."
    if isinstance(e, httpx.TooManyRedirects):
        return "Webhook endpoint redirected too many times."
    if isinstance(e, httpx.HTTPError):
        return f"Webhook transport error ({type(e).__name__}): {e}"

    # 4: Fallback — include type name for debugging
    return f"Webhook dispatch failed ({type(e).__name__}): {e}"
