"""irchook — relay IRC messages to a webhook when they match a pattern."""

__version__ = "0.3.0"
