"""Exception types raised by the chat client."""
from __future__ import annotations


class ChatClientError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(ChatClientError):
    """Configuration file could not be read or has the wrong shape."""
