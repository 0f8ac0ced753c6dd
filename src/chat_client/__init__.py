"""Conversation client for a remote chat inference backend.

The package keeps an in-memory transcript of one conversation and drives the
send/receive cycle against the backend's HTTP API.

Typical usage
-------------
from chat_client import ConversationController, load_config, ClientSettings

settings = ClientSettings.from_config(load_config())
controller = ConversationController.from_settings(settings)
await controller.submit("2+2?")

or, from the provided launcher:

python scripts/run_client.py --base-url http://localhost:5001/api
"""

from __future__ import annotations

from .config import ClientSettings, load_config
from .controller import ConversationController
from .errors import ChatClientError, ConfigError
from .messages import Message, Transcript

__all__ = [
    "ChatClientError",
    "ClientSettings",
    "ConfigError",
    "ConversationController",
    "Message",
    "Transcript",
    "__version__",
    "get_version",
    "load_config",
]

# ---------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------
__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
