"""One send/receive cycle against the backend, resolved into the transcript."""
from __future__ import annotations

import logging

from .backend import ApplicationFailure, ChatBackend, SendResult, Success, TransportFailure
from .config import ClientSettings
from .messages import ASSISTANT, ERROR, USER, Message, Transcript

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Runs a send cycle: optimistic user append, remote call, follow-up append.

    The caller trims and validates the text and checks ``transcript.pending``
    first; the dispatcher itself does not guard against re-entry. No retries.
    """

    def __init__(
        self,
        transcript: Transcript,
        backend: ChatBackend,
        settings: ClientSettings | None = None,
    ) -> None:
        self.transcript = transcript
        self.backend = backend
        self.settings = settings or backend.settings

    def resolve(self, result: SendResult) -> Message:
        """Translate a backend result into the follow-up message."""
        if isinstance(result, Success):
            return Message.now(ASSISTANT, result.text)
        if isinstance(result, ApplicationFailure):
            return Message.now(ERROR, result.text or self.settings.error_fallback)
        if isinstance(result, TransportFailure):
            return Message.now(ERROR, self.settings.connection_error)
        raise TypeError(f"unexpected send result: {result!r}")

    async def dispatch(self, text: str, session_id: str) -> Message:
        self.transcript.append(Message.now(USER, text))
        self.transcript.set_pending(True)
        try:
            try:
                result = await self.backend.send_message(text, session_id)
                follow_up = self.resolve(result)
            except Exception:
                logger.exception("Send cycle for %s failed unexpectedly", session_id)
                follow_up = Message.now(ERROR, self.settings.connection_error)
            self.transcript.append(follow_up)
            return follow_up
        finally:
            self.transcript.set_pending(False)
