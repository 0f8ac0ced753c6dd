"""Server-side conversation reset, mirrored locally only when confirmed."""
from __future__ import annotations

import logging

from .backend import ChatBackend, ResetFailed, ResetOk
from .messages import Transcript

logger = logging.getLogger(__name__)


class ConversationResetter:
    """Deletes the remote conversation memory, then empties the transcript.

    A failed reset is logged and otherwise ignored: the transcript is left
    as it was and no error message is appended to it.
    """

    def __init__(self, transcript: Transcript, backend: ChatBackend) -> None:
        self.transcript = transcript
        self.backend = backend

    async def reset(self, session_id: str) -> bool:
        try:
            result = await self.backend.delete_conversation(session_id)
        except Exception:
            logger.exception("Clearing conversation %s failed unexpectedly", session_id)
            return False
        if isinstance(result, ResetOk):
            self.transcript.clear()
            logger.info("Conversation %s cleared", session_id)
            return True
        if isinstance(result, ResetFailed):
            logger.warning("Failed to clear conversation %s: %s", session_id, result.reason)
            return False
        raise TypeError(f"unexpected reset result: {result!r}")
