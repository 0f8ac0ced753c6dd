"""Conversation controller consumed by the presentation layer."""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from .backend import ChatBackend
from .config import ClientSettings
from .dispatcher import MessageDispatcher
from .messages import Message, Transcript
from .resetter import ConversationResetter

logger = logging.getLogger(__name__)


def new_session_id(prefix: str = "user_") -> str:
    """Timestamp-derived id; unique enough to scope backend memory."""
    return f"{prefix}{int(time.time() * 1000)}"


class ConversationController:
    """Owns one transcript and one session id for its whole lifetime.

    The presentation layer edits ``input_text``, reads :meth:`snapshot` and
    fires :meth:`submit` / :meth:`clear`. Sends and resets never overlap: a
    trigger for one while the other is outstanding is a silent no-op.
    """

    def __init__(
        self,
        backend: ChatBackend,
        *,
        transcript: Transcript | None = None,
        session_id: str | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        self.settings = settings or backend.settings
        self.backend = backend
        self.transcript = transcript if transcript is not None else Transcript()
        # a blank id cannot scope backend memory, so it is regenerated too
        self.session_id = session_id or new_session_id(self.settings.session_prefix)
        self.input_text = ""
        self._resetting = False
        self.dispatcher = MessageDispatcher(self.transcript, backend, self.settings)
        self.resetter = ConversationResetter(self.transcript, backend)

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, backend: ChatBackend | None = None
    ) -> "ConversationController":
        return cls(backend or ChatBackend(settings), settings=settings)

    # --------- read access ----------
    @property
    def pending(self) -> bool:
        return self.transcript.pending

    @property
    def resetting(self) -> bool:
        return self._resetting

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self.transcript.messages

    def snapshot(self) -> List[Dict[str, Any]]:
        return self.transcript.snapshot()

    # --------- guards ----------
    def can_submit(self, text: Optional[str] = None) -> bool:
        draft = self.input_text if text is None else text
        return bool((draft or "").strip()) and not self.pending and not self._resetting

    def can_clear(self) -> bool:
        return not self.pending and not self._resetting

    # --------- triggers ----------
    async def submit(self, text: Optional[str] = None) -> Optional[Message]:
        """Send ``text`` (or the current draft) if the guard allows it.

        Returns the follow-up message, or None when the submission was
        rejected. The draft is cleared once a cycle starts.
        """
        draft = self.input_text if text is None else text
        if not self.can_submit(draft):
            logger.debug(
                "Submission ignored (blank=%s pending=%s resetting=%s)",
                not (draft or "").strip(),
                self.pending,
                self._resetting,
            )
            return None
        if text is None:
            self.input_text = ""
        return await self.dispatcher.dispatch(draft.strip(), self.session_id)

    async def clear(self) -> bool:
        """Reset the remote conversation; empties the transcript on success."""
        if not self.can_clear():
            logger.debug("Clear ignored (pending=%s resetting=%s)", self.pending, self._resetting)
            return False
        self._resetting = True
        try:
            return await self.resetter.reset(self.session_id)
        finally:
            self._resetting = False

    async def aclose(self) -> None:
        await self.backend.aclose()
