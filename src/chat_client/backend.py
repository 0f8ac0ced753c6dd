"""HTTP access to the remote chat backend.

Two operations make up the whole boundary:

    POST   {base_url}/chat                    {"message": str, "user_id": str}
    DELETE {base_url}/conversation/<user_id>  (no body)

Neither operation raises on failure. Each returns a tagged result so callers
can match on every outcome explicitly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field, ValidationError

from .config import ClientSettings

logger = logging.getLogger(__name__)


# -----------------------------
# Wire models
# -----------------------------
class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class ChatReply(BaseModel):
    response: str = Field(..., min_length=1)


class ChatErrorReply(BaseModel):
    error: Optional[str] = None


# -----------------------------
# Results
# -----------------------------
@dataclass(frozen=True)
class Success:
    """Backend answered; ``text`` is the assistant reply."""
    text: str


@dataclass(frozen=True)
class ApplicationFailure:
    """Backend answered with a semantic failure. ``text`` may be None."""
    text: Optional[str] = None


@dataclass(frozen=True)
class TransportFailure:
    """No usable response: unreachable, dropped, timed out or unparsable."""
    reason: str


SendResult = Union[Success, ApplicationFailure, TransportFailure]


@dataclass(frozen=True)
class ResetOk:
    pass


@dataclass(frozen=True)
class ResetFailed:
    reason: str


ResetResult = Union[ResetOk, ResetFailed]


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _json_object(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Return the body as a dict, or None if it is not a JSON object."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _error_text(data: Dict[str, Any]) -> Optional[str]:
    try:
        text = ChatErrorReply.model_validate(data).error
    except ValidationError:
        return None
    return text if text and text.strip() else None


def classify_chat_response(response: httpx.Response) -> SendResult:
    """Map an HTTP response from the chat endpoint onto a SendResult."""
    data = _json_object(response)
    if data is None:
        return TransportFailure(f"unparsable body (HTTP {response.status_code})")

    if not _is_success(response.status_code) or data.get("error") is not None:
        return ApplicationFailure(_error_text(data))

    try:
        reply = ChatReply.model_validate(data)
    except ValidationError as e:
        return TransportFailure(f"malformed payload: {e.error_count()} validation error(s)")
    return Success(reply.response)


# -----------------------------
# Client
# -----------------------------
class ChatBackend:
    """Async client for the chat backend.

    An ``httpx.AsyncClient`` may be injected (tests pass one with a mock
    transport); otherwise the backend creates its own and closes it in
    :meth:`aclose`.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.timeout),
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ChatBackend":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # --------- urls ----------
    @property
    def chat_url(self) -> str:
        return f"{self.settings.base_url}{self.settings.chat_path}"

    def conversation_url(self, user_id: str) -> str:
        return f"{self.settings.base_url}{self.settings.conversation_path}/{quote(user_id, safe='')}"

    # --------- operations ----------
    async def send_message(self, text: str, user_id: str) -> SendResult:
        payload = ChatRequest(message=text, user_id=user_id).model_dump()
        try:
            response = await self._client.post(self.chat_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("send_message transport error for %s: %s", user_id, e)
            return TransportFailure(str(e) or type(e).__name__)

        result = classify_chat_response(response)
        if isinstance(result, TransportFailure):
            logger.warning("send_message got %s for %s", result.reason, user_id)
        elif isinstance(result, ApplicationFailure):
            logger.info(
                "send_message application failure for %s (HTTP %s): %s",
                user_id,
                response.status_code,
                result.text,
            )
        return result

    async def delete_conversation(self, user_id: str) -> ResetResult:
        url = self.conversation_url(user_id)
        try:
            response = await self._client.delete(url)
        except httpx.HTTPError as e:
            logger.warning("delete_conversation transport error for %s: %s", user_id, e)
            return ResetFailed(str(e) or type(e).__name__)

        if not _is_success(response.status_code):
            logger.warning("delete_conversation for %s returned HTTP %s", user_id, response.status_code)
            return ResetFailed(f"HTTP {response.status_code}")
        return ResetOk()
