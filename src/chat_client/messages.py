"""Message records and the in-memory transcript they live in."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Tuple

USER = "user"
ASSISTANT = "assistant"
ERROR = "error"
ROLES = frozenset({USER, ASSISTANT, ERROR})


def _timestamp() -> str:
    # Locale time of day, informational only.
    return datetime.now().strftime("%X")


@dataclass(frozen=True)
class Message:
    """A single transcript entry.

    ``role`` is one of ``user``, ``assistant`` or ``error``. For ``error``
    messages ``content`` holds the failure description shown to the user.
    """

    role: str
    content: str
    timestamp: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unknown message role: {self.role!r}")

    @classmethod
    def now(cls, role: str, content: str) -> "Message":
        return cls(role=role, content=content, timestamp=_timestamp())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Transcript:
    """Ordered, append-only message log plus the single in-flight flag.

    The transcript performs no I/O and holds no guard logic; the controller
    decides when mutations are allowed.
    """

    def __init__(self) -> None:
        self._messages: List[Message] = []
        self._pending = False

    # --------- mutation ----------
    def append(self, message: Message) -> None:
        if message.role in (USER, ASSISTANT) and not message.content:
            raise ValueError(f"{message.role} message content cannot be empty")
        self._messages.append(message)

    def clear(self) -> None:
        self._messages = []

    def set_pending(self, pending: bool) -> None:
        self._pending = bool(pending)

    # --------- read access ----------
    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def snapshot(self) -> List[Dict[str, Any]]:
        """Plain-dict copy for the presentation layer."""
        return [m.to_dict() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
