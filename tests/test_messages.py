from __future__ import annotations

import dataclasses

import pytest

from chat_client.messages import Message, Transcript


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message.now("model", "hi")


def test_message_is_immutable():
    msg = Message.now("user", "hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.content = "changed"  # type: ignore[misc]
    assert msg.timestamp


def test_transcript_appends_in_order_and_counts():
    t = Transcript()
    t.append(Message.now("user", "2+2?"))
    t.append(Message.now("assistant", "4"))

    assert len(t) == 2
    assert [(m.role, m.content) for m in t] == [("user", "2+2?"), ("assistant", "4")]
    assert t.snapshot()[1]["role"] == "assistant"


def test_transcript_rejects_empty_user_and_assistant_content():
    t = Transcript()
    with pytest.raises(ValueError):
        t.append(Message.now("user", ""))
    with pytest.raises(ValueError):
        t.append(Message.now("assistant", ""))
    assert len(t) == 0


def test_transcript_clear_and_pending_flag():
    t = Transcript()
    t.append(Message.now("user", "hello"))
    t.set_pending(True)
    assert t.pending is True

    t.clear()
    t.set_pending(False)
    assert len(t) == 0
    assert t.messages == ()
    assert t.pending is False


def test_messages_property_is_a_snapshot():
    t = Transcript()
    t.append(Message.now("user", "hello"))
    before = t.messages
    t.append(Message.now("error", "boom"))
    assert len(before) == 1
    assert len(t.messages) == 2
