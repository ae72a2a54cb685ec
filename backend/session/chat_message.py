"""
Chat-side data carried across the bridge.

ChatMessage: one inbound message as relayed by the chat bridge.
Reply: one outbound reply frame for the bridge to deliver.

Pure data; the bridge owns the real chat-platform client.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


@dataclass(frozen=True)
class ChatMessage:
    """Inbound message. voice_channel_id is the author's current voice channel."""

    content: str
    author_id: str
    author_name: str
    channel_id: str
    voice_channel_id: str | None = None
    is_direct: bool = False

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> ChatMessage:
        """
        Build from a bridge MESSAGE payload.

        Raises:
            KeyError / TypeError if required fields are missing or mistyped.
        """
        content = payload["content"]
        if not isinstance(content, str):
            raise TypeError("content must be a string")
        voice_channel_id = payload.get("voice_channel_id")
        return ChatMessage(
            content=content,
            author_id=str(payload["author_id"]),
            author_name=str(payload.get("author_name", payload["author_id"])),
            channel_id=str(payload["channel_id"]),
            voice_channel_id=str(voice_channel_id) if voice_channel_id else None,
            is_direct=bool(payload.get("is_direct", False)),
        )


class ReplyKind(str, Enum):
    """
    REPLY:      text in the message's channel, addressed to the author
    DIRECT:     private message to the author
    ATTACHMENT: file posted to the message's channel
    """

    REPLY = "REPLY"
    DIRECT = "DIRECT"
    ATTACHMENT = "ATTACHMENT"


@dataclass(frozen=True)
class Reply:
    kind: ReplyKind
    channel_id: str
    author_id: str
    text: str | None = None
    embed: dict[str, Any] | None = None
    attachment: bytes | None = None
    filename: str | None = None

    def to_frame(self) -> dict[str, Any]:
        frame: dict[str, Any] = {
            "type": self.kind.value,
            "channel_id": self.channel_id,
            "author_id": self.author_id,
        }
        if self.text is not None:
            frame["text"] = self.text
        if self.embed is not None:
            frame["embed"] = self.embed
        if self.attachment is not None:
            frame["attachment_b64"] = base64.b64encode(self.attachment).decode("ascii")
            frame["filename"] = self.filename
        return frame
