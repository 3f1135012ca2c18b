"""
Chat transcript models
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    USER = 'user'
    AGENT = 'agent'


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """A single chat turn; immutable once created"""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class Transcript:
    """
    Append-only, ordered log of chat turns for one conversational phase

    Entries are timestamped when appended and can never be edited, removed
    or reordered. A case keeps two independent transcripts (intake and
    resolution Q&A) that are never merged.
    """

    def __init__(self, name: str):
        self.name = name
        self._messages = []

    def append_user_turn(self, content: str) -> ChatMessage:
        return self._append(MessageRole.USER, content)

    def append_agent_turn(self, content: str) -> ChatMessage:
        return self._append(MessageRole.AGENT, content)

    def _append(self, role: MessageRole, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)

    def to_list(self) -> list:
        return [message.model_dump(mode='json') for message in self._messages]

    def __repr__(self) -> str:
        return f"Transcript(name={self.name!r}, messages={len(self)})"
