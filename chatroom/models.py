import time
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class MessageKind(str, Enum):
    PUBLIC = "message"
    PRIVATE = "private_message"
    STATUS = "status"


def display_time(ts: float) -> str:
    return time.strftime("%H:%M:%S", time.localtime(ts))


class Participant(SQLModel, table=True):
    name: str = Field(primary_key=True)
    last_seen: float

    def as_dict(self) -> dict:
        return {"name": self.name, "lastSeen": self.last_seen}


class Message(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    sender: str = Field(index=True)
    recipient: str = Field(index=True)
    text: str
    kind: str = Field(default=MessageKind.PUBLIC.value)
    time: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "from": self.sender,
            "to": self.recipient,
            "text": self.text,
            "kind": self.kind,
            "time": self.time,
        }
