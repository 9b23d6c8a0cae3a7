from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field, field_validator


Role = Literal["user", "assistant"]


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    content: str


class ImagePart(BaseModel):
    """
    Inline image payload. `data` is the base64 text exactly as received;
    it is never re-encoded.
    """
    kind: Literal["image"] = "image"
    mime_type: str
    data: str


Part = Annotated[Union[TextPart, ImagePart], Field(discriminator="kind")]


class Turn(BaseModel):
    """
    One chat message. Parts are ordered and never empty.
    """
    role: Role
    parts: List[Part]

    @field_validator("parts")
    @classmethod
    def _parts_not_empty(cls, v: List[Part]) -> List[Part]:
        if not v:
            raise ValueError("a turn needs at least one part")
        return v

    @classmethod
    def assistant_text(cls, text: str) -> "Turn":
        return cls(role="assistant", parts=[TextPart(content=text)])

    @property
    def text(self) -> str:
        return "\n".join(p.content for p in self.parts if isinstance(p, TextPart))


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    EXCHANGING = "exchanging"
    RESETTING = "resetting"


class SessionView(BaseModel):
    """
    Caller-facing snapshot: the visible turns plus a loading flag.
    """
    turns: List[Turn] = Field(default_factory=list)
    is_loading: bool = False


def has_user_turn(turns: List[Turn]) -> bool:
    return any(t.role == "user" for t in turns)
