from __future__ import annotations

import base64
import binascii
import re
from typing import List, Optional

from pydantic import BaseModel, field_validator

from gemini_bangla.app.errors import EmptyMessageError
from gemini_bangla.schemas.chat_schema import ImagePart, Part, TextPart, Turn

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


class ImageAttachment(BaseModel):
    """
    Image picked by the user, already base64-encoded.
    """
    mime_type: str
    data: str

    @field_validator("data")
    @classmethod
    def _data_is_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("image payload is not valid base64") from e
        return v

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str) -> "ImageAttachment":
        return cls(mime_type=mime_type, data=base64.b64encode(content).decode("ascii"))

    @classmethod
    def from_data_url(cls, url: str) -> "ImageAttachment":
        """Parse a browser `data:<mime>;base64,<payload>` URL (FileReader.readAsDataURL output)."""
        m = _DATA_URL_RE.match(url.strip())
        if not m:
            raise ValueError("not a base64 data URL")
        return cls(mime_type=m.group("mime"), data=m.group("data"))


def build_user_turn(text: Optional[str], image: Optional[ImageAttachment] = None) -> Turn:
    """
    Build the user's turn: image first (if any), then text (if not blank).
    Text is kept verbatim; only the blank check strips it.
    """
    parts: List[Part] = []
    if image is not None:
        parts.append(ImagePart(mime_type=image.mime_type, data=image.data))
    if text and text.strip():
        parts.append(TextPart(content=text))
    if not parts:
        raise EmptyMessageError("A message needs text or an image")
    return Turn(role="user", parts=parts)
