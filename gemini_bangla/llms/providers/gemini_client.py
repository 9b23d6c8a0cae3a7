# gemini_bangla/llms/providers/gemini_client.py
from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from google import genai
from google.genai import types

from gemini_bangla.app.errors import CompletionFailure, ConfigurationError
from gemini_bangla.llms.prompt_registry import build_system_instruction
from gemini_bangla.schemas.chat_schema import ImagePart, Part, TextPart, Turn

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# Gemini names the assistant side "model"
_ROLE_TO_GEMINI = {"user": "user", "assistant": "model"}


def to_gemini_part(part: Part) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part(text=part.content)
    if isinstance(part, ImagePart):
        return types.Part(
            inline_data=types.Blob(
                mime_type=part.mime_type,
                data=base64.b64decode(part.data),
            )
        )
    raise TypeError(f"Unsupported part type: {type(part).__name__}")


def to_gemini_content(turn: Turn) -> types.Content:
    return types.Content(
        role=_ROLE_TO_GEMINI[turn.role],
        parts=[to_gemini_part(p) for p in turn.parts],
    )


@dataclass
class ChatHandle:
    """
    Live provider chat. `chat` keeps its own running history; callers hold it
    but never read it.
    """
    chat: Any
    model: str
    system_instruction: str


def _default_client_factory(api_key: str) -> Any:
    return genai.Client(api_key=api_key)


class GeminiChatClient:
    """
    Wrapper around the google-genai async chat API.
    - create_chat: bind persona + user context + prior turns (no I/O)
    - send_message: one round trip, no retries
    """

    def __init__(
        self,
        model: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.timeout_s = timeout_s
        self._client_factory = client_factory or _default_client_factory
        self._clients: Dict[str, Any] = {}

    def _client_for(self, api_key: str) -> Any:
        # one SDK client per key, shared by every chat built after init/reset
        client = self._clients.get(api_key)
        if client is None:
            client = self._client_factory(api_key)
            self._clients[api_key] = client
        return client

    def create_chat(
        self,
        api_key: Optional[str],
        history: Sequence[Turn],
        user_context: str = "",
    ) -> ChatHandle:
        if not api_key:
            raise ConfigurationError("API key is not configured.")

        system_instruction = build_system_instruction(user_context)
        chat = self._client_for(api_key).aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(system_instruction=system_instruction),
            history=[to_gemini_content(t) for t in history],
        )
        return ChatHandle(chat=chat, model=self.model, system_instruction=system_instruction)

    async def send_message(self, handle: ChatHandle, parts: List[Part]) -> str:
        if not parts:
            raise ValueError("parts must not be empty")

        try:
            message = [to_gemini_part(p) for p in parts]
            call = handle.chat.send_message(message)
            if self.timeout_s is not None:
                resp = await asyncio.wait_for(call, timeout=self.timeout_s)
            else:
                resp = await call
        except Exception:
            logger.exception("Gemini send_message failed (model=%s)", handle.model)
            raise CompletionFailure("Failed to get a response from Gemini Bangla.") from None

        text = getattr(resp, "text", None)
        if text is None:
            # Blocked or empty candidates
            logger.warning("Gemini returned no text (model=%s)", handle.model)
            raise CompletionFailure("Failed to get a response from Gemini Bangla.")
        return text
