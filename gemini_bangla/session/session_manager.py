from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from gemini_bangla.app.errors import (
    CompletionFailure,
    ConfigurationError,
    ContextFetchError,
    PersistenceError,
)
from gemini_bangla.llms.prompt_registry import get_reply
from gemini_bangla.llms.providers.gemini_client import ChatHandle, GeminiChatClient
from gemini_bangla.schemas.chat_schema import SessionStatus, SessionView, Turn, has_user_turn
from gemini_bangla.session.context_aggregator import ContextAggregator
from gemini_bangla.session.history_store import ChatHistoryStore
from gemini_bangla.session.turn_builder import ImageAttachment, build_user_turn

logger = logging.getLogger(__name__)

_BUSY = {SessionStatus.INITIALIZING, SessionStatus.EXCHANGING, SessionStatus.RESETTING}


class SessionManager:
    """
    Owns one user's chat session: the visible turns, the provider chat handle
    and the lifecycle status.

    Only one of initialize/send/reset runs at a time. A trigger arriving while
    another is in flight is ignored and just returns the current view.
    """

    def __init__(
        self,
        aggregator: ContextAggregator,
        history: ChatHistoryStore,
        chat_client: GeminiChatClient,
    ):
        self.aggregator = aggregator
        self.history = history
        self.chat_client = chat_client

        self.status = SessionStatus.UNINITIALIZED
        self._turns: List[Turn] = []
        self._handle: Optional[ChatHandle] = None
        self._user_id: Optional[str] = None
        self._api_key: Optional[str] = None

    # ---------- View ----------
    @property
    def is_loading(self) -> bool:
        return self.status in _BUSY

    @property
    def can_send(self) -> bool:
        return self.status == SessionStatus.READY and self._handle is not None

    def view(self) -> SessionView:
        return SessionView(
            turns=[t.model_copy(deep=True) for t in self._turns],
            is_loading=self.is_loading,
        )

    # ---------- Init ----------
    async def initialize_session(self, user_id: str, api_key: Optional[str]) -> SessionView:
        if self.is_loading:
            logger.info("initialize_session ignored: %s in flight", self.status.value)
            return self.view()

        self._user_id = user_id
        self._api_key = api_key
        self._handle = None
        self.status = SessionStatus.INITIALIZING
        try:
            self._turns = await self._open(user_id, api_key)
        finally:
            self.status = SessionStatus.READY
        return self.view()

    async def _context_or_empty(self, user_id: str) -> str:
        try:
            return await self.aggregator.aggregate(user_id)
        except ContextFetchError as e:
            logger.warning("Context unavailable, continuing without it", extra={"user_id": user_id, "source": e.source})
            return ""

    async def _open(self, user_id: str, api_key: Optional[str]) -> List[Turn]:
        try:
            if not api_key:
                raise ConfigurationError("API key is not configured.")
            context, prior = await asyncio.gather(
                self._context_or_empty(user_id),
                self.history.load(user_id),
            )
            self._handle = self.chat_client.create_chat(api_key, prior or [], context)
        except Exception:
            logger.exception("Failed to initialize chat", extra={"user_id": user_id})
            return [Turn.assistant_text(get_reply("init_failed"))]

        if prior:
            return prior
        return [Turn.assistant_text(get_reply("greeting"))]

    # ---------- Send ----------
    async def send_message(self, text: Optional[str], image: Optional[ImageAttachment] = None) -> SessionView:
        if self.is_loading:
            logger.info("send_message ignored: %s in flight", self.status.value)
            return self.view()
        if self._handle is None:
            logger.info("send_message ignored: no live chat for %s", self._user_id)
            return self.view()

        user_turn = build_user_turn(text, image)

        self.status = SessionStatus.EXCHANGING
        self._turns.append(user_turn)
        try:
            try:
                reply = await self.chat_client.send_message(self._handle, user_turn.parts)
            except CompletionFailure:
                self._turns.append(Turn.assistant_text(get_reply("send_failed")))
            else:
                self._turns.append(Turn.assistant_text(reply))
                await self._persist()
        finally:
            self.status = SessionStatus.READY
        return self.view()

    async def _persist(self) -> None:
        if not has_user_turn(self._turns):
            return
        snapshot = [t.model_copy(deep=True) for t in self._turns]
        try:
            await self.history.save(self._user_id, snapshot)
        except PersistenceError:
            logger.exception("Chat history not saved", extra={"user_id": self._user_id})

    # ---------- Reset ----------
    async def reset_session(self) -> SessionView:
        if self.is_loading:
            logger.info("reset_session ignored: %s in flight", self.status.value)
            return self.view()
        if self._user_id is None:
            logger.info("reset_session ignored: session never initialized")
            return self.view()

        user_id = self._user_id
        self.status = SessionStatus.RESETTING
        try:
            try:
                if not self._api_key:
                    raise ConfigurationError("API key is not configured.")
                await self.history.clear(user_id)
                self.status = SessionStatus.INITIALIZING
                context = await self.aggregator.aggregate(user_id)
                handle = self.chat_client.create_chat(self._api_key, [], context)
            except Exception:
                logger.exception("Failed to reset chat", extra={"user_id": user_id})
                self._turns.append(Turn.assistant_text(get_reply("reset_failed")))
            else:
                self._handle = handle
                self._turns = [Turn.assistant_text(get_reply("reset_done"))]
        finally:
            self.status = SessionStatus.READY
        return self.view()
