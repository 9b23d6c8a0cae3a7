from __future__ import annotations

import asyncio
import copy
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from gemini_bangla.app.errors import PersistenceError
from gemini_bangla.db.repositories import ChatHistoryRepo
from gemini_bangla.db.schemas import ChatHistoryDoc
from gemini_bangla.schemas.chat_schema import Turn, has_user_turn

logger = logging.getLogger(__name__)


class ChatHistoryStore:
    """
    Per-user chat history persisted as one document in Mongo.

    - load: stored turns as an independent copy, or None when there is no record
    - save: full replace; only for sequences holding at least one user turn
    - clear: delete the record
    """

    def __init__(self, repo: ChatHistoryRepo):
        self.repo = repo

    async def load(self, user_id: str) -> Optional[List[Turn]]:
        try:
            doc = await asyncio.to_thread(self.repo.get_history, user_id)
        except Exception as e:
            raise PersistenceError(f"Failed to load chat history for {user_id}") from e

        if doc is None:
            return None

        try:
            record = ChatHistoryDoc.model_validate(copy.deepcopy(doc))
            turns = [Turn.model_validate(t) for t in record.history]
        except ValidationError as e:
            raise PersistenceError(f"Stored chat history for {user_id} is malformed") from e

        return turns or None

    async def save(self, user_id: str, turns: Sequence[Turn]) -> None:
        if not has_user_turn(list(turns)):
            raise ValueError("refusing to save a history without any user turn")

        payload = [t.model_dump(mode="json") for t in turns]
        try:
            await asyncio.to_thread(self.repo.upsert_history, user_id, payload)
        except Exception as e:
            raise PersistenceError(f"Failed to save chat history for {user_id}") from e
        logger.debug("Saved %d turns for %s", len(payload), user_id)

    async def clear(self, user_id: str) -> None:
        try:
            await asyncio.to_thread(self.repo.delete_history, user_id)
        except Exception as e:
            raise PersistenceError(f"Failed to clear chat history for {user_id}") from e
