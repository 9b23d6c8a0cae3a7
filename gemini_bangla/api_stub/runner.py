from __future__ import annotations

from typing import Optional, Tuple
from dotenv import load_dotenv

load_dotenv()  # Load .env file

from gemini_bangla.app.settings import load_settings
from gemini_bangla.app.logging import setup_logging
from gemini_bangla.db.mongo import connect_mongo, ensure_indexes
from gemini_bangla.db.repositories import ChatHistoryRepo, ProfileRepo
from gemini_bangla.llms.providers.gemini_client import GeminiChatClient
from gemini_bangla.schemas.chat_schema import SessionView
from gemini_bangla.session.context_aggregator import ContextAggregator
from gemini_bangla.session.history_store import ChatHistoryStore
from gemini_bangla.session.session_manager import SessionManager


async def open_session(
    user_id: str,
    api_key: Optional[str] = None,
) -> Tuple[SessionManager, SessionView]:
    """
    Minimal callable entrypoint (page mount):
    - load settings + logging
    - connect Mongo and build the session manager
    - initialize the session for this user
    - return (manager, initial view); the caller then uses
      manager.send_message / manager.reset_session
    """
    s = load_settings()
    setup_logging(s.log_level)

    handles = connect_mongo(s.mongo_uri, s.mongo_db)
    ensure_indexes(handles)

    sm = SessionManager(
        aggregator=ContextAggregator(ProfileRepo.from_handles(handles)),
        history=ChatHistoryStore(ChatHistoryRepo(handles["chat_history"])),
        chat_client=GeminiChatClient(s.gemini_model, timeout_s=s.gemini_timeout_s),
    )
    view = await sm.initialize_session(user_id, api_key or s.gemini_api_key)
    return sm, view
