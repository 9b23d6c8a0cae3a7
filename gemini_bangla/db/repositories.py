from __future__ import annotations
from typing import Any, Dict, Optional, List
from pymongo import DESCENDING
from pymongo.collection import Collection

from gemini_bangla.core.clock import utc_now
from gemini_bangla.db.mongo import MongoHandles

class ProfileRepo:
    """
    Read-only point lookups over the per-user profile collections.
    Every getter returns None (or an empty list) when the user has no record.
    """

    def __init__(
        self,
        *,
        profiles: Collection,
        cv_data: Collection,
        watchfinder_profiles: Collection,
        nutri_profiles: Collection,
        todo_tasks: Collection,
    ):
        self.profiles = profiles
        self.cv_data = cv_data
        self.watchfinder_profiles = watchfinder_profiles
        self.nutri_profiles = nutri_profiles
        self.todo_tasks = todo_tasks

    @classmethod
    def from_handles(cls, handles: MongoHandles) -> "ProfileRepo":
        return cls(
            profiles=handles["profiles"],
            cv_data=handles["cv_data"],
            watchfinder_profiles=handles["watchfinder_profiles"],
            nutri_profiles=handles["nutri_profiles"],
            todo_tasks=handles["todo_tasks"],
        )

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.profiles.find_one({"_id": user_id}, {"full_name": 1, "username": 1})

    def get_cv(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.cv_data.find_one({"_id": user_id}, {"raw_info": 1})

    def get_watchfinder_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.watchfinder_profiles.find_one(
            {"_id": user_id},
            {"favorite_genres": 1, "favorite_actors": 1, "preferred_description": 1},
        )

    def get_nutri_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.nutri_profiles.find_one({"_id": user_id}, {"goal": 1, "exclusions": 1})

    def list_recent_tasks(self, user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        cur = (
            self.todo_tasks.find({"user_id": user_id}, {"title": 1, "status": 1, "created_at": 1})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        return list(cur)  # newest→oldest

class ChatHistoryRepo:
    def __init__(self, chat_history: Collection):
        self.chat_history = chat_history

    def get_history(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.chat_history.find_one({"_id": user_id})

    def upsert_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        doc = {
            "_id": user_id,
            "user_id": user_id,
            "history": history,
            "updated_at": utc_now(),
        }
        self.chat_history.replace_one({"_id": user_id}, doc, upsert=True)

    def delete_history(self, user_id: str) -> None:
        self.chat_history.delete_one({"_id": user_id})
