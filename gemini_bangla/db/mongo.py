from __future__ import annotations
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from typing import TypedDict

class MongoHandles(TypedDict):
    db: Database
    profiles: Collection
    cv_data: Collection
    watchfinder_profiles: Collection
    nutri_profiles: Collection
    todo_tasks: Collection
    chat_history: Collection

def connect_mongo(mongo_uri: str, db_name: str) -> MongoHandles:
    client = MongoClient(
        mongo_uri,
        serverSelectionTimeoutMS=30000,
        connectTimeoutMS=20000,
        socketTimeoutMS=20000,
    )
    db = client[db_name]
    return {
        "db": db,
        "profiles": db["profiles"],
        "cv_data": db["cv_data"],
        "watchfinder_profiles": db["watchfinder_profiles"],
        "nutri_profiles": db["banglanutri_profiles"],
        "todo_tasks": db["todo_tasks"],
        "chat_history": db["gemini_bangla_chat_history"],
    }

def ensure_indexes(handles: MongoHandles) -> None:
    # Profile-style collections are keyed by _id (= user id); only tasks need one.
    handles["todo_tasks"].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    handles["chat_history"].create_index([("updated_at", DESCENDING)])
