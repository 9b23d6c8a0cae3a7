from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, List, Dict
from datetime import datetime


class _Doc(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProfileDoc(_Doc):
    id: str = Field(alias="_id")
    full_name: Optional[str] = None
    username: Optional[str] = None

class CvDoc(_Doc):
    id: str = Field(alias="_id")
    raw_info: Optional[str] = None

class WatchfinderProfileDoc(_Doc):
    id: str = Field(alias="_id")
    favorite_genres: Optional[List[str]] = None
    favorite_actors: Optional[List[str]] = None
    preferred_description: Optional[str] = None

class NutriProfileDoc(_Doc):
    id: str = Field(alias="_id")
    goal: Optional[str] = None
    exclusions: Optional[List[str]] = None

class TodoTaskDoc(_Doc):
    title: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None

class ChatHistoryDoc(_Doc):
    id: str = Field(alias="_id")
    user_id: str
    history: List[Dict[str, Any]] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
