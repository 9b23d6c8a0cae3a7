from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from gemini_bangla.app.errors import ContextFetchError
from gemini_bangla.core.utils import join_nonempty
from gemini_bangla.db.repositories import ProfileRepo
from gemini_bangla.db.schemas import (
    CvDoc,
    NutriProfileDoc,
    ProfileDoc,
    TodoTaskDoc,
    WatchfinderProfileDoc,
)

logger = logging.getLogger(__name__)

SUMMARY_CHARS = 150
MAX_TASKS = 5


def _render_identity(doc: Dict[str, Any]) -> Optional[str]:
    p = ProfileDoc.model_validate(doc)
    name = (p.full_name or p.username or "").strip()
    return f"User's Name: {name}." if name else None


def _render_professional(doc: Dict[str, Any]) -> Optional[str]:
    raw = (CvDoc.model_validate(doc).raw_info or "").strip()
    return f"Professional Summary: {raw[:SUMMARY_CHARS]}..." if raw else None


def _render_preferences(doc: Dict[str, Any]) -> Optional[str]:
    w = WatchfinderProfileDoc.model_validate(doc)
    out = []
    genres = join_nonempty(w.favorite_genres)
    if genres:
        out.append(f"Movie Tastes: Likes genres like {genres}.")
    actors = join_nonempty(w.favorite_actors)
    if actors:
        out.append(f"Favourite actors: {actors}.")
    return " ".join(out) or None


def _render_health(doc: Dict[str, Any]) -> Optional[str]:
    n = NutriProfileDoc.model_validate(doc)
    out = []
    goal = (n.goal or "").strip()
    if goal:
        out.append(f"Health Goal: To {goal} weight.")
    exclusions = join_nonempty(n.exclusions)
    if exclusions:
        out.append(f"They don't eat: {exclusions}.")
    return " ".join(out) or None


def _render_tasks(docs: List[Dict[str, Any]]) -> Optional[str]:
    titles = join_nonempty([TodoTaskDoc.model_validate(d).title for d in docs])
    return f"Recent Tasks: {titles}." if titles else None


@dataclass(frozen=True)
class _Source:
    name: str
    fetch: Callable[[str], Any]
    render: Callable[[Any], Optional[str]]


class ContextAggregator:
    """
    Builds the user-context paragraph injected into the system instruction.

    All profile lookups run concurrently; a missing record just drops its
    fragment, any other failure raises ContextFetchError for that source.
    Fragment order is fixed: identity, professional, preferences, health, tasks.
    """

    def __init__(self, repo: ProfileRepo, *, max_tasks: int = MAX_TASKS):
        self.repo = repo
        self.max_tasks = max_tasks

    def _sources(self) -> List[_Source]:
        return [
            _Source("identity", self.repo.get_profile, _render_identity),
            _Source("professional", self.repo.get_cv, _render_professional),
            _Source("preferences", self.repo.get_watchfinder_profile, _render_preferences),
            _Source("health", self.repo.get_nutri_profile, _render_health),
            _Source(
                "tasks",
                lambda uid: self.repo.list_recent_tasks(uid, limit=self.max_tasks),
                _render_tasks,
            ),
        ]

    async def _fetch(self, source: _Source, user_id: str) -> Optional[str]:
        try:
            result = await asyncio.to_thread(source.fetch, user_id)
            # not-found: None for point lookups, empty list for tasks
            if result is None or (isinstance(result, list) and not result):
                return None
            return source.render(result)
        except Exception as e:
            raise ContextFetchError(source.name, type(e).__name__) from e

    async def aggregate(self, user_id: str) -> str:
        sources = self._sources()
        fragments = await asyncio.gather(*(self._fetch(s, user_id) for s in sources))
        context = " ".join(f for f in fragments if f).strip()
        logger.debug("Aggregated context for %s (%d chars)", user_id, len(context))
        return context
