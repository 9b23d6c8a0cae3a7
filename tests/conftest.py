"""Shared pytest fixtures: in-memory stand-ins for Mongo repos and the Gemini SDK."""

import asyncio
import time
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from gemini_bangla.llms.providers.gemini_client import GeminiChatClient
from gemini_bangla.session.context_aggregator import ContextAggregator
from gemini_bangla.session.history_store import ChatHistoryStore
from gemini_bangla.session.session_manager import SessionManager


class FakeProfileRepo:
    """Duck-types ProfileRepo. `fail` names sources that raise, `delays` slows sources down."""

    def __init__(self, profile=None, cv=None, watchfinder=None, nutri=None, tasks=None, fail=(), delays=None):
        self.records = {
            "identity": profile,
            "professional": cv,
            "preferences": watchfinder,
            "health": nutri,
            "tasks": tasks or [],
        }
        self.fail = set(fail)
        self.delays = delays or {}
        self.calls = []

    def _get(self, source, user_id):
        self.calls.append((source, user_id))
        time.sleep(self.delays.get(source, 0))
        if source in self.fail:
            raise ServerSelectionTimeoutError(f"{source} unreachable")
        return self.records[source]

    def get_profile(self, user_id):
        return self._get("identity", user_id)

    def get_cv(self, user_id):
        return self._get("professional", user_id)

    def get_watchfinder_profile(self, user_id):
        return self._get("preferences", user_id)

    def get_nutri_profile(self, user_id):
        return self._get("health", user_id)

    def list_recent_tasks(self, user_id, limit=5):
        return self._get("tasks", user_id)[:limit]


class FakeHistoryRepo:
    """Duck-types ChatHistoryRepo. get_history hands back the stored object itself (aliased)."""

    def __init__(self):
        self.docs = {}
        self.upserts = []
        self.deletes = []
        self.fail_get = False
        self.fail_upsert = False
        self.fail_delete = False

    def get_history(self, user_id):
        if self.fail_get:
            raise ServerSelectionTimeoutError("history read failed")
        return self.docs.get(user_id)

    def upsert_history(self, user_id, history):
        if self.fail_upsert:
            raise ServerSelectionTimeoutError("history write failed")
        self.upserts.append((user_id, history))
        self.docs[user_id] = {
            "_id": user_id,
            "user_id": user_id,
            "history": history,
            "updated_at": datetime.now(timezone.utc),
        }

    def delete_history(self, user_id):
        if self.fail_delete:
            raise ServerSelectionTimeoutError("history delete failed")
        self.deletes.append(user_id)
        self.docs.pop(user_id, None)


class FakeChat:
    def __init__(self, owner, model, config, history):
        self.owner = owner
        self.model = model
        self.config = config
        self.history = history
        self.sent = []

    async def send_message(self, message):
        self.sent.append(message)
        if self.owner.gate is not None:
            await self.owner.gate.wait()
        reply = self.owner.replies.pop(0) if self.owner.replies else "ok"
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class FakeGenai:
    """Stands in for google.genai.Client: only `.aio.chats.create` is used."""

    def __init__(self):
        self.replies = []
        self.gate = None
        self.api_keys = []
        self.chats = []
        self.aio = SimpleNamespace(chats=SimpleNamespace(create=self._create))

    def factory(self, api_key):
        self.api_keys.append(api_key)
        return self

    def _create(self, *, model, config=None, history=None):
        chat = FakeChat(self, model, config, history)
        self.chats.append(chat)
        return chat


@pytest.fixture
def profile_repo():
    return FakeProfileRepo(
        profile={"_id": "u1", "full_name": "Rahim Uddin", "username": "rahim"},
        cv={"_id": "u1", "raw_info": "Software engineer in Dhaka."},
        watchfinder={"_id": "u1", "favorite_genres": ["Drama", "Thriller"], "favorite_actors": []},
        nutri={"_id": "u1", "goal": "lose", "exclusions": ["beef"]},
        tasks=[{"title": "Pay bills", "status": "todo"}, {"title": "Call Ammu", "status": "done"}],
    )


@pytest.fixture
def history_repo():
    return FakeHistoryRepo()


@pytest.fixture
def genai_fake():
    return FakeGenai()


@pytest.fixture
def chat_client(genai_fake):
    return GeminiChatClient("gemini-test", client_factory=genai_fake.factory)


@pytest.fixture
def manager(profile_repo, history_repo, chat_client):
    return SessionManager(
        aggregator=ContextAggregator(profile_repo),
        history=ChatHistoryStore(history_repo),
        chat_client=chat_client,
    )


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def until():
    return wait_until


def _matches(doc, flt):
    return all(doc.get(k) == v for k, v in flt.items())


def _project(doc, projection):
    if not projection:
        return dict(doc)
    keep = {k for k, v in projection.items() if v} | {"_id"}
    return {k: v for k, v in doc.items() if k in keep}


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Just enough of pymongo's Collection for the repositories."""

    def __init__(self, docs=()):
        self.docs = [dict(d) for d in docs]
        self.indexes = []

    def find_one(self, flt, projection=None):
        for d in self.docs:
            if _matches(d, flt):
                return _project(d, projection)
        return None

    def find(self, flt, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, flt)])

    def replace_one(self, flt, doc, upsert=False):
        for i, d in enumerate(self.docs):
            if _matches(d, flt):
                self.docs[i] = dict(doc)
                return
        if upsert:
            self.docs.append(dict(doc))

    def delete_one(self, flt):
        self.docs = [d for d in self.docs if not _matches(d, flt)]

    def create_index(self, keys, **kwargs):
        self.indexes.append(keys)


@pytest.fixture
def mongo_handles():
    now = datetime(2025, 1, 10, tzinfo=timezone.utc)
    return {
        "db": None,
        "profiles": FakeCollection([{"_id": "u1", "full_name": "Rahim Uddin", "username": "rahim", "email": "r@x"}]),
        "cv_data": FakeCollection([{"_id": "u1", "raw_info": "Software engineer in Dhaka."}]),
        "watchfinder_profiles": FakeCollection(),
        "nutri_profiles": FakeCollection([{"_id": "u1", "goal": "gain", "exclusions": []}]),
        "todo_tasks": FakeCollection(
            [
                {"_id": f"t{i}", "user_id": "u1", "title": f"task {i}", "status": "todo",
                 "created_at": now.replace(day=i + 1)}
                for i in range(7)
            ]
            + [{"_id": "other", "user_id": "u2", "title": "not mine", "created_at": now}]
        ),
        "chat_history": FakeCollection(),
    }
