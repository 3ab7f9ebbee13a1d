"""
Shared fixtures for the search tests.

The document store is replaced by an in-memory StoreClientInterface that
evaluates the subset of the MongoDB query language the search tiers use,
so the real filters built by the tiers are exercised. Gemini clients are
AsyncMocks unless a test needs the real HTTP layer.
"""

import os

os.environ.setdefault("LOG_TO_FILE", "false")

import logging
import re
from unittest.mock import AsyncMock

import pytest

from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.errors import DocumentStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.models.config import EnvConfig

# Variables that would leak real credentials or endpoints into the tests
_ISOLATED_ENV = (
    "GEMINI_API_KEY",
    "EMBED_GEMINI_API_KEY",
    "LLM_GEMINI_API_KEY",
    "EMBED_GEMINI_BASE_URL",
    "LLM_GEMINI_BASE_URL",
    "EMBED_ENGINE",
    "LLM_ENGINE",
    "STORE_ENGINE",
    "STORE_MONGO_URI",
    "STORE_MONGO_DATABASE",
    "MONGODB_URI",
    "MONGODB_DB",
    "STORAGE_PUBLIC_URL",
)


# ---------------------------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------------------------


def _as_list(value):
    return value if isinstance(value, list) else [value]


def matches_filter(record: dict, filter: dict) -> bool:
    """Evaluate $or, $regex/$options, $exists, $ne and $in like MongoDB does."""
    for key, cond in filter.items():
        if key == "$or":
            if not any(matches_filter(record, sub) for sub in cond):
                return False
            continue
        value = record.get(key)
        if not isinstance(cond, dict):
            if value != cond:
                return False
            continue
        if "$exists" in cond and (key in record) != cond["$exists"]:
            return False
        if "$ne" in cond and value == cond["$ne"]:
            return False
        if "$regex" in cond:
            flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
            pattern = re.compile(cond["$regex"], flags)
            if not any(isinstance(v, str) and pattern.search(v) for v in _as_list(value)):
                return False
        if "$in" in cond and not any(v in cond["$in"] for v in _as_list(value)):
            return False
    return True


class InMemoryStoreClient(StoreClientInterface):
    """StoreClientInterface backed by dicts, recording every query."""

    def __init__(self, helper_config: HelperConfig, records: dict[str, list[dict]] | None = None):
        super().__init__(helper_config=helper_config)
        self.records = {name: [] for name in self.get_collections()}
        self.records.update(records or {})
        self.failing: set[str] = set()
        self.calls: list[tuple[str, dict, int | None]] = []

    def _get_engine_name(self) -> str:
        return "Memory"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    async def boot(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def do_healthcheck(self) -> None:
        pass

    async def _fetch(self, collection, filter, limit=None, exclude_fields=()):
        self.calls.append((collection, filter, limit))
        if collection in self.failing:
            raise DocumentStoreError(f"{collection} is down", collection=collection)
        found = [
            {k: v for k, v in record.items() if k not in exclude_fields}
            for record in self.records.get(collection, [])
            if matches_filter(record, filter)
        ]
        return found[:limit] if limit is not None else found


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)
    for prefix in ("EMBED", "LLM"):
        monkeypatch.setenv(f"{prefix}_RETRY_BASE_DELAY", "0")


@pytest.fixture
def helper_config():
    return HelperConfig(logger=ColorLogger(logging.getLogger("tests")))


@pytest.fixture
def sample_records():
    """One realistic document per collection, as MongoDB hands them out."""
    return {
        "EmploymentNotice": [
            {
                "_id": "en-1",
                "title": "Recruitment of Staff Nurses",
                "content": "Applications are invited for the post of staff nurse.",
                "categories": ["recruitment"],
                "keywords": ["nursing", "health jobs"],
                "department": "Health",
                "createdAt": {"$date": "2024-03-05T10:30:00Z"},
                "embedding": [0.0, 1.0, 0.0],
                "filePath": "2024/staff_nurse_notice.pdf",
            },
        ],
        "NotificationCircular": [
            {
                "_id": "nc-1",
                "title": "Holiday Circular",
                "content": "Public holidays for the year.",
                "categories": ["circular"],
                "keywords": ["holidays"],
                "department": "Home",
                "createdAt": "2024-02-01",
                "summary": "List of gazetted holidays.",
            },
        ],
        "Tender": [
            {
                "_id": "t-1",
                "title": "Student Support Programme",
                "content": "Supply of printed material.",
                "categories": ["scholarship form"],
                "keywords": ["education"],
                "department": "Education",
                "createdAt": {"$date": "2024-01-01T00:00:00Z"},
                "embedding": [1.0, 0.0, 0.0],
            },
        ],
    }


@pytest.fixture
def make_store(helper_config):
    def _make(records: dict[str, list[dict]] | None = None) -> InMemoryStoreClient:
        return InMemoryStoreClient(helper_config, records)

    return _make


@pytest.fixture
def store(make_store, sample_records):
    return make_store(sample_records)


@pytest.fixture
def embed_client():
    client = AsyncMock()
    client.do_embed = AsyncMock(return_value=[0.0, 0.0, 1.0])
    return client


@pytest.fixture
def llm_client():
    client = AsyncMock()
    client.do_generate = AsyncMock(return_value="")
    return client
