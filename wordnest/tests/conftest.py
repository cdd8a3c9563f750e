from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from wordnest.local_store import MemoryStore
from wordnest.models.saved_word_models import RemoteSavedWord
from wordnest.services.remote.client import RemoteError
from wordnest.services.remote.endpoints import matching_entry
from wordnest.services.saved_words.local_collection import LocalSavedWords
from wordnest.services.saved_words.store import ReconciledSaveStore


class RawMemoryStore(MemoryStore):
    """MemoryStore that can hold text which is not valid JSON."""

    def set_raw(self, key: str, raw: str) -> None:
        self._items[key] = raw


class StepClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class SequentialIds:
    def __init__(self, prefix: str = "local"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


class FakeAuth:
    def __init__(self, authenticated: bool = False):
        self.authenticated = authenticated

    def is_authenticated(self) -> bool:
        return self.authenticated


class FakeSavedWordsApi:
    """Remote account store kept in memory; failures are injected per method."""

    def __init__(self):
        self.entries: list[RemoteSavedWord] = []
        self.calls: list[tuple] = []
        self.failures: dict[str, RemoteError] = {}
        self.create_gate: asyncio.Event | None = None
        self.list_gate: asyncio.Event | None = None
        self._count = 0

    def fail(self, method: str, error: RemoteError | None = None) -> None:
        self.failures[method] = error or RemoteError("Network Error")

    def recover(self) -> None:
        self.failures.clear()

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self.failures:
            raise self.failures[method]

    def add(self, word: str, *, entry_id: str | None = None, notes: str | None = None) -> RemoteSavedWord:
        self._count += 1
        entry = RemoteSavedWord.model_validate(
            {
                "_id": entry_id or f"r{self._count}",
                "word": {
                    "_id": f"w{self._count}",
                    "word": word,
                    "definition": f"definition of {word}",
                    "phonetic": f"/{word}/",
                },
                "wordText": word,
                "user": "user-1",
                "notes": notes,
                "savedAt": f"2024-05-01T10:00:{self._count:02d}Z",
            }
        )
        self.entries.append(entry)
        return entry

    def words(self) -> list[str]:
        return [entry.word_text for entry in self.entries]

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    async def list(self) -> list[RemoteSavedWord]:
        self._record("list")
        snapshot = list(self.entries)
        if self.list_gate is not None:
            await self.list_gate.wait()
        return snapshot

    async def create(self, word: str, notes: str | None = None) -> RemoteSavedWord:
        self._record("create", word)
        if self.create_gate is not None:
            await self.create_gate.wait()
        if matching_entry(self.entries, word) is not None:
            raise RemoteError("Word already saved", status_code=409, code="ALREADY_SAVED")
        return self.add(word, notes=notes)

    async def delete(self, saved_word_id: str) -> None:
        self._record("delete", saved_word_id)
        remaining = [entry for entry in self.entries if entry.id != saved_word_id]
        if len(remaining) == len(self.entries):
            raise RemoteError("Saved word not found", status_code=404)
        self.entries = remaining

    async def update_notes(self, saved_word_id: str, notes: str) -> None:
        self._record("update_notes", saved_word_id, notes)
        for index, entry in enumerate(self.entries):
            if entry.id == saved_word_id:
                self.entries[index] = entry.model_copy(update={"notes": notes})
                return
        raise RemoteError("Saved word not found", status_code=404)


@pytest.fixture
def memory_store() -> RawMemoryStore:
    return RawMemoryStore()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def local(memory_store, clock) -> LocalSavedWords:
    return LocalSavedWords(memory_store, clock=clock, id_factory=SequentialIds())


@pytest.fixture
def auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def remote() -> FakeSavedWordsApi:
    return FakeSavedWordsApi()


@pytest.fixture
def save_store(auth, local, remote) -> ReconciledSaveStore:
    return ReconciledSaveStore(auth, local, remote)
