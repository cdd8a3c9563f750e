from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from ...models.saved_word_models import SavedWordEntry, StoredWord
from ...models.word_models import WordRecord, word_key
from ...serializers import entry_to_local, to_entry

logger = logging.getLogger(__name__)

SAVED_WORDS_KEY = "saved_words"

_stored_word = TypeAdapter(StoredWord)


def _tag(payload: dict[str, Any]) -> dict[str, Any]:
    # Records written before entries were tagged: API-shaped ones nest the word.
    if "kind" not in payload:
        payload["kind"] = "remote" if isinstance(payload.get("word"), dict) else "local"
    return payload


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class LocalSavedWords:
    """Saved words kept in the on-device store under a single key.

    Every read-modify-write runs under one lock so two saves landing in the
    same tick cannot drop each other's update.
    """

    def __init__(
        self,
        local_store,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.local_store = local_store
        self.clock = clock
        self.id_factory = id_factory
        self._lock = threading.RLock()

    def _load(self) -> list[SavedWordEntry]:
        raw = self.local_store.get_json(SAVED_WORDS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Ignoring saved words stored as %s", type(raw).__name__)
            return []

        entries: list[SavedWordEntry] = []
        healed = False
        for item in raw:
            if not isinstance(item, dict):
                continue
            payload = _tag(dict(item))
            if not payload.get("_id"):
                payload["_id"] = self.id_factory()
                healed = True
            if not payload.get("savedAt"):
                payload["savedAt"] = self.clock().isoformat()
                healed = True
            try:
                entries.append(to_entry(_stored_word.validate_python(payload)))
            except ValidationError as exc:
                logger.warning("Dropping malformed saved word %r: %s", item.get("word"), exc.error_count())
        if healed:
            # Filled-in ids and timestamps must survive to the next read.
            self._write(entries)
        return entries

    def _write(self, entries: list[SavedWordEntry]) -> None:
        self.local_store.set_json(SAVED_WORDS_KEY, [entry_to_local(entry) for entry in entries])

    @staticmethod
    def _index_of(entries: list[SavedWordEntry], word: str) -> int:
        key = word_key(word)
        for index, entry in enumerate(entries):
            if word_key(entry.word) == key:
                return index
        return -1

    def all(self) -> list[SavedWordEntry]:
        with self._lock:
            entries = self._load()
        return sorted(entries, key=lambda entry: entry.saved_at, reverse=True)

    def find(self, word: str) -> SavedWordEntry | None:
        with self._lock:
            entries = self._load()
        index = self._index_of(entries, word)
        return entries[index] if index >= 0 else None

    def contains(self, word: str) -> bool:
        return self.find(word) is not None

    def save(self, record: WordRecord, notes: str | None = None) -> SavedWordEntry:
        with self._lock:
            entries = self._load()
            index = self._index_of(entries, record.word)
            existing = entries[index] if index >= 0 else None
            entry = SavedWordEntry(
                **record.model_dump(include=set(WordRecord.model_fields)),
                id=existing.id if existing else self.id_factory(),
                saved_at=self.clock(),
                notes=notes if notes is not None else (existing.notes if existing else None),
                folder_id=existing.folder_id if existing else None,
            )
            self._put(entries, index, entry)
            return entry

    def mirror(self, entry: SavedWordEntry) -> SavedWordEntry:
        with self._lock:
            entries = self._load()
            index = self._index_of(entries, entry.word)
            folder_id = entries[index].folder_id if index >= 0 else None
            stored = entry.model_copy(update={"folder_id": entry.folder_id or folder_id})
            self._put(entries, index, stored)
            return stored

    def _put(self, entries: list[SavedWordEntry], index: int, entry: SavedWordEntry) -> None:
        if index >= 0:
            entries[index] = entry
        else:
            entries.append(entry)
        self._write(entries)

    def remove(self, word: str) -> bool:
        with self._lock:
            entries = self._load()
            key = word_key(word)
            remaining = [entry for entry in entries if word_key(entry.word) != key]
            if len(remaining) == len(entries):
                return False
            self._write(remaining)
            return True

    def replace_all(self, entries: list[SavedWordEntry]) -> None:
        with self._lock:
            folders = {word_key(entry.word): entry.folder_id for entry in self._load() if entry.folder_id}
            deduped: dict[str, SavedWordEntry] = {}
            for entry in entries:
                key = word_key(entry.word)
                if key in deduped:
                    continue
                if not entry.folder_id and key in folders:
                    entry = entry.model_copy(update={"folder_id": folders[key]})
                deduped[key] = entry
            self._write(list(deduped.values()))

    def update_notes(self, word: str, notes: str) -> SavedWordEntry | None:
        with self._lock:
            entries = self._load()
            index = self._index_of(entries, word)
            if index < 0:
                return None
            entry = entries[index].model_copy(update={"notes": notes})
            self._put(entries, index, entry)
            return entry

    def _set_folder(self, entry_id: str, folder_id: str | None) -> bool:
        with self._lock:
            entries = self._load()
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    self._put(entries, index, entry.model_copy(update={"folder_id": folder_id}))
                    return True
            return False

    def assign_folder(self, entry_id: str, folder_id: str) -> bool:
        return self._set_folder(entry_id, folder_id)

    def clear_folder(self, entry_id: str) -> bool:
        return self._set_folder(entry_id, None)

    def in_folder(self, folder_id: str) -> list[SavedWordEntry]:
        return [entry for entry in self.all() if entry.folder_id == folder_id]
