from datetime import datetime, timezone
from typing import Any

from .models.saved_word_models import (
    Backend,
    LocalSavedWord,
    RemoteSavedWord,
    SavedWordEntry,
    StoredWord,
)
from .models.word_models import WordRecord

SOURCES = ("gemini", "database")


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def local_to_entry(item: LocalSavedWord) -> SavedWordEntry:
    return SavedWordEntry(
        id=item.id,
        word=item.word,
        definition=item.definition,
        phonetic=item.phonetic or None,
        part_of_speech=item.part_of_speech,
        examples=item.examples,
        translations=item.translations or {},
        synonyms=item.synonyms,
        antonyms=item.antonyms,
        source=item.source if item.source in SOURCES else None,
        notes=item.notes,
        saved_at=item.saved_at,
        folder_id=item.folder_id,
        backend=Backend.LOCAL,
    )


def remote_to_entry(item: RemoteSavedWord, fallback: WordRecord | None = None) -> SavedWordEntry:
    details = item.word
    base: dict[str, Any] = fallback.model_dump(exclude={"word"}) if fallback else {}
    remote_fields = {
        "definition": details.definition,
        "phonetic": details.phonetic,
        "part_of_speech": details.part_of_speech,
        "examples": details.examples,
        "translations": details.translations,
        "synonyms": details.synonyms,
        "antonyms": details.antonyms,
    }
    for name, value in remote_fields.items():
        if value:
            base[name] = value
    return SavedWordEntry(
        **base,
        id=item.id,
        word=item.word_text,
        notes=item.notes,
        saved_at=item.saved_at,
        backend=Backend.REMOTE,
    )


def to_entry(item: StoredWord) -> SavedWordEntry:
    if item.kind == "remote":
        return remote_to_entry(item)
    return local_to_entry(item)


def entry_to_local(entry: SavedWordEntry) -> dict[str, Any]:
    record = {
        "kind": "local",
        "_id": entry.id,
        "word": entry.word,
        "definition": entry.definition,
        "phonetic": entry.phonetic or "",
        "partOfSpeech": entry.part_of_speech,
        "examples": entry.examples,
        "translations": entry.translations,
        "synonyms": entry.synonyms,
        "antonyms": entry.antonyms,
        "source": entry.source,
        "notes": entry.notes,
        "savedAt": _iso(entry.saved_at),
        "folderId": entry.folder_id,
    }
    return {key: value for key, value in record.items() if value is not None}


def serialize_saved_word(entry: SavedWordEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "word": entry.word,
        "definition": entry.definition,
        "phonetic": entry.phonetic,
        "part_of_speech": entry.part_of_speech,
        "translations": entry.translations,
        "notes": entry.notes,
        "folder_id": entry.folder_id,
        "backend": entry.backend.value,
        "saved_at": _iso(entry.saved_at),
    }


def serialize_session(session) -> dict[str, Any]:
    card = session.current_card
    return {
        "id": session.id,
        "state": session.state.value,
        "current_index": session.current_index,
        "total": session.total,
        "remembered": session.remembered,
        "flipped": session.flipped,
        "current_card": card.model_dump(mode="json") if card else None,
    }
