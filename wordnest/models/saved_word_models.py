from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .word_models import WordRecord


class Backend(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


class SavedWordEntry(WordRecord):
    id: str
    saved_at: datetime
    notes: str | None = None
    folder_id: str | None = None
    backend: Backend = Backend.LOCAL

    @field_validator("saved_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SavedWordEntry):
            return NotImplemented
        return (
            WordRecord.__eq__(self, other)
            and self.id == other.id
            and self.saved_at == other.saved_at
            and self.notes == other.notes
            and self.folder_id == other.folder_id
            and self.backend == other.backend
        )


class LocalSavedWord(BaseModel):
    """Saved word as persisted in the on-device store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: Literal["local"] = "local"
    id: str = Field(..., alias="_id")
    word: str = Field(..., min_length=1)
    definition: str = ""
    phonetic: str = ""
    part_of_speech: str | None = Field(default=None, alias="partOfSpeech")
    examples: list[str] = Field(default_factory=list)
    translations: dict[str, str | None] | None = None
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)
    source: str | None = None
    notes: str | None = None
    saved_at: datetime = Field(..., alias="savedAt")
    folder_id: str | None = Field(default=None, alias="folderId")


class RemoteWordDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, alias="_id")
    word: str = ""
    definition: str = ""
    phonetic: str | None = None
    part_of_speech: str | None = Field(default=None, alias="partOfSpeech")
    examples: list[str] = Field(default_factory=list)
    translations: dict[str, str | None] | None = None
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)


class RemoteSavedWord(BaseModel):
    """Saved word as returned by the remote account store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: Literal["remote"] = "remote"
    id: str = Field(..., alias="_id")
    word: RemoteWordDetails
    word_text: str = Field(..., alias="wordText", min_length=1)
    user: str | None = None
    notes: str | None = None
    saved_at: datetime = Field(..., alias="savedAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def lift_flat_shape(cls, data: Any) -> Any:
        # Some endpoints return {id, word: "text", definition, phonetic, ...}.
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        if "_id" not in payload and "id" in payload:
            payload["_id"] = payload.pop("id")
        word = payload.get("word")
        if isinstance(word, str):
            payload["word"] = {
                "word": word,
                "definition": payload.pop("definition", "") or "",
                "phonetic": payload.pop("phonetic", None),
                "partOfSpeech": payload.pop("partOfSpeech", None),
            }
            payload.setdefault("wordText", word)
        elif isinstance(word, dict) and "wordText" not in payload:
            payload["wordText"] = word.get("word", "")
        return payload


StoredWord = Annotated[Union[LocalSavedWord, RemoteSavedWord], Field(discriminator="kind")]


class SavedWordCreate(BaseModel):
    word: str = Field(..., min_length=1)
    notes: str | None = None
    record: WordRecord | None = None


class NotesUpdate(BaseModel):
    notes: str


class FolderAssignment(BaseModel):
    folder_id: str = Field(..., min_length=1)


class SavedWordResponse(BaseModel):
    id: str
    word: str
    definition: str = ""
    phonetic: str | None = None
    part_of_speech: str | None = None
    translations: dict[str, str] = {}
    notes: str | None = None
    folder_id: str | None = None
    backend: Backend
    saved_at: str | None = None


class SavedWordsListResponse(BaseModel):
    words: list[SavedWordResponse]
    degraded: bool = False
    revision: int = 0


class SavedStatusResponse(BaseModel):
    word: str
    saved: bool
    degraded: bool = False
