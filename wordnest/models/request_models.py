from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from .word_models import StudyCard


class LookupRequest(BaseModel):
    word: str = Field(..., min_length=1)


class PopularWord(BaseModel):
    word: str
    definition: str = ""
    usage: dict[str, Any] | None = None


class SpeechResponse(BaseModel):
    text: str
    url: str


class FlashcardSessionCreate(BaseModel):
    list_id: str | None = None
    cards: list[StudyCard] | None = None

    @model_validator(mode="after")
    def require_source(self) -> "FlashcardSessionCreate":
        if self.cards is None and not self.list_id:
            raise ValueError("Provide either list_id or cards")
        return self


class AnswerRequest(BaseModel):
    remembered: bool


class FlashcardSessionResponse(BaseModel):
    id: str
    state: Literal["loading", "active", "complete", "empty"]
    current_index: int
    total: int
    remembered: int
    flipped: bool
    current_card: StudyCard | None = None
