from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def word_key(word: str) -> str:
    return (word or "").strip().casefold()


def _unique(values: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class WordRecord(BaseModel):
    """A dictionary lookup result.

    Synonyms and antonyms keep their display order but compare as sets.
    """

    model_config = ConfigDict(populate_by_name=True)

    word: str = Field(..., min_length=1)
    definition: str = ""
    phonetic: str | None = None
    part_of_speech: str | None = Field(default=None, alias="partOfSpeech")
    examples: list[str] = Field(default_factory=list)
    translations: dict[str, str] = Field(default_factory=dict)
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)
    source: Literal["gemini", "database"] | None = None

    @field_validator("synonyms", "antonyms")
    @classmethod
    def dedupe_terms(cls, value: list[str]) -> list[str]:
        return _unique(value)

    @field_validator("translations", mode="before")
    @classmethod
    def drop_empty_translations(cls, value):
        if not value:
            return {}
        return {locale: text for locale, text in value.items() if text}

    def same_word(self, other: "WordRecord | str") -> bool:
        other_word = other if isinstance(other, str) else other.word
        return word_key(self.word) == word_key(other_word)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordRecord):
            return NotImplemented
        return (
            self.same_word(other)
            and self.definition == other.definition
            and self.phonetic == other.phonetic
            and self.part_of_speech == other.part_of_speech
            and self.examples == other.examples
            and self.translations == other.translations
            and set(self.synonyms) == set(other.synonyms)
            and set(self.antonyms) == set(other.antonyms)
            and self.source == other.source
        )


class CardWord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    word: str
    definition: str = ""


class StudyCard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word: CardWord
    learned: bool = False
    notes: str | None = None
    last_reviewed: datetime | None = Field(default=None, alias="lastReviewed")
    proficiency: int = 0


class VocabList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    description: str | None = None
    statistics: dict | None = None
    words: list[StudyCard] = Field(default_factory=list)
