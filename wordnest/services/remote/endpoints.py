from __future__ import annotations

from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from ...config import TTS_BASE_URL, TTS_LANGUAGE
from ...models.auth_models import AuthResponse, LoginRequest, RegisterRequest, UserProfile
from ...models.saved_word_models import RemoteSavedWord
from ...models.word_models import VocabList, WordRecord, word_key
from .client import ApiClient, RemoteError


def _parse(model, payload: Any, what: str):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RemoteError(f"Invalid {what} in response") from exc


def _saved_words_payload(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("savedWords"), list):
        return payload["savedWords"]
    raise RemoteError("Invalid API response format")


class SavedWordsApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self) -> list[RemoteSavedWord]:
        payload = await self.client.get("/saved-words")
        return [_parse(RemoteSavedWord, item, "saved word") for item in _saved_words_payload(payload)]

    async def create(self, word: str, notes: str | None = None) -> RemoteSavedWord:
        body: dict[str, Any] = {"word": word}
        if notes is not None:
            body["notes"] = notes
        payload = await self.client.post("/saved-words", body)
        return _parse(RemoteSavedWord, payload, "saved word")

    async def delete(self, saved_word_id: str) -> None:
        await self.client.delete(f"/saved-words/{quote(saved_word_id, safe='')}")

    async def update_notes(self, saved_word_id: str, notes: str) -> None:
        await self.client.patch(f"/saved-words/{quote(saved_word_id, safe='')}", {"notes": notes})


class DictionaryApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def lookup(self, word: str) -> WordRecord:
        payload = await self.client.post("/dictionary/lookup", {"word": word})
        return _parse(WordRecord, payload, "dictionary entry")

    async def check_word(self, word: str) -> bool:
        payload = await self.client.get(f"/dictionary/check/{quote(word, safe='')}")
        return bool(isinstance(payload, dict) and payload.get("exists"))

    async def popular_words(self, limit: int | None = None) -> list[dict[str, Any]]:
        params = {"limit": limit} if limit else None
        payload = await self.client.get("/dictionary/popular", params=params)
        if not isinstance(payload, list):
            raise RemoteError("Invalid API response format")
        return [item for item in payload if isinstance(item, dict) and item.get("word")]


class VocabListApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get_lists(self) -> list[VocabList]:
        payload = await self.client.get("/vocab-lists")
        if not isinstance(payload, list):
            raise RemoteError("Invalid API response format")
        return [_parse(VocabList, item, "vocabulary list") for item in payload]

    async def get_list(self, list_id: str) -> VocabList | None:
        for vocab_list in await self.get_lists():
            if vocab_list.id == list_id:
                return vocab_list
        return None


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, credentials: LoginRequest) -> AuthResponse:
        payload = await self.client.post("/auth/login", credentials.model_dump())
        return _parse(AuthResponse, payload, "auth response")

    async def register(self, credentials: RegisterRequest) -> AuthResponse:
        payload = await self.client.post("/auth/register", credentials.model_dump())
        return _parse(AuthResponse, payload, "auth response")

    async def profile(self) -> UserProfile:
        payload = await self.client.get("/auth/me")
        return _parse(UserProfile, payload, "user profile")


def speech_url(text: str, language: str = TTS_LANGUAGE) -> str:
    return f"{TTS_BASE_URL}?language={quote(language)}&text={quote(text)}"


def matching_entry(entries: list[RemoteSavedWord], word: str) -> RemoteSavedWord | None:
    key = word_key(word)
    for entry in entries:
        if word_key(entry.word_text) == key:
            return entry
    return None
