from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ...models.word_models import word_key


class KeyedLock:
    """One asyncio lock per case-folded word, dropped once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, word: str) -> AsyncIterator[None]:
        key = word_key(word)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_busy(self, word: str) -> bool:
        return word_key(word) in self._users

    def __len__(self) -> int:
        return len(self._locks)
