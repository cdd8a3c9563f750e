from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from ...models.saved_word_models import Backend, SavedWordEntry
from ...models.word_models import WordRecord
from ...serializers import remote_to_entry
from ..remote.client import RemoteError
from ..remote.endpoints import SavedWordsApi, matching_entry
from .errors import NotFound, RemoveFailed, SaveFailed
from .local_collection import LocalSavedWords
from .locks import KeyedLock

logger = logging.getLogger(__name__)


@dataclass
class SavedStatus:
    word: str
    saved: bool
    degraded: bool = False


@dataclass
class SavedWordsListing:
    entries: list[SavedWordEntry] = field(default_factory=list)
    degraded: bool = False


def _newest_first(entries: list[SavedWordEntry]) -> list[SavedWordEntry]:
    return sorted(entries, key=lambda entry: entry.saved_at, reverse=True)


class ReconciledSaveStore:
    """Saved-word membership across the on-device store and the remote account.

    ``auth`` is asked on every call whether the user is signed in; the remote
    account is authoritative while signed in, the device otherwise. The
    device copy doubles as a mirror of the remote account for degraded reads.
    """

    def __init__(
        self,
        auth,
        local: LocalSavedWords,
        remote: SavedWordsApi,
        *,
        locks: KeyedLock | None = None,
    ):
        self.auth = auth
        self.local = local
        self.remote = remote
        self.locks = locks or KeyedLock()
        self.revision = 0
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def authoritative(self) -> Backend:
        return Backend.REMOTE if self.auth.is_authenticated() else Backend.LOCAL

    def _changed(self) -> None:
        self.revision += 1

    async def check_saved(self, word: str) -> SavedStatus:
        if self.authoritative is Backend.LOCAL:
            return SavedStatus(word, self.local.contains(word))

        revision = self.revision
        try:
            entries = await self.remote.list()
        except RemoteError as exc:
            logger.warning("Remote saved-word check for %r failed, using device copy: %s", word, exc)
            return SavedStatus(word, self.local.contains(word), degraded=True)

        match = matching_entry(entries, word)
        # A listing that raced a mutation may predate it; leave the device copy alone.
        if self.revision == revision and not self.locks.is_busy(word):
            self._correct_mirror(word, match)
        return SavedStatus(word, match is not None)

    def _correct_mirror(self, word: str, match) -> None:
        cached = self.local.find(word)
        if match is not None and cached is None:
            self.local.mirror(remote_to_entry(match))
        elif match is None and cached is not None:
            logger.info("Pruning stale device copy of %r", word)
            self.local.remove(word)

    async def is_saved(self, word: str) -> bool:
        return (await self.check_saved(word)).saved

    async def save(
        self,
        word: str,
        record: WordRecord | None = None,
        notes: str | None = None,
    ) -> SavedWordEntry:
        record = record.model_copy(update={"word": word}) if record else WordRecord(word=word)
        async with self.locks.hold(word):
            if self.authoritative is Backend.LOCAL:
                entry = self.local.save(record, notes)
            else:
                entry = await self._save_remote(word, record, notes)
            self._changed()
            return entry

    async def _save_remote(self, word: str, record: WordRecord, notes: str | None) -> SavedWordEntry:
        try:
            created = await self.remote.create(word, notes)
        except RemoteError as exc:
            if not exc.is_conflict:
                logger.warning("Saving %r to the remote account failed: %s", word, exc)
                raise SaveFailed(f"Could not save '{word}'", word=word) from exc
            logger.info("%r is already saved remotely", word)
            return await self._adopt_existing(word, record, notes)
        return self.local.mirror(remote_to_entry(created, fallback=record))

    async def _adopt_existing(self, word: str, record: WordRecord, notes: str | None) -> SavedWordEntry:
        try:
            match = matching_entry(await self.remote.list(), word)
        except RemoteError as exc:
            logger.warning("Could not fetch the existing remote entry for %r: %s", word, exc)
            match = None
        if match is None:
            return self.local.save(record, notes)
        return self.local.mirror(remote_to_entry(match, fallback=record))

    async def remove(self, word: str) -> None:
        async with self.locks.hold(word):
            if self.authoritative is Backend.LOCAL:
                if self.local.remove(word):
                    self._changed()
                return
            await self._remove_remote(word)
            self._changed()

    async def _remove_remote(self, word: str) -> None:
        try:
            entries = await self.remote.list()
        except RemoteError as exc:
            raise RemoveFailed(f"Could not load saved words to remove '{word}'", word=word) from exc

        match = matching_entry(entries, word)
        if match is None:
            self.local.remove(word)
            raise NotFound(f"'{word}' is not in your saved words", word=word)

        try:
            await self.remote.delete(match.id)
        except RemoteError as exc:
            if not exc.is_not_found:
                logger.warning("Removing %r from the remote account failed: %s", word, exc)
                raise RemoveFailed(f"Could not remove '{word}'", word=word) from exc
        finally:
            self.local.remove(word)

    async def list(self) -> SavedWordsListing:
        if self.authoritative is Backend.LOCAL:
            return SavedWordsListing(self.local.all())

        try:
            remote_entries = await self.remote.list()
        except RemoteError as exc:
            logger.warning("Loading saved words from the remote account failed: %s", exc)
            return SavedWordsListing(self.local.all(), degraded=True)

        entries = [remote_to_entry(item) for item in remote_entries]
        self.local.replace_all(entries)
        return SavedWordsListing(_newest_first(entries))

    async def update_notes(self, word: str, notes: str) -> SavedWordEntry:
        async with self.locks.hold(word):
            if self.authoritative is Backend.LOCAL:
                entry = self.local.update_notes(word, notes)
                if entry is None:
                    raise NotFound(f"'{word}' is not in your saved words", word=word)
            else:
                entry = await self._update_notes_remote(word, notes)
            self._changed()
            return entry

    async def _update_notes_remote(self, word: str, notes: str) -> SavedWordEntry:
        try:
            match = matching_entry(await self.remote.list(), word)
            if match is None:
                raise NotFound(f"'{word}' is not in your saved words", word=word)
            await self.remote.update_notes(match.id, notes)
        except RemoteError as exc:
            raise SaveFailed(f"Could not update notes for '{word}'", word=word) from exc
        return self.local.mirror(remote_to_entry(match).model_copy(update={"notes": notes}))

    def assign_folder(self, entry_id: str, folder_id: str) -> bool:
        if self.local.assign_folder(entry_id, folder_id):
            self._changed()
            return True
        return False

    def clear_folder(self, entry_id: str) -> bool:
        if self.local.clear_folder(entry_id):
            self._changed()
            return True
        return False

    def words_in_folder(self, folder_id: str) -> list[SavedWordEntry]:
        return self.local.in_folder(folder_id)

    def subscribe(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_auth_state_change(self, now_authenticated: bool) -> None:
        # Device-only words are not copied to the account on sign-in.
        logger.info("Auth state changed (authenticated=%s)", now_authenticated)
        self._changed()
        for listener in list(self._listeners):
            listener(now_authenticated)
