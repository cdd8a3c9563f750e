from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable

from ...models.word_models import StudyCard


class SessionState(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    COMPLETE = "complete"
    EMPTY = "empty"


@dataclass(frozen=True)
class StudyProgress:
    remembered: int
    total: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FlashcardSession:
    """A shuffled pass over a fixed set of study cards.

    ``flip`` and ``answer`` outside the active state are ignored, so repeated
    clicks from the view cannot push the cursor past the end or inflate the
    score.
    """

    def __init__(
        self,
        *,
        session_id: str | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.rng = rng or random.Random()
        self.clock = clock
        self.source: list[StudyCard] | None = None
        self.deck: list[StudyCard] = []
        self.current_index = 0
        self.flipped = False
        self.remembered = 0

    @property
    def total(self) -> int:
        return len(self.source) if self.source is not None else 0

    @property
    def state(self) -> SessionState:
        if self.source is None:
            return SessionState.LOADING
        if not self.source:
            return SessionState.EMPTY
        if self.current_index >= self.total:
            return SessionState.COMPLETE
        return SessionState.ACTIVE

    @property
    def progress(self) -> StudyProgress:
        return StudyProgress(self.remembered, self.total)

    @property
    def current_card(self) -> StudyCard | None:
        if self.state is not SessionState.ACTIVE:
            return None
        return self.deck[self.current_index]

    def _shuffled(self) -> list[StudyCard]:
        deck = list(self.source or [])
        self.rng.shuffle(deck)
        return deck

    def _reset(self) -> None:
        self.deck = self._shuffled()
        self.current_index = 0
        self.flipped = False
        self.remembered = 0

    def load(self, cards: Iterable[StudyCard]) -> SessionState:
        self.source = [card.model_copy(deep=True) for card in cards]
        self._reset()
        return self.state

    def flip(self) -> bool:
        if self.state is SessionState.ACTIVE:
            self.flipped = not self.flipped
        return self.flipped

    def answer(self, remembered: bool) -> SessionState:
        if self.state is not SessionState.ACTIVE:
            return self.state
        card = self.deck[self.current_index]
        card.last_reviewed = self.clock()
        if remembered:
            card.learned = True
            card.proficiency += 1
            self.remembered += 1
        self.flipped = False
        self.current_index += 1
        return self.state

    def restart(self) -> SessionState:
        if self.state in (SessionState.ACTIVE, SessionState.COMPLETE):
            self._reset()
        return self.state
