"""Flashcard study session with resumable state.

A session walks a shuffled deck; each card is marked right or wrong, which
appends it to the matching bucket and advances. Past the last card the view
switches to ``summary``. State is saved through a ``SessionStore`` after every
mutation; saving is best-effort and loading treats anything unreadable as
"no session".
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

from pydantic import ValidationError

from app.core.logging import get_logger
from app.modules.study.models.flashcards import Flashcard

logger = get_logger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".study-aid" / "flashcards_session.json"


class ViewMode(str, Enum):
    STUDY = "study"
    SUMMARY = "summary"


def shuffled(cards: Sequence[Flashcard], rng: Optional[random.Random] = None) -> list[Flashcard]:
    deck = list(cards)
    (rng or random).shuffle(deck)
    return deck


class SessionStore(Protocol):
    def load(self) -> Optional["StudySession"]: ...

    def save(self, session: "StudySession") -> None: ...

    def clear(self) -> None: ...


@dataclass
class StudySession:
    deck: list[Flashcard] = field(default_factory=list)
    index: int = 0
    flipped: bool = False
    right: list[Flashcard] = field(default_factory=list)
    wrong: list[Flashcard] = field(default_factory=list)
    view: ViewMode = ViewMode.STUDY
    # Full set the session was started from; restart_all goes back to it
    cards: list[Flashcard] = field(default_factory=list, repr=False)
    store: Optional[SessionStore] = field(default=None, repr=False, compare=False)
    rng: Optional[random.Random] = field(default=None, repr=False, compare=False)

    # Lifecycle ----------------------------------------------------------
    @classmethod
    def start(
        cls,
        cards: Sequence[Flashcard],
        *,
        store: Optional[SessionStore] = None,
        rng: Optional[random.Random] = None,
    ) -> "StudySession":
        session = cls(cards=list(cards), store=store, rng=rng)
        session._reset(shuffled(cards, rng))
        return session

    def _reset(self, deck: list[Flashcard]) -> None:
        self.deck = deck
        self.index = 0
        self.flipped = False
        self.right = []
        self.wrong = []
        self.view = ViewMode.STUDY
        self._persist()

    def restart_all(self, cards: Optional[Sequence[Flashcard]] = None) -> None:
        if cards is not None:
            self.cards = list(cards)
        self._reset(shuffled(self.cards or self.deck, self.rng))

    def restart_wrong_only(self) -> None:
        if not self.wrong:
            return
        self._reset(shuffled(self.wrong, self.rng))

    # Study actions ------------------------------------------------------
    @property
    def current(self) -> Optional[Flashcard]:
        if self.view is not ViewMode.STUDY:
            return None
        if 0 <= self.index < len(self.deck):
            return self.deck[self.index]
        return None

    @property
    def answered(self) -> int:
        return len(self.right) + len(self.wrong)

    @property
    def progress(self) -> float:
        if not self.deck:
            return 0.0
        return self.answered / len(self.deck)

    def flip(self) -> None:
        if self.current is None:
            return
        self.flipped = not self.flipped

    def mark_right(self) -> None:
        card = self.current
        if card is None:
            return
        self.right.append(card)
        self._advance()

    def mark_wrong(self) -> None:
        card = self.current
        if card is None:
            return
        self.wrong.append(card)
        self._advance()

    def _advance(self) -> None:
        self.flipped = False
        if self.index + 1 < len(self.deck):
            self.index += 1
        else:
            self.view = ViewMode.SUMMARY
        self._persist()

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self)

    # Serialization ------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "deck": [c.model_dump(mode="json") for c in self.deck],
            "index": self.index,
            "wrong": [c.model_dump(mode="json") for c in self.wrong],
            "right": [c.model_dump(mode="json") for c in self.right],
        }

    @classmethod
    def from_dict(
        cls, data: Any, *, store: Optional[SessionStore] = None
    ) -> Optional["StudySession"]:
        """Rebuild a session; returns None for anything not resumable."""
        if not isinstance(data, dict):
            return None
        try:
            deck = [Flashcard.model_validate(c) for c in data.get("deck") or []]
            wrong = [Flashcard.model_validate(c) for c in data.get("wrong") or []]
            right = [Flashcard.model_validate(c) for c in data.get("right") or []]
        except (TypeError, ValidationError):
            return None
        if not deck:
            return None

        index = data.get("index") or 0
        if not isinstance(index, int) or index < 0:
            index = 0
        session = cls(deck=deck, right=right, wrong=wrong, store=store)
        if index >= len(deck) or len(right) + len(wrong) >= len(deck):
            session.index = len(deck) - 1
            session.view = ViewMode.SUMMARY
        else:
            session.index = index
        return session


class MemorySessionStore:
    def __init__(self) -> None:
        self.data: Optional[str] = None

    def load(self) -> Optional[StudySession]:
        if self.data is None:
            return None
        try:
            return StudySession.from_dict(json.loads(self.data), store=self)
        except ValueError:
            return None

    def save(self, session: StudySession) -> None:
        self.data = json.dumps(session.to_dict())

    def clear(self) -> None:
        self.data = None


class JsonFileSessionStore:
    """Keeps the session in a JSON file, written after every mutation."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path else DEFAULT_SESSION_PATH

    def load(self) -> Optional[StudySession]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read session file {self.path}: {e}")
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring corrupt session file {self.path}")
            return None
        return StudySession.from_dict(data, store=self)

    def save(self, session: StudySession) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(session.to_dict(), ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            logger.warning(f"Could not persist session to {self.path}: {e}")

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Could not remove session file {self.path}: {e}")
