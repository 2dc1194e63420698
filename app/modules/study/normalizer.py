"""Turn raw model text into typed results.

Model output is untrusted: nothing here assumes a field exists or has the
right type. Flashcards go through a strict parse, then a bracket-block
extraction; the self-correction round trip lives in the generator because it
needs the LLM.
"""

from __future__ import annotations

import json
import re
import time
from typing import Any, Iterable, Optional

from app.core.errors import EmptyModelOutput
from app.modules.study.models.flashcards import Difficulty, Flashcard

EMPTY_OUTPUT_DETAILS = "Empty response from model"

# Greedy: from the first "[" to the last "]" in the text.
_ARRAY_BLOCK = re.compile(r"\[[\s\S]*\]")

_DIFFICULTIES = {d.value for d in Difficulty}


def require_text(raw: Optional[str], message: str) -> str:
    """Pass-through for text operations; blank output is an error."""
    text = (raw or "").strip()
    if not text:
        raise EmptyModelOutput(message, details=EMPTY_OUTPUT_DETAILS)
    return text


def parse_json_array(text: Optional[str]) -> Optional[list[Any]]:
    """Strict parse; returns None unless ``text`` is exactly a JSON array."""
    if not text:
        return None
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, list) else None


def extract_array_block(text: Optional[str]) -> Optional[list[Any]]:
    """Parse the bracket-delimited block ending at the final ``]``."""
    if not text:
        return None
    match = _ARRAY_BLOCK.search(text)
    if not match:
        return None
    return parse_json_array(match.group(0))


def _as_mapping(item: Any) -> dict[str, Any]:
    if isinstance(item, Flashcard):
        return item.model_dump(mode="json")
    if isinstance(item, dict):
        return item
    return {}


def _clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clean_difficulty(value: Any) -> Difficulty:
    if isinstance(value, str):
        d = value.strip().lower()
        if d in _DIFFICULTIES:
            return Difficulty(d)
    return Difficulty.MEDIUM


def _given_id(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def normalize_flashcards(
    items: Iterable[Any], *, now_ms: Optional[int] = None
) -> list[Flashcard]:
    """Coerce parsed elements into flashcards, preserving model order.

    Ids the model supplied are kept unless they repeat an id already used in
    this pass; everything else gets ``card-<ms>-<index>``.
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    cards: list[Flashcard] = []
    seen: set[str] = set()

    for idx, item in enumerate(items):
        data = _as_mapping(item)
        card_id = _given_id(data.get("id"))
        if card_id is None or card_id in seen:
            card_id = f"card-{stamp}-{idx}"
            while card_id in seen:
                card_id = f"{card_id}-dup"
        seen.add(card_id)

        cards.append(
            Flashcard(
                id=card_id,
                question=_clean_str(data.get("question")),
                answer=_clean_str(data.get("answer")),
                difficulty=_clean_difficulty(data.get("difficulty")),
            )
        )
    return cards
