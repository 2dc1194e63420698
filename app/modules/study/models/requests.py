from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


MIN_FLASHCARDS = 1
MAX_FLASHCARDS = 100


class Operation(str, Enum):
    SUMMARIZE = "summarize"
    FLASHCARDS = "flashcards"
    FORMULAS = "formulas"
    FACT = "fact"

    @property
    def needs_text(self) -> bool:
        return self is not Operation.FACT


class GenerationRequest(BaseModel):
    """One caller request for one operation.

    Field presence is checked by the prompt builder rather than here so that
    a missing text surfaces as ``InvalidRequest`` instead of a schema error.
    """

    operation: Operation
    input_text: Optional[str] = None
    desired_count: Optional[int] = None
