from .flashcards import Difficulty, Flashcard
from .requests import GenerationRequest, Operation
from .results import (
    FactResult,
    FlashcardSetResult,
    FormulaResult,
    GenerationResult,
    SummaryResult,
)

__all__ = [
    "Difficulty",
    "Flashcard",
    "GenerationRequest",
    "Operation",
    "FactResult",
    "FlashcardSetResult",
    "FormulaResult",
    "GenerationResult",
    "SummaryResult",
]
