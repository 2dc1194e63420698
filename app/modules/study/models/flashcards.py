"""Pydantic models for flashcards.

Model output is never validated against these directly; the normalizer
shapes raw JSON into them after coercing every field.
"""

from enum import Enum

from pydantic import BaseModel


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Flashcard(BaseModel):
    """Question/answer flashcard with a difficulty rating."""

    id: str
    question: str
    answer: str
    difficulty: Difficulty = Difficulty.MEDIUM
