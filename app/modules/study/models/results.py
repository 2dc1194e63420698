"""Typed results, one per operation."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field

from app.core.llm import TokenUsage
from app.modules.study.models.flashcards import Flashcard


class SummaryResult(BaseModel):
    kind: Literal["summarize"] = "summarize"
    text: str
    original_text: str
    usage: TokenUsage = Field(default_factory=TokenUsage)


class FlashcardSetResult(BaseModel):
    kind: Literal["flashcards"] = "flashcards"
    flashcards: list[Flashcard] = Field(default_factory=list)
    original_text: str


class FormulaResult(BaseModel):
    kind: Literal["formulas"] = "formulas"
    text: str


class FactResult(BaseModel):
    kind: Literal["fact"] = "fact"
    text: str


GenerationResult = Union[SummaryResult, FlashcardSetResult, FormulaResult, FactResult]
