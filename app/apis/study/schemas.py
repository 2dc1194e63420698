from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.llm import TokenUsage
from app.modules.study.models.flashcards import Flashcard


class TextRequest(BaseModel):
    # Optional so a missing text is reported as 400 "Text is required"
    text: Optional[str] = Field(default=None, description="Source text to work on")


class FlashcardsRequest(TextRequest):
    count: Optional[int] = Field(
        default=None, description="Exact number of cards; omit to let the model choose"
    )


class SummarizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    original_text: str = Field(alias="originalText")
    tokens: TokenUsage


class FlashcardsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    flashcards: list[Flashcard] = Field(default_factory=list)
    original_text: str = Field(alias="originalText")


class FormulasResponse(BaseModel):
    formulas: str


class FactResponse(BaseModel):
    fact: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    raw: Optional[str] = None
    original_raw: Optional[str] = Field(default=None, alias="originalRaw")
