from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.apis.deps import get_generator
from app.core.config import settings
from app.core.errors import StudyAidError
from app.core.logging import get_logger
from app.modules.study.generator import StudyGenerator
from .schemas import (
    ErrorResponse,
    FactResponse,
    FlashcardsRequest,
    FlashcardsResponse,
    FormulasResponse,
    SummarizeResponse,
    TextRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix=settings.app.api_prefix, tags=["study"])

Generator = Annotated[StudyGenerator, Depends(get_generator)]

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses=ERROR_RESPONSES,
)
async def summarize(req: TextRequest, generator: Generator) -> SummarizeResponse:
    result = await generator.summarize(req.text)
    return SummarizeResponse(
        summary=result.text,
        original_text=result.original_text,
        tokens=result.usage,
    )


@router.post(
    "/flashcards",
    response_model=FlashcardsResponse,
    responses=ERROR_RESPONSES,
)
async def flashcards(req: FlashcardsRequest, generator: Generator) -> FlashcardsResponse:
    result = await generator.flashcards(req.text, req.count)
    return FlashcardsResponse(
        flashcards=result.flashcards,
        original_text=result.original_text,
    )


@router.post(
    "/formulas",
    response_model=FormulasResponse,
    responses=ERROR_RESPONSES,
)
async def formulas(req: TextRequest, generator: Generator):
    try:
        result = await generator.formulas(req.text)
    except StudyAidError as e:
        # Formula failures carry only the message
        logger.error(f"[{e.status_code}] {e.message}: {e.details or '-'}")
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    return FormulasResponse(formulas=result.text)


@router.get(
    "/fact",
    response_model=FactResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def fact(generator: Generator) -> FactResponse:
    result = await generator.fact()
    return FactResponse(fact=result.text)
