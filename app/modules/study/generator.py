"""Generation pipeline: prompt -> model -> normalized result.

``StudyGenerator`` is stateless apart from its chat client, so one instance
can serve concurrent requests. A flashcards request makes at most two
sequential model calls: the generation itself and, when neither a direct
parse nor bracket extraction yields a JSON array, one self-correction call.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from app.core.errors import UnparsableStructuredOutput, UpstreamFailure
from app.core.llm import ChatClient, Completion, PromptSpec, PydanticAIChatClient
from app.core.logging import get_logger
from app.modules.study.models.requests import GenerationRequest, Operation
from app.modules.study.models.results import (
    FactResult,
    FlashcardSetResult,
    FormulaResult,
    GenerationResult,
    SummaryResult,
)
from app.modules.study.normalizer import (
    extract_array_block,
    normalize_flashcards,
    parse_json_array,
    require_text,
)
from app.modules.study.prompts import build_correction_prompt, build_prompt

logger = get_logger(__name__)

FAILURE_MESSAGES = {
    Operation.SUMMARIZE: "Failed to summarize text",
    Operation.FLASHCARDS: "Failed to generate flashcards",
    Operation.FORMULAS: "Failed to extract formulas",
    Operation.FACT: "Failed to fetch a fun fact",
}
UNPARSABLE_MESSAGE = "Could not parse flashcards JSON after self-correction"
_FLASHCARDS_LOG = {"operation": Operation.FLASHCARDS.value}


class StudyGenerator:
    """High-level entrypoint used by the API handlers and the CLI."""

    def __init__(self, client: Optional[ChatClient] = None) -> None:
        self.client: ChatClient = client or PydanticAIChatClient()

    async def _call(self, prompt: PromptSpec, operation: Operation) -> Completion:
        try:
            return await self.client.complete(prompt)
        except UpstreamFailure as e:
            logger.error(
                f"{operation.value} model call failed: {e.details or e.message}",
                extra={"operation": operation.value},
            )
            raise UpstreamFailure(
                FAILURE_MESSAGES[operation], details=e.details or e.message
            ) from e

    async def _text_operation(self, request: GenerationRequest) -> Completion:
        prompt = build_prompt(request)
        completion = await self._call(prompt, request.operation)
        text = require_text(completion.text, FAILURE_MESSAGES[request.operation])
        return Completion(text=text, usage=completion.usage)

    async def summarize(self, text: Optional[str]) -> SummaryResult:
        completion = await self._text_operation(
            GenerationRequest(operation=Operation.SUMMARIZE, input_text=text)
        )
        return SummaryResult(
            text=completion.text, original_text=text or "", usage=completion.usage
        )

    async def formulas(self, text: Optional[str]) -> FormulaResult:
        completion = await self._text_operation(
            GenerationRequest(operation=Operation.FORMULAS, input_text=text)
        )
        return FormulaResult(text=completion.text)

    async def fact(self) -> FactResult:
        completion = await self._text_operation(
            GenerationRequest(operation=Operation.FACT)
        )
        return FactResult(text=completion.text)

    async def flashcards(
        self, text: Optional[str], count: Optional[int] = None
    ) -> FlashcardSetResult:
        request = GenerationRequest(
            operation=Operation.FLASHCARDS, input_text=text, desired_count=count
        )
        completion = await self._text_operation(request)
        items = await self._parse_flashcards(completion.text)
        return FlashcardSetResult(
            flashcards=normalize_flashcards(items), original_text=text or ""
        )

    async def _parse_flashcards(self, raw: str) -> list[Any]:
        parsed = parse_json_array(raw)
        if parsed is not None:
            return parsed

        parsed = extract_array_block(raw)
        if parsed is not None:
            logger.info("Recovered flashcards array from surrounding text", extra=_FLASHCARDS_LOG)
            return parsed

        logger.warning(
            "Initial parsing failed. Attempting self-correction...", extra=_FLASHCARDS_LOG
        )
        correction = await self._call(
            build_correction_prompt(raw), Operation.FLASHCARDS
        )
        corrected = (correction.text or "").strip()
        parsed = parse_json_array(corrected)
        if parsed is None:
            logger.error("Self-correction did not produce a JSON array", extra=_FLASHCARDS_LOG)
            raise UnparsableStructuredOutput(
                UNPARSABLE_MESSAGE, raw=corrected or raw, original_raw=raw
            )
        return parsed

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        op = request.operation
        if op is Operation.SUMMARIZE:
            return await self.summarize(request.input_text)
        if op is Operation.FLASHCARDS:
            return await self.flashcards(request.input_text, request.desired_count)
        if op is Operation.FORMULAS:
            return await self.formulas(request.input_text)
        return await self.fact()

    def generate_sync(self, request: GenerationRequest) -> GenerationResult:
        """Synchronous wrapper if an event loop is unavailable."""
        return asyncio.run(self.generate(request))
