"""
Pytest Configuration and Fixtures.

The model is never called for real: ``FakeChatClient`` replays scripted
outputs (or raises scripted errors) and records every prompt it receives.
"""
from __future__ import annotations

import pytest

from app.core.llm import Completion, PromptSpec, TokenUsage
from app.modules.study.generator import StudyGenerator
from app.modules.study.models.flashcards import Difficulty, Flashcard


class FakeChatClient:
    """Scripted stand-in for the LLM capability."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts: list[PromptSpec] = []

    async def complete(self, prompt: PromptSpec) -> Completion:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected model call")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return Completion(
            text=nxt,
            usage=TokenUsage(prompt_tokens=12, completion_tokens=30, total_tokens=42),
        )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP layer tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "api" in str(item.fspath):
            item.add_marker(pytest.mark.api)


@pytest.fixture
def make_generator():
    """Build a generator over a fake client scripted with ``responses``."""

    def _make(*responses):
        client = FakeChatClient(*responses)
        return StudyGenerator(client=client), client

    return _make


@pytest.fixture
def sample_cards():
    return [
        Flashcard(id=f"c{i}", question=f"Q{i}", answer=f"A{i}", difficulty=Difficulty.EASY)
        for i in range(1, 5)
    ]


@pytest.fixture
def sample_text():
    return (
        "Photosynthesis converts light energy into chemical energy. "
        "The overall reaction is 6CO2 + 6H2O -> C6H12O6 + 6O2."
    )
