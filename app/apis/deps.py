from __future__ import annotations

from functools import lru_cache

from app.modules.study.generator import StudyGenerator


@lru_cache(maxsize=1)
def get_generator() -> StudyGenerator:
    """Shared generator; it holds no per-request state."""
    return StudyGenerator()
