"""Study module exports."""

from .models import Flashcard, GenerationRequest, Operation
from .generator import StudyGenerator
from .session import StudySession

__all__ = [
    "Flashcard",
    "GenerationRequest",
    "Operation",
    "StudyGenerator",
    "StudySession",
]
