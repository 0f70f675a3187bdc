"""SQLAlchemy models."""

from src.models.enums import GenerationKind
from src.models.generation import GENERATION_MODELS, ImageGeneration, TextGeneration
from src.models.session import GenerationSession
from src.models.user import User

__all__ = [
    "User",
    "GenerationSession",
    "GenerationKind",
    "TextGeneration",
    "ImageGeneration",
    "GENERATION_MODELS",
]
