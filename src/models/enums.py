"""Enums for model fields."""

from enum import Enum


class GenerationKind(str, Enum):
    """Kinds of generated artifacts a session can hold."""

    TEXT = "text"
    IMAGE = "image"

    @property
    def payload_field(self) -> str:
        """Name of the column holding the generated payload."""
        return "result" if self is GenerationKind.TEXT else "image_url"
