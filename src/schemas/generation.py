"""Text and image generation schemas."""

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """Generate content, optionally continuing an existing session."""

    session_id: int | None = Field(None, alias="sessionId")
    # Presence is checked by the orchestrator so that a missing prompt is a 400
    prompt: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class PromptUpdate(BaseModel):
    """Regenerate an artifact from a new prompt."""

    prompt: str | None = None


class TextGenerationResponse(BaseModel):
    """A stored text generation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    prompt: str
    result: str


class ImageGenerationResponse(BaseModel):
    """A stored image generation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    prompt: str
    image_url: str


class TextHistoryResponse(BaseModel):
    """Text generations of a session, newest first."""

    texts: list[TextGenerationResponse]


class ImageHistoryResponse(BaseModel):
    """Image generations of a session, newest first."""

    images: list[ImageGenerationResponse]


class RegenerateResponse(BaseModel):
    """New payload after regenerating an artifact."""

    message: str
    result: str | None = None
    image_url: str | None = None


class ArtifactDeleteResponse(BaseModel):
    """Outcome of deleting a single artifact."""

    message: str
    session_id: int
    session_deleted: bool
