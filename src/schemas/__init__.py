"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.schemas.generation import (
    ArtifactDeleteResponse,
    GenerationRequest,
    ImageGenerationResponse,
    ImageHistoryResponse,
    PromptUpdate,
    RegenerateResponse,
    TextGenerationResponse,
    TextHistoryResponse,
)
from src.schemas.session import SessionRename, SessionResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "MessageResponse",
    "SessionRename",
    "SessionResponse",
    "GenerationRequest",
    "PromptUpdate",
    "TextGenerationResponse",
    "ImageGenerationResponse",
    "TextHistoryResponse",
    "ImageHistoryResponse",
    "RegenerateResponse",
    "ArtifactDeleteResponse",
]
