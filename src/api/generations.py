"""Text and image generation API endpoints.

Both artifact kinds expose the same routes; ``create_generation_router``
builds one router per kind.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_image_provider, get_text_provider
from src.database import get_db
from src.models.enums import GenerationKind
from src.models.user import User
from src.schemas.auth import MessageResponse
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
from src.services.cascade import CascadeController
from src.services.exceptions import handle_generation_errors
from src.services.generation import GenerationOrchestrator
from src.services.generation_ledger import GenerationLedger
from src.services.providers import GenerationProvider
from src.services.session_registry import SessionRegistry

RESPONSE_MODELS: dict[GenerationKind, type[BaseModel]] = {
    GenerationKind.TEXT: TextGenerationResponse,
    GenerationKind.IMAGE: ImageGenerationResponse,
}

HISTORY_MODELS: dict[GenerationKind, tuple[type[BaseModel], str]] = {
    GenerationKind.TEXT: (TextHistoryResponse, "texts"),
    GenerationKind.IMAGE: (ImageHistoryResponse, "images"),
}


def create_generation_router(
    kind: GenerationKind,
    prefix: str,
    provider_dependency: Callable[[], GenerationProvider],
) -> APIRouter:
    """Build the generation router for one artifact kind."""
    router = APIRouter(prefix=prefix, tags=[f"{kind.value}-generation"])
    response_model = RESPONSE_MODELS[kind]
    history_model, history_key = HISTORY_MODELS[kind]
    label = "Text" if kind is GenerationKind.TEXT else "Image"
    plural = "texts" if kind is GenerationKind.TEXT else "images"

    @router.post("", response_model=response_model)
    @handle_generation_errors
    async def generate(
        request: GenerationRequest,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
        provider: Annotated[GenerationProvider, Depends(provider_dependency)],
    ):
        """Generate content and store it, creating a session when none is given."""
        orchestrator = GenerationOrchestrator(db, kind, provider)
        outcome = await orchestrator.generate(current_user.id, request.session_id, request.prompt)
        return response_model.model_validate(
            {
                "id": outcome.artifact_id,
                "session_id": outcome.session_id,
                "prompt": outcome.prompt,
                kind.payload_field: outcome.payload,
            }
        )

    @router.get("/sessions", response_model=list[SessionResponse])
    @router.get(f"/{kind.value}-sessions", response_model=list[SessionResponse])
    @handle_generation_errors
    async def get_sessions(
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ):
        """Get the user's sessions that contain generations of this kind."""
        return SessionRegistry(db).list_with_artifacts(current_user.id, kind)

    @router.get("/session/{session_id}", response_model=history_model)
    @handle_generation_errors
    async def get_session_history(
        session_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ):
        """Get the generations of a session, newest first."""
        artifacts = GenerationLedger(db, kind).list_by_session(session_id, current_user.id)
        return {history_key: artifacts}

    @router.put("/rename-session/{session_id}", response_model=MessageResponse)
    @handle_generation_errors
    async def rename_session(
        session_id: int,
        data: SessionRename,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ):
        """Rename a session. Sessions owned by someone else are left unchanged."""
        SessionRegistry(db).rename(session_id, current_user.id, data.name or "")
        return MessageResponse(message="Session renamed successfully")

    @router.delete("/delete-session/{session_id}", response_model=MessageResponse)
    @handle_generation_errors
    async def delete_session(
        session_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ):
        """Delete a session and every generation in it."""
        CascadeController(db, kind).delete_session(session_id, current_user.id)
        return MessageResponse(message=f"Session and related {plural} deleted successfully")

    @router.put("/update/{artifact_id}", response_model=RegenerateResponse)
    @handle_generation_errors
    async def update_generation(
        artifact_id: int,
        data: PromptUpdate,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
        provider: Annotated[GenerationProvider, Depends(provider_dependency)],
    ):
        """Regenerate a generation from a new prompt."""
        orchestrator = GenerationOrchestrator(db, kind, provider)
        payload = await orchestrator.update(current_user.id, artifact_id, data.prompt)
        return RegenerateResponse.model_validate(
            {
                "message": f"Prompt and {kind.value} updated successfully",
                kind.payload_field: payload,
            }
        )

    @router.delete("/{artifact_id}", response_model=ArtifactDeleteResponse)
    @handle_generation_errors
    async def delete_generation(
        artifact_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ):
        """Delete a generation, removing its session when it was the last one."""
        deletion = CascadeController(db, kind).delete_artifact(artifact_id, current_user.id)
        message = (
            f"{label} and session deleted successfully"
            if deletion.session_deleted
            else f"{label} deleted successfully"
        )
        return ArtifactDeleteResponse(
            message=message,
            session_id=deletion.session_id,
            session_deleted=deletion.session_deleted,
        )

    return router


text_router = create_generation_router(
    GenerationKind.TEXT, "/api/v1/text-generation", get_text_provider
)
image_router = create_generation_router(
    GenerationKind.IMAGE, "/api/v1/text-to-image", get_image_provider
)
