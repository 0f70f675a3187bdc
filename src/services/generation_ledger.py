"""Generation ledger: persisted artifacts of one kind."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.enums import GenerationKind
from src.models.generation import GENERATION_MODELS, ImageGeneration, TextGeneration
from src.services.exceptions import NotFoundError, NotFoundOrForbiddenError, StorageError

logger = logging.getLogger(__name__)

Artifact = TextGeneration | ImageGeneration


class GenerationLedger:
    """Stores text or image artifacts, each tied to one session and one owner.

    Every lookup except ``count_by_session`` is scoped to the owner.
    Nothing here commits; callers own the transaction.
    """

    def __init__(self, db: Session, kind: GenerationKind):
        self.db = db
        self.kind = kind
        self.model = GENERATION_MODELS[kind]
        self.label = "Text" if kind is GenerationKind.TEXT else "Image"

    def append(self, user_id: int, session_id: int, prompt: str, payload: str) -> Artifact:
        """Insert a new artifact and return it with its id assigned."""
        artifact = self.model(user_id=user_id, session_id=session_id, prompt=prompt)
        artifact.payload = payload
        try:
            self.db.add(artifact)
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError("Failed to save data to database", str(e)) from e
        return artifact

    def get(self, artifact_id: int, user_id: int) -> Artifact | None:
        try:
            return (
                self.db.query(self.model)
                .filter(self.model.id == artifact_id, self.model.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError("Database error", str(e)) from e

    def list_by_session(self, session_id: int, user_id: int) -> list[Artifact]:
        """Artifacts of a session owned by the user, newest (highest id) first."""
        try:
            return (
                self.db.query(self.model)
                .filter(self.model.session_id == session_id, self.model.user_id == user_id)
                .order_by(self.model.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch {self.kind.value} history", str(e)) from e

    def update(self, artifact_id: int, user_id: int, prompt: str, payload: str) -> None:
        """Replace prompt and payload in place, keeping the artifact id."""
        payload_column = getattr(self.model, self.kind.payload_field)
        try:
            updated = (
                self.db.query(self.model)
                .filter(self.model.id == artifact_id, self.model.user_id == user_id)
                .update(
                    {self.model.prompt: prompt, payload_column: payload},
                    synchronize_session=False,
                )
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update prompt and {self.kind.value}", str(e)) from e

        if updated == 0:
            raise NotFoundOrForbiddenError(f"{self.label} not found or not authorized to edit")

    def delete(self, artifact_id: int, user_id: int) -> int:
        """Delete an artifact owned by the user and return its session id."""
        artifact = self.get(artifact_id, user_id)
        if artifact is None:
            raise NotFoundError(f"{self.label} not found")

        session_id = artifact.session_id
        try:
            self.db.delete(artifact)
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {self.kind.value}", str(e)) from e
        return session_id

    def delete_by_session(self, session_id: int, user_id: int) -> int:
        """Delete every artifact of a session owned by the user."""
        try:
            return (
                self.db.query(self.model)
                .filter(self.model.session_id == session_id, self.model.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {self.kind.value} generations", str(e)) from e

    def count_by_session(self, session_id: int) -> int:
        """Count artifacts in a session regardless of owner."""
        try:
            count = (
                self.db.query(func.count(self.model.id))
                .filter(self.model.session_id == session_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            raise StorageError("Database error", str(e)) from e
        return count or 0
