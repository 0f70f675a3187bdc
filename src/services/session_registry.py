"""Session registry: ownership and lifecycle of generation sessions."""

import logging

from sqlalchemy import exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.enums import GenerationKind
from src.models.generation import GENERATION_MODELS
from src.models.session import GenerationSession
from src.services.exceptions import InvalidSessionError, StorageError, ValidationError

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps session ids to their owner, name and creation time.

    Methods other than ``rename`` only flush; committing is left to the
    caller so that multi-step operations share one transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve_or_create(self, session_id: int | None, seed_name: str, user_id: int) -> int:
        """Return an existing session id owned by the user, or create a new session.

        A missing or zero session id creates a new session. Ownership is
        checked against the database on every call.
        """
        if not session_id:
            session = GenerationSession(user_id=user_id, name=seed_name)
            try:
                self.db.add(session)
                self.db.flush()
            except SQLAlchemyError as e:
                raise StorageError("Failed to create session", str(e)) from e
            logger.info(f"Created session {session.id} for user {user_id}")
            return session.id

        if self.get(session_id, user_id) is None:
            logger.warning(f"User {user_id} referenced invalid session {session_id}")
            raise InvalidSessionError("Invalid sessionId")
        return session_id

    def get(self, session_id: int, user_id: int) -> GenerationSession | None:
        """Get a session only if it belongs to the user."""
        try:
            return (
                self.db.query(GenerationSession)
                .filter(GenerationSession.id == session_id, GenerationSession.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch session", str(e)) from e

    def list_with_artifacts(self, user_id: int, kind: GenerationKind) -> list[GenerationSession]:
        """Sessions owned by the user holding at least one artifact of ``kind``, newest first."""
        model = GENERATION_MODELS[kind]
        try:
            return (
                self.db.query(GenerationSession)
                .filter(
                    GenerationSession.user_id == user_id,
                    exists().where(model.session_id == GenerationSession.id),
                )
                .order_by(GenerationSession.created_at.desc(), GenerationSession.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageError(
                f"Failed to fetch sessions with {kind.value} generations", str(e)
            ) from e

    def rename(self, session_id: int, user_id: int, name: str) -> int:
        """Rename a session owned by the user and commit.

        A session that does not belong to the user is left untouched and no
        error is raised. Returns the number of rows changed.
        """
        if not name or not name.strip():
            raise ValidationError("Name is required")

        try:
            updated = (
                self.db.query(GenerationSession)
                .filter(GenerationSession.id == session_id, GenerationSession.user_id == user_id)
                .update({GenerationSession.name: name}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to update session name", str(e)) from e

        if not updated:
            logger.info(f"Rename of session {session_id} by user {user_id} matched no rows")
        return updated

    def delete(self, session_id: int, user_id: int) -> int:
        """Delete a session scoped to its owner. Returns the number of rows removed."""
        try:
            return (
                self.db.query(GenerationSession)
                .filter(GenerationSession.id == session_id, GenerationSession.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StorageError("Failed to delete session", str(e)) from e

    def delete_if_empty(self, session_id: int) -> bool:
        """Delete a session only if no artifact of any kind references it.

        Not scoped by owner. The emptiness check and the delete run as one
        statement, so an artifact appended concurrently keeps its session.
        """
        conditions = [
            ~exists().where(model.session_id == session_id)
            for model in GENERATION_MODELS.values()
        ]
        try:
            deleted = (
                self.db.query(GenerationSession)
                .filter(GenerationSession.id == session_id, *conditions)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StorageError("Failed to delete session", str(e)) from e
        return bool(deleted)
