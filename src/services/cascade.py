"""Cascading deletion of sessions and their artifacts."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.enums import GenerationKind
from src.services.exceptions import GenerationServiceError, StorageError
from src.services.generation_ledger import GenerationLedger
from src.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass
class ArtifactDeletion:
    """Result of deleting a single artifact."""

    artifact_id: int
    session_id: int
    session_deleted: bool


class CascadeController:
    """Keeps sessions and artifacts consistent across deletions.

    Deleting a session removes its artifacts; deleting the last artifact
    of a session removes the session. Each entry point commits once, so
    the cascade either happens completely or not at all.
    """

    def __init__(self, db: Session, kind: GenerationKind):
        self.db = db
        self.registry = SessionRegistry(db)
        self.ledger = GenerationLedger(db, kind)
        self.ledgers = [
            self.ledger if other is kind else GenerationLedger(db, other)
            for other in GenerationKind
        ]

    def delete_session(self, session_id: int, user_id: int) -> bool:
        """Delete a session owned by the user with all of its artifacts.

        Does nothing when the session is not owned by the user. Returns
        whether a session row was removed.
        """
        try:
            removed_artifacts = sum(
                ledger.delete_by_session(session_id, user_id) for ledger in self.ledgers
            )
            removed = self.registry.delete(session_id, user_id)
            self._commit()
        except GenerationServiceError:
            self.db.rollback()
            raise

        if removed:
            logger.info(
                f"Deleted session {session_id} and {removed_artifacts} artifacts for user {user_id}"
            )
        return bool(removed)

    def delete_artifact(self, artifact_id: int, user_id: int) -> ArtifactDeletion:
        """Delete an artifact and clean up its session if it is now empty."""
        try:
            session_id = self.ledger.delete(artifact_id, user_id)
            session_deleted = False
            if self.ledger.count_by_session(session_id) == 0:
                session_deleted = self.registry.delete_if_empty(session_id)
            self._commit()
        except GenerationServiceError:
            self.db.rollback()
            raise

        if session_deleted:
            logger.info(f"Removed orphaned session {session_id}")
        return ArtifactDeletion(
            artifact_id=artifact_id, session_id=session_id, session_deleted=session_deleted
        )

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise StorageError("Database error", str(e)) from e
