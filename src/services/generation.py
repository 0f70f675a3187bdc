"""Generation orchestrator: provider call plus session and artifact persistence."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.enums import GenerationKind
from src.services.exceptions import GenerationServiceError, StorageError, ValidationError
from src.services.generation_ledger import GenerationLedger
from src.services.providers import GenerationProvider
from src.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    """What a successful generate call produced."""

    artifact_id: int
    session_id: int
    prompt: str
    payload: str


def validate_prompt(prompt: object) -> str:
    """Return the prompt if it is a non-blank string."""
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Prompt is required and must be a valid string.")
    return prompt


class GenerationOrchestrator:
    """Runs a generation request as one unit.

    The provider is called before anything is written, so a failed
    generation never leaves a session or artifact behind. Session creation
    and the first artifact are committed together.
    """

    def __init__(self, db: Session, kind: GenerationKind, provider: GenerationProvider):
        self.db = db
        self.kind = kind
        self.provider = provider
        self.registry = SessionRegistry(db)
        self.ledger = GenerationLedger(db, kind)

    async def generate(
        self, user_id: int, session_id: int | None, prompt: str
    ) -> GenerationOutcome:
        """Generate content and store it in a new or existing session."""
        prompt = validate_prompt(prompt)

        payload = await self.provider.generate(prompt)

        try:
            resolved_session_id = self.registry.resolve_or_create(session_id, prompt, user_id)
            artifact_id = self.ledger.append(user_id, resolved_session_id, prompt, payload).id
            self._commit()
        except GenerationServiceError:
            self.db.rollback()
            raise

        logger.info(
            f"Stored {self.kind.value} generation {artifact_id} "
            f"in session {resolved_session_id} for user {user_id}"
        )
        return GenerationOutcome(
            artifact_id=artifact_id,
            session_id=resolved_session_id,
            prompt=prompt,
            payload=payload,
        )

    async def update(self, user_id: int, artifact_id: int, prompt: str) -> str:
        """Regenerate an artifact from a new prompt and return the new payload.

        The provider runs before ownership is known; when the artifact turns
        out to be missing or foreign, that generation is discarded.
        """
        prompt = validate_prompt(prompt)

        payload = await self.provider.generate(prompt)

        try:
            self.ledger.update(artifact_id, user_id, prompt, payload)
            self._commit()
        except GenerationServiceError:
            self.db.rollback()
            raise

        logger.info(f"Regenerated {self.kind.value} generation {artifact_id} for user {user_id}")
        return payload

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise StorageError("Failed to save data to database", str(e)) from e
