"""Generated artifact models."""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import declared_attr, relationship

from src.database import Base
from src.models.enums import GenerationKind
from src.models.mixins import TimestampMixin


class GenerationMixin(TimestampMixin):
    """Columns shared by every artifact kind.

    The artifact owner must match the owner of its session. The database
    does not enforce this, so every query filters on ``user_id`` as well.
    """

    id = Column(Integer, primary_key=True, index=True)
    prompt = Column(Text, nullable=False)

    @declared_attr
    def user_id(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    @declared_attr
    def session_id(cls):
        return Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)


class TextGeneration(Base, GenerationMixin):
    """Generated text tied to a session."""

    __tablename__ = "text_generations"

    kind = GenerationKind.TEXT

    result = Column(Text, nullable=False)

    session = relationship("GenerationSession", back_populates="text_generations")

    @property
    def payload(self) -> str:
        return self.result

    @payload.setter
    def payload(self, value: str) -> None:
        self.result = value


class ImageGeneration(Base, GenerationMixin):
    """Generated image tied to a session, stored as a data URI."""

    __tablename__ = "image_generations"

    kind = GenerationKind.IMAGE

    image_url = Column(Text, nullable=False)

    session = relationship("GenerationSession", back_populates="image_generations")

    @property
    def payload(self) -> str:
        return self.image_url

    @payload.setter
    def payload(self, value: str) -> None:
        self.image_url = value


GENERATION_MODELS: dict[GenerationKind, type[TextGeneration] | type[ImageGeneration]] = {
    GenerationKind.TEXT: TextGeneration,
    GenerationKind.IMAGE: ImageGeneration,
}
