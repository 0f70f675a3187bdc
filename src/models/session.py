"""Generation session model."""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class GenerationSession(Base, TimestampMixin):
    """Named grouping of generated artifacts owned by a single user."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    # Owner never changes after creation
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)

    # Relationships
    owner = relationship("User", backref="generation_sessions")
    text_generations = relationship("TextGeneration", back_populates="session")
    image_generations = relationship("ImageGeneration", back_populates="session")
