from sqlalchemy import Column, ForeignKey, DateTime, Uuid
from pgvector.sqlalchemy import Vector
from datetime import datetime

from app.core.config import settings
from app.core.database import Base
from sqlalchemy.orm import relationship


class UserEmbedding(Base):
    """Journey embedding of a user. One row per user, replaced on every recompute."""

    __tablename__ = "user_embeddings"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), primary_key=True, index=True)
    vector = Column(Vector(settings.EMBEDDING_DIM), nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="embedding", uselist=False)
