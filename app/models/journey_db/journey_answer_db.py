from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base


class JourneyAnswer(Base):
    """One answered journey question. Rows are append-only."""

    __tablename__ = "journey_answers"

    # the sequence doubles as per-user insertion order
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(String, nullable=False)
    question_text = Column(Text, nullable=False)
    answer_summary = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="answers")
