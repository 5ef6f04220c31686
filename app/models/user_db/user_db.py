import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text, Uuid, and_
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime


class User(Base):
    __tablename__ = "users"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        index=True
    )

    email = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=False)
    looking_for_text = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    answers = relationship(
        "JourneyAnswer",
        back_populates="user",
        order_by="JourneyAnswer.id",
    )
    embedding = relationship("UserEmbedding", back_populates="user", uselist=False)

    @hybrid_property
    def eligible(self):
        return bool(self.is_active) and bool(self.is_email_verified)

    @eligible.expression
    def eligible(cls):
        return and_(cls.is_active.is_(True), cls.is_email_verified.is_(True))
