from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, Field


class JourneyAnswerIn(BaseModel):
    question_id: str = Field(..., min_length=1)
    question_text: str = Field(..., min_length=1)
    answer_summary: str = Field(..., min_length=1)


class JourneyAnswerOut(BaseModel):
    id: int
    user_id: UUID
    question_id: str
    question_text: str
    answer_summary: str
    created_at: datetime

    class Config:
        from_attributes = True


class JourneyAnswerAccepted(BaseModel):
    ok: bool = True
    answer_count: int
    embedding_scheduled: bool
