from pydantic import BaseModel
from uuid import UUID
from typing import List


class MatchCandidateOut(BaseModel):
    user_id: UUID
    display_name: str
    similarity: float
    confidence_percent: int


class MatchResponse(BaseModel):
    ok: bool = True
    user_id: UUID
    matches: List[MatchCandidateOut]
