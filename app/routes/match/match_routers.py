from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import (
    MatchQueryFailed,
    NoEligibleUsers,
    ProfileNotReady,
    UserNotEligible,
    UserNotFound,
)
from app.schemas.match.match_base import MatchCandidateOut, MatchResponse
from app.services.ranking import request_matches


match_router = APIRouter(prefix="/matching", tags=["Matching"])


@match_router.get("/{user_id}", response_model=MatchResponse)
def get_matches(
    user_id: UUID,
    limit: int = Query(settings.MATCH_DEFAULT_LIMIT, ge=1, le=settings.MATCH_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    try:
        candidates = request_matches(db, user_id, limit)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except UserNotEligible as e:
        raise HTTPException(status_code=403, detail=e.reason)
    except ProfileNotReady:
        raise HTTPException(
            status_code=409,
            detail="No embedding for this user yet. Answer more journey questions.",
        )
    except NoEligibleUsers:
        raise HTTPException(status_code=404, detail="No other users available to match yet")
    except MatchQueryFailed:
        raise HTTPException(
            status_code=503,
            detail="Matchmaking failed, please try again",
            headers={"Retry-After": "5"},
        )

    return MatchResponse(
        user_id=user_id,
        matches=[
            MatchCandidateOut(
                user_id=c.user_id,
                display_name=c.display_name,
                similarity=c.raw_score,
                confidence_percent=c.confidence_percent,
            )
            for c in candidates
        ],
    )
