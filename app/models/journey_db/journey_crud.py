from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from app.models.journey_db.journey_answer_db import JourneyAnswer


def append_answer(
    db: Session,
    user_id: UUID,
    question_id: str,
    question_text: str,
    answer_summary: str,
) -> JourneyAnswer:
    answer = JourneyAnswer(
        user_id=user_id,
        question_id=question_id,
        question_text=question_text,
        answer_summary=answer_summary,
    )
    db.add(answer)
    db.commit()
    db.refresh(answer)
    return answer


def get_user_answers(db: Session, user_id: UUID) -> List[JourneyAnswer]:
    return (
        db.query(JourneyAnswer)
        .filter(JourneyAnswer.user_id == user_id)
        .order_by(JourneyAnswer.id)
        .all()
    )


def count_user_answers(db: Session, user_id: UUID) -> int:
    return db.query(JourneyAnswer).filter(JourneyAnswer.user_id == user_id).count()
