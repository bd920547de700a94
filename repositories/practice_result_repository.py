"""Practice result queries. Results are append-only."""
from typing import List

from sqlalchemy import distinct, func

from models import db, utcnow
from models.flashcard import Flashcard
from models.practice_result import PracticeResult


def create(user_id: int, flashcard_id: int, study_session_id: int, is_correct: bool) -> PracticeResult:
    result = PracticeResult(
        user_id=user_id,
        flashcard_id=flashcard_id,
        study_session_id=study_session_id,
        is_correct=is_correct,
        created_at=utcnow()
    )
    db.session.add(result)
    db.session.flush()
    return result


def for_user(user_id: int) -> List[PracticeResult]:
    return PracticeResult.query.filter_by(user_id=user_id).order_by(PracticeResult.id.asc()).all()


def count_for_user(user_id: int, is_correct: bool) -> int:
    return PracticeResult.query.filter_by(user_id=user_id, is_correct=is_correct).count()


def delete_for_user(user_id: int) -> int:
    count = PracticeResult.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.expire_all()
    return count


def count_correctly_answered_flashcards(user_id: int) -> int:
    """Active flashcards of the user that have at least one correct result"""
    return db.session.query(
        func.count(distinct(PracticeResult.flashcard_id))
    ).join(
        Flashcard, Flashcard.id == PracticeResult.flashcard_id
    ).filter(
        PracticeResult.user_id == user_id,
        PracticeResult.is_correct.is_(True),
        Flashcard.deleted_at.is_(None)
    ).scalar() or 0
