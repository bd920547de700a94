"""Flashcard queries, including the trash bin and the practice queue"""
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import aliased

from models import db, utcnow
from models.flashcard import Flashcard
from models.practice_result import PracticeResult


def add(flashcard: Flashcard) -> Flashcard:
    db.session.add(flashcard)
    db.session.flush()
    return flashcard


def get_by_id(flashcard_id: int) -> Optional[Flashcard]:
    """Look a flashcard up regardless of owner or trash state"""
    return db.session.get(Flashcard, flashcard_id)


def find_for_user(user_id: int, flashcard_id: int, with_trashed: bool = False,
                  only_trashed: bool = False) -> Optional[Flashcard]:
    """
    Find a flashcard owned by the user.

    Args:
        user_id: Owner of the flashcard
        flashcard_id: The flashcard to look up
        with_trashed: Also match flashcards sitting in the trash bin
        only_trashed: Match trashed flashcards only

    Returns:
        The Flashcard, or None when it is missing or owned by someone else
    """
    query = Flashcard.query.filter_by(id=flashcard_id, user_id=user_id)
    if only_trashed:
        query = query.filter(Flashcard.deleted_at.isnot(None))
    elif not with_trashed:
        query = query.filter(Flashcard.deleted_at.is_(None))
    return query.first()


def paginate_active(user_id: int, page: int, per_page: int):
    return Flashcard.query.filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.is_(None)
    ).order_by(
        Flashcard.created_at.desc(), Flashcard.id.desc()
    ).paginate(page=page, per_page=per_page, error_out=False)


def paginate_trashed(user_id: int, page: int, per_page: int):
    return Flashcard.query.filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.isnot(None)
    ).order_by(
        Flashcard.deleted_at.desc(), Flashcard.id.desc()
    ).paginate(page=page, per_page=per_page, error_out=False)


def active_for_user(user_id: int) -> List[Flashcard]:
    """All active flashcards of a user, oldest first"""
    return Flashcard.query.filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.is_(None)
    ).order_by(Flashcard.created_at.asc(), Flashcard.id.asc()).all()


def count_for_user(user_id: int, with_trashed: bool = False) -> int:
    query = Flashcard.query.filter(Flashcard.user_id == user_id)
    if not with_trashed:
        query = query.filter(Flashcard.deleted_at.is_(None))
    return query.count()


def soft_delete(flashcard: Flashcard) -> None:
    flashcard.deleted_at = utcnow()
    db.session.flush()


def restore(flashcard: Flashcard) -> None:
    flashcard.deleted_at = None
    db.session.flush()


def purge(flashcard: Flashcard) -> None:
    """Delete a flashcard row together with its practice results"""
    PracticeResult.query.filter_by(flashcard_id=flashcard.id).delete(synchronize_session=False)
    db.session.delete(flashcard)
    db.session.flush()


def restore_trashed_for_user(user_id: int) -> int:
    """Bring every trashed flashcard of the user back, returning how many moved"""
    count = Flashcard.query.filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.isnot(None)
    ).update({Flashcard.deleted_at: None}, synchronize_session=False)
    db.session.expire_all()
    return count


def purge_trashed_for_user(user_id: int) -> int:
    """Permanently delete every trashed flashcard of the user, returning how many went"""
    trashed_ids = db.session.query(Flashcard.id).filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.isnot(None)
    )
    PracticeResult.query.filter(
        PracticeResult.flashcard_id.in_(trashed_ids.scalar_subquery())
    ).delete(synchronize_session=False)
    count = Flashcard.query.filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.isnot(None)
    ).delete(synchronize_session=False)
    db.session.expire_all()
    return count


def practice_queue(user_id: int, limit: int) -> List[Flashcard]:
    """
    Active flashcards in the order they should be practiced.

    Ordering, based on each flashcard's latest practice result:
    1. Latest result incorrect
    2. Never practiced
    3. Latest result longest ago
    Ties fall back to the flashcard's creation time.
    """
    latest = db.session.query(
        PracticeResult.flashcard_id.label('flashcard_id'),
        func.max(PracticeResult.id).label('latest_id')
    ).filter(
        PracticeResult.user_id == user_id
    ).group_by(PracticeResult.flashcard_id).subquery()

    latest_result = aliased(PracticeResult)

    return Flashcard.query.outerjoin(
        latest, latest.c.flashcard_id == Flashcard.id
    ).outerjoin(
        latest_result, latest_result.id == latest.c.latest_id
    ).filter(
        Flashcard.user_id == user_id,
        Flashcard.deleted_at.is_(None)
    ).order_by(
        case((latest_result.is_correct.is_(False), 0), else_=1),
        case((latest_result.id.is_(None), 0), else_=1),
        latest_result.created_at.asc(),
        Flashcard.created_at.asc(),
        Flashcard.id.asc()
    ).limit(limit).all()
