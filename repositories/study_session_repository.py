"""Study session queries"""
from typing import List, Optional

from models import db, utcnow
from models.practice_result import PracticeResult
from models.study_session import StudySession


def start(user_id: int) -> StudySession:
    study_session = StudySession(user_id=user_id, started_at=utcnow())
    db.session.add(study_session)
    db.session.flush()
    return study_session


def get_by_id(session_id: int) -> Optional[StudySession]:
    return db.session.get(StudySession, session_id)


def find_for_user(user_id: int, session_id: int) -> Optional[StudySession]:
    return StudySession.query.filter_by(id=session_id, user_id=user_id).first()


def get_active(user_id: int) -> Optional[StudySession]:
    """The most recently started session that has not ended yet"""
    return StudySession.query.filter_by(
        user_id=user_id,
        ended_at=None
    ).order_by(StudySession.started_at.desc(), StudySession.id.desc()).first()


def end(study_session: StudySession) -> StudySession:
    study_session.ended_at = utcnow()
    db.session.flush()
    return study_session


def ended_for_user(user_id: int) -> List[StudySession]:
    return StudySession.query.filter(
        StudySession.user_id == user_id,
        StudySession.ended_at.isnot(None)
    ).all()


def count_for_user(user_id: int) -> int:
    return StudySession.query.filter_by(user_id=user_id).count()


def delete_all_for_user(user_id: int) -> int:
    """Delete every session of the user along with the results recorded in them"""
    session_ids = db.session.query(StudySession.id).filter(StudySession.user_id == user_id)
    PracticeResult.query.filter(
        PracticeResult.study_session_id.in_(session_ids.scalar_subquery())
    ).delete(synchronize_session=False)
    count = StudySession.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.expire_all()
    return count
