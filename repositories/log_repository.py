"""Audit log persistence. Entries are only ever appended."""
from typing import List, Optional

from models import db, utcnow
from models.log import Log


def create(user_id: int, action: str, level: str, description: str,
           details: Optional[dict] = None) -> Log:
    entry = Log(
        user_id=user_id,
        action=action,
        level=level,
        description=description,
        details=details,
        created_at=utcnow()
    )
    db.session.add(entry)
    db.session.flush()
    return entry


def latest_for_user(user_id: int, limit: int) -> List[Log]:
    return Log.query.filter_by(user_id=user_id).order_by(
        Log.created_at.desc(), Log.id.desc()
    ).limit(limit).all()
