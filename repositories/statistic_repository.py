"""Per-user statistics row access"""
from typing import Optional

from models import db
from models.statistic import COUNTER_FIELDS, Statistic


def get_for_user(user_id: int) -> Optional[Statistic]:
    return Statistic.query.filter_by(user_id=user_id).first()


def get_or_create_for_user(user_id: int) -> Statistic:
    statistic = get_for_user(user_id)
    if statistic is None:
        statistic = Statistic(user_id=user_id, **{field: 0 for field in COUNTER_FIELDS})
        db.session.add(statistic)
        db.session.flush()
    return statistic


def increment(user_id: int, field: str, amount: int = 1) -> Statistic:
    """Add ``amount`` to one counter, creating the row when missing"""
    if field not in COUNTER_FIELDS:
        raise ValueError(f'Unknown statistics counter: {field}')
    statistic = get_or_create_for_user(user_id)
    setattr(statistic, field, (getattr(statistic, field) or 0) + amount)
    db.session.flush()
    return statistic


def set_counters(user_id: int, **counters) -> Statistic:
    statistic = get_or_create_for_user(user_id)
    for field, value in counters.items():
        if field not in COUNTER_FIELDS:
            raise ValueError(f'Unknown statistics counter: {field}')
        setattr(statistic, field, value)
    db.session.flush()
    return statistic
