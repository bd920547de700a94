"""User lookups"""
from typing import Optional

from models import db
from models.user import User


def add(user: User) -> User:
    db.session.add(user)
    db.session.flush()
    return user


def get_by_id(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_by_email(email: str) -> Optional[User]:
    if not email:
        return None
    return User.query.filter_by(email=email.strip().lower()).first()


def email_exists(email: str) -> bool:
    return get_by_email(email) is not None
