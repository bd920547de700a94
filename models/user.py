from models import db, utcnow
from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash
import re

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class User(UserMixin, db.Model):
    """User model - owns flashcards, study sessions, statistics and logs"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow)
    last_active_at = db.Column(db.DateTime)

    # Relationships
    flashcards = db.relationship('Flashcard', back_populates='user', lazy='dynamic')
    study_sessions = db.relationship('StudySession', back_populates='user', lazy='dynamic')
    practice_results = db.relationship('PracticeResult', back_populates='user', lazy='dynamic')
    statistic = db.relationship('Statistic', back_populates='user', uselist=False)
    logs = db.relationship('Log', back_populates='user', lazy='dynamic')

    @validates('email')
    def validate_email(self, key, email):
        if not email:
            raise ValueError('Email is required')
        if not re.match(EMAIL_PATTERN, email):
            raise ValueError(f'Invalid email format: {email}')
        return email

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.email}>'
