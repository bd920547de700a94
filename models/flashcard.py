from enum import Enum

from models import db, utcnow


class FlashcardState(Enum):
    """Lifecycle of a flashcard: active -> trashed -> purged"""
    ACTIVE = "active"
    TRASHED = "trashed"
    PURGED = "purged"


# PURGED is terminal: the row is gone and nothing leads out of it
ALLOWED_TRANSITIONS = {
    FlashcardState.ACTIVE: {FlashcardState.TRASHED, FlashcardState.PURGED},
    FlashcardState.TRASHED: {FlashcardState.ACTIVE, FlashcardState.PURGED},
    FlashcardState.PURGED: set(),
}


def can_transition(current: FlashcardState, target: FlashcardState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class Flashcard(db.Model):
    """Flashcard model - a question/answer pair owned by one user"""
    __tablename__ = 'flashcards'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    question = db.Column(db.String(500), nullable=False)
    answer = db.Column(db.String(500), nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Set while the flashcard sits in the trash bin
    deleted_at = db.Column(db.DateTime, index=True)

    # Relationships
    user = db.relationship('User', back_populates='flashcards')
    practice_results = db.relationship('PracticeResult', back_populates='flashcard', lazy='dynamic')

    @property
    def state(self) -> FlashcardState:
        if self.deleted_at is not None:
            return FlashcardState.TRASHED
        return FlashcardState.ACTIVE

    @property
    def is_trashed(self) -> bool:
        return self.state is FlashcardState.TRASHED

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'question': self.question,
            'answer': self.answer,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'deleted_at': self.deleted_at.isoformat() if self.deleted_at else None,
        }

    def __repr__(self):
        return f'<Flashcard id={self.id} user_id={self.user_id} state={self.state.value}>'
