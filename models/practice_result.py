from models import db, utcnow


class PracticeResult(db.Model):
    """PracticeResult model - one recorded attempt at a flashcard"""
    __tablename__ = 'practice_results'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    flashcard_id = db.Column(db.Integer, db.ForeignKey('flashcards.id', ondelete='CASCADE'),
                             nullable=False, index=True)
    study_session_id = db.Column(db.Integer, db.ForeignKey('study_sessions.id', ondelete='CASCADE'),
                                 nullable=False, index=True)

    is_correct = db.Column(db.Boolean, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    user = db.relationship('User', back_populates='practice_results')
    flashcard = db.relationship('Flashcard', back_populates='practice_results')
    study_session = db.relationship('StudySession', back_populates='practice_results')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'flashcard_id': self.flashcard_id,
            'study_session_id': self.study_session_id,
            'is_correct': self.is_correct,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<PracticeResult flashcard_id={self.flashcard_id} correct={self.is_correct}>'
