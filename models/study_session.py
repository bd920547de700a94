from models import db, utcnow


class StudySession(db.Model):
    """StudySession model - a bounded window in which practice results are recorded"""
    __tablename__ = 'study_sessions'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    started_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    ended_at = db.Column(db.DateTime)

    # Relationships
    user = db.relationship('User', back_populates='study_sessions')
    practice_results = db.relationship('PracticeResult', back_populates='study_session', lazy='dynamic')

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    @property
    def duration_minutes(self):
        """Whole minutes between start and end, None while the session is running"""
        from services.practice_rules import session_duration_minutes

        if self.ended_at is None:
            return None
        return session_duration_minutes(self.started_at, self.ended_at)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'ended_at': self.ended_at.isoformat() if self.ended_at else None,
            'is_active': self.is_active,
            'duration_minutes': self.duration_minutes,
        }

    def __repr__(self):
        return f'<StudySession id={self.id} user_id={self.user_id} active={self.is_active}>'
