from models import db, utcnow

LEVEL_DEBUG = 'debug'
LEVEL_INFO = 'info'
LEVEL_WARNING = 'warning'
LEVEL_ERROR = 'error'

VALID_LEVELS = [LEVEL_DEBUG, LEVEL_INFO, LEVEL_WARNING, LEVEL_ERROR]


class Log(db.Model):
    """Log model - append-only audit trail of user activity"""
    __tablename__ = 'logs'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    # e.g. created_flashcard, started_study_session, practice_reset
    action = db.Column(db.String(100), nullable=False)

    level = db.Column(db.String(20), nullable=False, default=LEVEL_INFO)

    description = db.Column(db.Text)

    # e.g. {"flashcard_id": 12, "result": "correct"}
    details = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    # Relationships
    user = db.relationship('User', back_populates='logs')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'level': self.level,
            'description': self.description,
            'details': self.details,
            'created_at': self.created_at.strftime('%Y-%m-%d %H:%M:%S') if self.created_at else None,
        }

    def __repr__(self):
        return f'<Log user_id={self.user_id} action={self.action} level={self.level}>'
