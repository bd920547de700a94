from models import db, utcnow

COUNTER_FIELDS = (
    'total_flashcards',
    'total_study_sessions',
    'total_correct_answers',
    'total_incorrect_answers',
)


class Statistic(db.Model):
    """Statistic model - per-user activity counters"""
    __tablename__ = 'statistics'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)

    total_flashcards = db.Column(db.Integer, nullable=False, default=0)
    total_study_sessions = db.Column(db.Integer, nullable=False, default=0)
    total_correct_answers = db.Column(db.Integer, nullable=False, default=0)
    total_incorrect_answers = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = db.relationship('User', back_populates='statistic')

    def __repr__(self):
        return (
            f'<Statistic user_id={self.user_id} flashcards={self.total_flashcards} '
            f'correct={self.total_correct_answers} incorrect={self.total_incorrect_answers}>'
        )
