"""Tests for statistic_service"""

import sys
import os
from datetime import datetime

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.log import Log
from models.statistic import Statistic
from models.study_session import StudySession
from models.user import User
from auth.utils import register_user
from repositories import statistic_repository
from services import flashcard_service, statistic_service, study_session_service


@pytest.fixture(scope='function')
def app_context():
    """Create a fresh app context and database for each test"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def test_user(app_context):
    return register_user('Test_User', 'test@example.com', 'Secret123!')


def _ended_session(user_id, start, end):
    study_session = StudySession(user_id=user_id, started_at=start, ended_at=end)
    db.session.add(study_session)
    db.session.commit()
    return study_session


class TestGetStatistics:

    def test_new_user_has_zeroed_statistics(self, test_user):
        assert statistic_service.get_statistics_for_user(test_user.id) == {
            'flashcards_created': 0,
            'study_sessions': 0,
            'correct_answers': 0,
            'incorrect_answers': 0,
            'success_rate': 0.0,
            'completion_percentage': 0.0,
        }

    def test_row_is_created_on_first_read(self, app_context):
        user = User(name='No Stats', email='nostats@example.com')
        user.set_password('Secret123!')
        db.session.add(user)
        db.session.commit()

        statistic_service.get_statistics_for_user(user.id)

        assert Statistic.query.filter_by(user_id=user.id).count() == 1

    def test_rates_follow_practice_results(self, test_user):
        cards = [flashcard_service.create(test_user.id, f'Question {i}', f'Answer {i}') for i in range(4)]
        study_session_service.record_practice_result(test_user.id, cards[0].id, True)
        study_session_service.record_practice_result(test_user.id, cards[0].id, True)
        study_session_service.record_practice_result(test_user.id, cards[1].id, True)
        study_session_service.record_practice_result(test_user.id, cards[2].id, False)

        statistics = statistic_service.get_statistics_for_user(test_user.id)

        assert statistics['correct_answers'] == 3
        assert statistics['incorrect_answers'] == 1
        assert statistics['success_rate'] == 75.0
        # two of four active flashcards answered correctly at least once
        assert statistics['completion_percentage'] == 50.0
        assert statistic_service.get_practice_success_rate(test_user.id) == 75.0

    def test_trashed_flashcards_leave_completion(self, test_user):
        cards = [flashcard_service.create(test_user.id, f'Question {i}', f'Answer {i}') for i in range(2)]
        study_session_service.record_practice_result(test_user.id, cards[0].id, True)
        flashcard_service.delete(test_user.id, cards[0].id)

        statistics = statistic_service.get_statistics_for_user(test_user.id)

        assert statistics['completion_percentage'] == 0.0
        assert statistics['flashcards_created'] == 2

    def test_success_rate_without_row(self, app_context):
        assert statistic_service.get_practice_success_rate(12345) == 0.0


class TestStudyTime:

    def test_average_and_total_use_ended_sessions(self, test_user):
        _ended_session(test_user.id, datetime(2024, 1, 1, 10, 0), datetime(2024, 1, 1, 10, 30))
        _ended_session(test_user.id, datetime(2024, 1, 2, 10, 0), datetime(2024, 1, 2, 10, 15))
        db.session.add(StudySession(user_id=test_user.id, started_at=datetime(2024, 1, 3, 10, 0)))
        db.session.commit()

        assert statistic_service.get_average_study_session_duration(test_user.id) == 22.5
        assert statistic_service.get_total_study_time(test_user.id) == 45.0

    def test_no_sessions(self, test_user):
        assert statistic_service.get_average_study_session_duration(test_user.id) == 0.0
        assert statistic_service.get_total_study_time(test_user.id) == 0.0


class TestCounters:

    def test_unknown_counter_is_rejected(self, test_user):
        with pytest.raises(ValueError):
            statistic_repository.increment(test_user.id, 'total_logins')

    def test_reset_keeps_flashcard_total(self, test_user):
        card = flashcard_service.create(test_user.id, 'Question one', 'Answer')
        study_session_service.record_practice_result(test_user.id, card.id, True)

        statistic_service.reset_practice_statistics(test_user.id)
        db.session.commit()

        statistic = statistic_repository.get_for_user(test_user.id)
        assert statistic.total_flashcards == 1
        assert statistic.total_correct_answers == 0
        assert statistic.total_study_sessions == 0

    def test_recount_rebuilds_from_rows(self, test_user):
        cards = [flashcard_service.create(test_user.id, f'Question {i}', f'Answer {i}') for i in range(3)]
        flashcard_service.delete(test_user.id, cards[2].id)
        study_session_service.record_practice_result(test_user.id, cards[0].id, True)
        study_session_service.record_practice_result(test_user.id, cards[1].id, False)

        statistic_repository.set_counters(
            test_user.id,
            total_flashcards=0,
            total_study_sessions=0,
            total_correct_answers=0,
            total_incorrect_answers=0,
        )
        db.session.commit()

        statistic = statistic_service.recount_for_user(test_user.id)

        assert statistic.total_flashcards == 3
        assert statistic.total_study_sessions == 1
        assert statistic.total_correct_answers == 1
        assert statistic.total_incorrect_answers == 1

    def test_statistics_viewed_is_logged(self, test_user):
        statistic_service.statistics_viewed(test_user.id)

        entry = Log.query.filter_by(user_id=test_user.id, action='statistics_viewed').one()
        assert entry.level == 'debug'
