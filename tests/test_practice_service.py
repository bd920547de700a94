"""Tests for practice rounds: progress, answering and finishing"""

import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.practice_result import PracticeResult
from auth.utils import register_user
from services import flashcard_service, study_session_service
from services.practice_service import PracticeProgress, start_practice


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


@pytest.fixture
def flashcards(test_user):
    return [
        flashcard_service.create(test_user.id, 'Capital of France?', 'Paris'),
        flashcard_service.create(test_user.id, 'Capital of Germany?', 'Berlin'),
        flashcard_service.create(test_user.id, 'Capital of Italy?', 'Rome'),
    ]


class TestProgress:

    def test_new_round_has_nothing_answered(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        assert round_.progress() == PracticeProgress(
            total=3, correct=0, incorrect=0, not_answered=3, completion_percentage=0.0
        )
        assert len(round_.pending()) == 3
        assert not round_.is_complete

    def test_progress_includes_earlier_results(self, test_user, flashcards):
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, True)
        study_session_service.record_practice_result(test_user.id, flashcards[1].id, False)

        progress = start_practice(test_user.id).progress()

        assert progress.correct == 1
        assert progress.incorrect == 1
        assert progress.not_answered == 1
        assert progress.completion_percentage == 33.33

    def test_one_correct_answer_is_enough(self, test_user, flashcards):
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, False)
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, True)
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, False)

        progress = start_practice(test_user.id).progress()

        assert progress.correct == 1
        assert progress.incorrect == 0

    def test_empty_round_is_complete(self, test_user):
        round_ = start_practice(test_user.id)

        assert round_.progress().total == 0
        assert round_.progress().completion_percentage == 0.0
        assert round_.is_complete


class TestAnswer:

    def test_answer_is_matched_loosely(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        outcome = round_.answer(flashcards[0].id, '  paris ')

        assert outcome.is_correct
        assert outcome.expected == 'Paris'
        assert flashcards[0].id not in [card.id for card in round_.pending()]

    def test_wrong_answer_is_recorded(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        outcome = round_.answer(flashcards[1].id, 'Munich')

        assert not outcome.is_correct
        assert round_.progress().incorrect == 1
        result = PracticeResult.query.filter_by(flashcard_id=flashcards[1].id).one()
        assert result.study_session_id == round_.study_session.id

    def test_answering_everything_completes_round(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        for card, given in zip(flashcards, ['Paris', 'Berlin', 'Rome']):
            round_.answer(card.id, given)

        assert round_.is_complete
        assert round_.progress().completion_percentage == 100.0

    def test_unknown_flashcard_is_rejected(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        with pytest.raises(ValueError):
            round_.answer(9999, 'anything')

    def test_flashcard_trashed_during_round_is_rejected(self, test_user, flashcards):
        round_ = start_practice(test_user.id)
        flashcard_service.delete(test_user.id, flashcards[2].id)

        with pytest.raises(ValueError):
            round_.answer(flashcards[2].id, 'Rome')


class TestFinish:

    def test_finish_ends_session(self, test_user, flashcards):
        round_ = start_practice(test_user.id)

        assert round_.finish()
        assert study_session_service.get_active_session(test_user.id) is None

    def test_finish_twice_returns_false(self, test_user, flashcards):
        round_ = start_practice(test_user.id)
        round_.finish()

        assert not round_.finish()

    def test_round_reuses_running_session(self, test_user, flashcards):
        running = study_session_service.start_session(test_user.id)

        assert start_practice(test_user.id).study_session.id == running.id

    def test_answer_after_session_was_ended_elsewhere(self, test_user, flashcards):
        round_ = start_practice(test_user.id)
        study_session_service.end_session(test_user.id, round_.study_session.id)

        round_.answer(flashcards[0].id, 'paris')

        assert round_.study_session.is_active
        assert round_.finish()
        assert study_session_service.get_active_session(test_user.id) is None

    def test_answer_after_reset_is_closed_by_finish(self, test_user, flashcards):
        round_ = start_practice(test_user.id)
        study_session_service.reset_practice_progress(test_user.id)

        round_.answer(flashcards[1].id, 'Berlin')
        result = PracticeResult.query.filter_by(user_id=test_user.id).one()

        assert result.study_session_id == round_.study_session.id
        assert round_.finish()
        assert study_session_service.get_active_session(test_user.id) is None
