"""
Tests for flashcard_service

Covers creation with validation, updates, the trash bin lifecycle and the
statistics and audit log entries each action leaves behind.
"""

import sys
import os
from datetime import datetime

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.flashcard import Flashcard
from models.log import Log
from models.practice_result import PracticeResult
from auth.utils import register_user
from services import flashcard_service, statistic_service, study_session_service
from services.exceptions import InputValidationError, InvalidTransitionError


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
def other_user(app_context):
    return register_user('Other_User', 'other@example.com', 'Secret123!')


def _actions(user_id):
    return [entry.action for entry in Log.query.filter_by(user_id=user_id).order_by(Log.id).all()]


class TestCreateFlashcard:

    def test_create_trims_and_saves(self, test_user):
        flashcard = flashcard_service.create(test_user.id, '  What is Flask?  ', ' A framework ')

        assert flashcard.id is not None
        assert flashcard.question == 'What is Flask?'
        assert flashcard.answer == 'A framework'
        assert flashcard.user_id == test_user.id

    def test_create_increments_statistics_and_logs(self, test_user):
        flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')

        statistics = statistic_service.get_statistics_for_user(test_user.id)
        assert statistics['flashcards_created'] == 1
        assert 'created_flashcard' in _actions(test_user.id)

    @pytest.mark.parametrize('question,answer,message', [
        ('Hi', 'Answer', 'The question must be at least 3 characters.'),
        ('Question', 'A', 'The answer must be at least 2 characters.'),
        ('Q' * 501, 'Answer', 'The question cannot exceed 500 characters.'),
        ('Question', 'A' * 501, 'The answer cannot exceed 500 characters.'),
    ])
    def test_create_rejects_bad_input(self, test_user, question, answer, message):
        with pytest.raises(InputValidationError) as exc_info:
            flashcard_service.create(test_user.id, question, answer)

        assert message in exc_info.value.messages
        assert Flashcard.query.count() == 0

    def test_whitespace_only_question_is_rejected(self, test_user):
        with pytest.raises(InputValidationError):
            flashcard_service.create(test_user.id, '     ', 'Answer')


class TestUpdateFlashcard:

    def test_update_changes_text(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'Old question', 'Old answer')

        assert flashcard_service.update(test_user.id, flashcard.id, 'New question', 'New answer')

        updated = flashcard_service.find_for_user(test_user.id, flashcard.id)
        assert updated.question == 'New question'
        assert updated.answer == 'New answer'
        assert 'updated_flashcard' in _actions(test_user.id)

    def test_update_of_other_users_flashcard_returns_false(self, test_user, other_user):
        flashcard = flashcard_service.create(test_user.id, 'Old question', 'Old answer')

        assert not flashcard_service.update(other_user.id, flashcard.id, 'New question', 'New answer')
        assert flashcard_service.find_for_user(test_user.id, flashcard.id).question == 'Old question'

    def test_update_of_trashed_flashcard_returns_false(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'Old question', 'Old answer')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert not flashcard_service.update(test_user.id, flashcard.id, 'New question', 'New answer')


class TestTrashBin:

    def test_delete_moves_flashcard_to_trash(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')

        assert flashcard_service.delete(test_user.id, flashcard.id)

        assert flashcard_service.find_for_user(test_user.id, flashcard.id) is None
        trashed = flashcard_service.find_for_user(test_user.id, flashcard.id, with_trashed=True)
        assert trashed.is_trashed
        assert flashcard_service.get_all_for_user(test_user.id).total == 0
        assert flashcard_service.get_deleted_for_user(test_user.id).total == 1

    def test_delete_keeps_flashcard_counter(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert statistic_service.get_statistics_for_user(test_user.id)['flashcards_created'] == 1

    def test_delete_twice_returns_false(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert not flashcard_service.delete(test_user.id, flashcard.id)

    def test_restore_brings_flashcard_back(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert flashcard_service.restore(test_user.id, flashcard.id)

        assert flashcard_service.find_for_user(test_user.id, flashcard.id) is not None
        assert 'restored_flashcard' in _actions(test_user.id)

    def test_restore_of_active_flashcard_is_rejected(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')

        with pytest.raises(InvalidTransitionError):
            flashcard_service.restore(test_user.id, flashcard.id)

    def test_restore_of_other_users_flashcard_returns_false(self, test_user, other_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert not flashcard_service.restore(other_user.id, flashcard.id)

    def test_force_delete_removes_row_and_results(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_id = flashcard.id
        study_session_service.record_practice_result(test_user.id, flashcard_id, True)

        assert flashcard_service.force_delete(test_user.id, flashcard_id)

        assert flashcard_service.get_by_id(flashcard_id) is None
        assert PracticeResult.query.filter_by(flashcard_id=flashcard_id).count() == 0
        assert not flashcard_service.restore(test_user.id, flashcard_id)
        assert 'force_deleted_flashcard' in _actions(test_user.id)

    def test_force_delete_works_from_trash(self, test_user):
        flashcard = flashcard_service.create(test_user.id, 'What is Flask?', 'A framework')
        flashcard_service.delete(test_user.id, flashcard.id)

        assert flashcard_service.force_delete(test_user.id, flashcard.id)
        assert flashcard_service.get_deleted_for_user(test_user.id).total == 0

    def test_restore_all(self, test_user):
        for index in range(3):
            flashcard = flashcard_service.create(test_user.id, f'Question {index}', f'Answer {index}')
            flashcard_service.delete(test_user.id, flashcard.id)

        assert flashcard_service.restore_all_for_user(test_user.id) == 3
        assert flashcard_service.get_all_for_user(test_user.id).total == 3
        assert 'restored_all_flashcards' in _actions(test_user.id)

    def test_restore_all_with_empty_trash_does_not_log(self, test_user):
        assert flashcard_service.restore_all_for_user(test_user.id) == 0
        assert 'restored_all_flashcards' not in _actions(test_user.id)

    def test_force_delete_all_only_touches_trash(self, test_user, other_user):
        kept = flashcard_service.create(test_user.id, 'Kept question', 'Kept')
        trashed = flashcard_service.create(test_user.id, 'Trashed question', 'Gone')
        study_session_service.record_practice_result(test_user.id, trashed.id, False)
        flashcard_service.delete(test_user.id, trashed.id)
        others = flashcard_service.create(other_user.id, 'Other question', 'Other')
        flashcard_service.delete(other_user.id, others.id)

        assert flashcard_service.force_delete_all_for_user(test_user.id) == 1

        assert flashcard_service.get_by_id(kept.id) is not None
        assert flashcard_service.get_by_id(others.id) is not None
        assert PracticeResult.query.filter_by(user_id=test_user.id).count() == 0
        assert 'permanently_deleted_all_flashcards' in _actions(test_user.id)


class TestListing:

    def test_list_is_newest_first_and_paginated(self, test_user):
        for index in range(20):
            flashcard_service.create(test_user.id, f'Question {index}', f'Answer {index}')

        first_page = flashcard_service.get_all_for_user(test_user.id)
        assert first_page.total == 20
        assert len(first_page.items) == flashcard_service.DEFAULT_PER_PAGE
        assert first_page.items[0].question == 'Question 19'

        second_page = flashcard_service.get_all_for_user(test_user.id, page=2)
        assert len(second_page.items) == 5

    def test_list_only_shows_own_flashcards(self, test_user, other_user):
        flashcard_service.create(test_user.id, 'Mine question', 'Mine')
        flashcard_service.create(other_user.id, 'Theirs question', 'Theirs')

        items = flashcard_service.get_all_for_user(test_user.id).items
        assert [card.question for card in items] == ['Mine question']

    def test_trash_is_most_recently_deleted_first(self, test_user):
        first = flashcard_service.create(test_user.id, 'First question', 'First')
        second = flashcard_service.create(test_user.id, 'Second question', 'Second')
        flashcard_service.delete(test_user.id, first.id)
        flashcard_service.delete(test_user.id, second.id)

        first.deleted_at = datetime(2024, 1, 2)
        second.deleted_at = datetime(2024, 1, 1)
        db.session.commit()

        items = flashcard_service.get_deleted_for_user(test_user.id).items
        assert [card.id for card in items] == [first.id, second.id]

    def test_list_viewed_logs_debug_entry(self, test_user):
        flashcard_service.list_viewed(test_user.id)

        entry = Log.query.filter_by(user_id=test_user.id, action='viewed_flashcard_list').one()
        assert entry.level == 'debug'
