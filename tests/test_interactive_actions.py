"""
Tests for the interactive menu actions.

A ScriptedRenderer stands in for the terminal: it replays prepared answers,
confirmations and menu choices and records everything printed.
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.flashcard import Flashcard
from models.log import Log
from models.practice_result import PracticeResult
from auth.utils import register_user
from commands.actions import FlashcardActions, MenuOption, MenuResult, register_interactively, run_menu
from services import flashcard_service, study_session_service


class ScriptedRenderer:
    """
    Renderer double. ``selections`` items are option keys or callables taking
    the offered options and returning a key. Running out of input raises
    EOFError, like a closed stdin.
    """

    def __init__(self, answers=(), secrets=(), confirms=(), selections=()):
        self.answers = list(answers)
        self.secrets = list(secrets)
        self.confirms = list(confirms)
        self.selections = list(selections)
        self.messages = []
        self.tables = []

    def _say(self, kind, message):
        self.messages.append((kind, message))

    def info(self, message):
        self._say('info', message)

    def success(self, message):
        self._say('success', message)

    def warning(self, message):
        self._say('warning', message)

    def error(self, message):
        self._say('error', message)

    def note(self, message):
        self._say('note', message)

    def table(self, headers, rows, title=None):
        self.tables.append((list(headers), [list(row) for row in rows]))

    def _next(self, queue):
        if not queue:
            raise EOFError()
        return queue.pop(0)

    def ask(self, label, default=None, validate=None):
        while True:
            value = self._next(self.answers)
            message = validate(value) if validate else None
            if message is None:
                return value
            self.error(message)

    def ask_secret(self, label, validate=None):
        while True:
            value = self._next(self.secrets)
            message = validate(value) if validate else None
            if message is None:
                return value
            self.error(message)

    def confirm(self, label, default=False):
        return self._next(self.confirms)

    def select(self, label, options, default=None):
        choice = self._next(self.selections)
        if callable(choice):
            choice = choice(options)
        assert choice in [key for key, _ in options]
        return choice

    def said(self, kind, text):
        return any(k == kind and text in message for k, message in self.messages)


def pick_question(question):
    """Selection choosing the option whose text starts with ``question``"""
    def choose(options):
        return next(key for key, text in options if text.startswith(question))
    return choose


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
    ]


def _actions(user, **script):
    renderer = ScriptedRenderer(**script)
    return FlashcardActions(user, renderer), renderer


class TestListAndCreate:

    def test_list_without_flashcards(self, test_user):
        actions, renderer = _actions(test_user)

        assert actions.list_flashcards() is MenuResult.CONTINUE
        assert renderer.said('warning', 'You have no flashcards yet.')

    def test_list_shows_table(self, test_user, flashcards):
        actions, renderer = _actions(test_user)

        actions.list_flashcards()

        headers, rows = renderer.tables[0]
        assert headers == ['Question', 'Answer']
        assert ['Capital of France?', 'Paris'] in rows

    def test_create_reprompts_until_valid(self, test_user):
        actions, renderer = _actions(test_user, answers=['Hi', 'What is Flask?', 'A', 'A framework'])

        actions.create_flashcard()

        assert renderer.said('error', 'The question must be at least 3 characters.')
        assert renderer.said('error', 'The answer must be at least 2 characters.')
        assert renderer.said('success', 'Flashcard created successfully!')
        assert Flashcard.query.filter_by(user_id=test_user.id, question='What is Flask?').count() == 1


class TestDelete:

    def test_delete_after_confirmation(self, test_user, flashcards):
        actions, renderer = _actions(
            test_user, selections=[pick_question('Capital of France?')], confirms=[True]
        )

        actions.delete_flashcard()

        assert renderer.said('success', 'Flashcard deleted successfully!')
        assert db.session.get(Flashcard, flashcards[0].id).is_trashed

    def test_delete_declined(self, test_user, flashcards):
        actions, renderer = _actions(
            test_user, selections=[pick_question('Capital of France?')], confirms=[False]
        )

        actions.delete_flashcard()

        assert renderer.said('info', 'Deletion cancelled.')
        assert not db.session.get(Flashcard, flashcards[0].id).is_trashed

    def test_delete_cancel_option(self, test_user, flashcards):
        actions, renderer = _actions(test_user, selections=['cancel'])

        actions.delete_flashcard()

        assert flashcard_service.get_deleted_for_user(test_user.id).total == 0


class TestPractice:

    def test_practice_until_complete(self, test_user, flashcards):
        actions, renderer = _actions(
            test_user,
            selections=[pick_question('Capital of France?'), pick_question('Capital of Germany?'),
                        pick_question('Capital of Germany?')],
            answers=['paris', 'Munich', 'berlin'],
            confirms=[True, True, True],
        )

        actions.practice()

        assert renderer.said('success', 'Correct! The answer is: Paris')
        assert renderer.said('error', 'Incorrect. The correct answer is: Berlin')
        assert renderer.said('success', 'Congratulations! You have correctly answered all flashcards.')
        assert PracticeResult.query.filter_by(user_id=test_user.id).count() == 3
        assert study_session_service.get_active_session(test_user.id) is None

    def test_exit_option_ends_session(self, test_user, flashcards):
        actions, renderer = _actions(test_user, selections=['exit'])

        actions.practice()

        assert renderer.said('info', 'Exiting practice mode...')
        assert study_session_service.get_active_session(test_user.id) is None
        assert renderer.tables[0][1][0] == ['Total Flashcards', 2]

    def test_declining_to_continue(self, test_user, flashcards):
        actions, renderer = _actions(
            test_user, selections=[pick_question('Capital of France?')], answers=['Paris'], confirms=[False]
        )

        actions.practice()

        assert renderer.said('info', 'Ending practice session...')

    def test_closed_input_still_ends_session(self, test_user, flashcards):
        actions, renderer = _actions(test_user)

        with pytest.raises(EOFError):
            actions.practice()

        assert study_session_service.get_active_session(test_user.id) is None

    def test_no_flashcards(self, test_user):
        actions, renderer = _actions(test_user)

        actions.practice()

        assert renderer.said('warning', 'You have no flashcards to practice.')


class TestStatisticsResetAndLogs:

    def test_statistics_table(self, test_user, flashcards):
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, True)
        actions, renderer = _actions(test_user)

        actions.show_statistics()

        rows = dict((row[0], row[1]) for row in renderer.tables[0][1])
        assert rows['Total Flashcards'] == 2
        assert rows['Correct Answers'] == 1
        assert rows['Success Rate'] == '100.0%'
        assert rows['Completion'] == '50.0%'

    def test_reset_requires_confirmation(self, test_user, flashcards):
        study_session_service.record_practice_result(test_user.id, flashcards[0].id, True)

        actions, renderer = _actions(test_user, confirms=[False])
        actions.reset_practice()
        assert PracticeResult.query.filter_by(user_id=test_user.id).count() == 1

        actions, renderer = _actions(test_user, confirms=[True])
        actions.reset_practice()
        assert PracticeResult.query.filter_by(user_id=test_user.id).count() == 0
        assert renderer.said('success', 'Practice data reset successfully!')

    def test_view_logs(self, test_user):
        actions, renderer = _actions(test_user)

        actions.view_logs()

        assert renderer.said('info', '[info] user_registered - User Test User registered')


class TestTrashBin:

    @pytest.fixture
    def trashed(self, test_user, flashcards):
        for card in flashcards:
            flashcard_service.delete(test_user.id, card.id)
        return flashcards

    def test_empty_trash(self, test_user):
        actions, renderer = _actions(test_user)

        actions.trash_bin()

        assert renderer.said('warning', 'Your trash bin is empty.')

    def test_restore_one(self, test_user, trashed):
        actions, renderer = _actions(
            test_user, selections=['restore', pick_question('Capital of Germany?')]
        )

        actions.trash_bin()

        assert renderer.said('success', 'Flashcard restored successfully!')
        assert not db.session.get(Flashcard, trashed[1].id).is_trashed

    def test_restore_all(self, test_user, trashed):
        actions, renderer = _actions(test_user, selections=['restore-all'])

        actions.trash_bin()

        assert renderer.said('success', 'Restored 2 flashcards.')

    def test_force_delete_one(self, test_user, trashed):
        flashcard_id = trashed[0].id
        actions, renderer = _actions(
            test_user, selections=['delete', pick_question('Capital of France?')], confirms=[True]
        )

        actions.trash_bin()

        assert renderer.said('success', 'Flashcard permanently deleted.')
        assert db.session.get(Flashcard, flashcard_id) is None

    def test_delete_all_declined(self, test_user, trashed):
        actions, renderer = _actions(test_user, selections=['delete-all'], confirms=[False])

        actions.trash_bin()

        assert flashcard_service.get_deleted_for_user(test_user.id).total == 2


class TestMenu:

    def test_menu_runs_until_exit(self, test_user, flashcards):
        actions, renderer = _actions(test_user, selections=['list', 'exit'])

        run_menu(actions)

        assert renderer.said('info', 'Hi, Test User. Welcome to your flashcards')
        assert renderer.said('info', 'See you!')
        assert Log.query.filter_by(user_id=test_user.id, action='user_exit').count() == 1

    def test_closed_input_exits(self, test_user):
        actions, renderer = _actions(test_user)

        run_menu(actions)

        assert renderer.said('info', 'See you!')

    def test_dispatch_reports_service_errors(self, test_user, flashcards):
        actions, renderer = _actions(test_user)
        actions._handlers[MenuOption.LIST] = lambda: flashcard_service.restore(test_user.id, flashcards[0].id)

        assert actions.dispatch(MenuOption.LIST) is MenuResult.CONTINUE
        assert renderer.said('error', 'Cannot move flashcard from active to active')


class TestRegisterInteractively:

    def test_prompts_for_missing_fields(self, app_context):
        renderer = ScriptedRenderer(
            answers=['Jane_Doe', 'jane@example.com'],
            secrets=['weak', 'Secret123!'],
        )

        user = register_interactively(renderer)

        assert user.name == 'Jane Doe'
        assert renderer.said('error', 'Password must be at least 8 characters long.')
        assert renderer.said('success', 'User Jane Doe registered successfully with email jane@example.com.')

    def test_taken_email_is_reprompted(self, test_user):
        renderer = ScriptedRenderer(
            answers=['test@example.com', 'fresh@example.com'],
            secrets=['Secret123!'],
        )

        user = register_interactively(renderer, name='Fresh_User')

        assert user.email == 'fresh@example.com'
        assert renderer.said('error', 'The email has already been taken.')
