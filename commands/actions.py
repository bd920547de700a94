"""
Interactive menu actions.

Each action talks to the user through a ConsoleRenderer and to the database
through the services, and returns a MenuResult telling the menu loop whether
to keep going.
"""
import logging
from enum import Enum

from auth.utils import get_user_by_email, record_exit, register_user
from services import flashcard_service, log_service, practice_service, statistic_service, study_session_service
from services.exceptions import DuplicateEmailError, FlashcardAppError, InputValidationError
from services.input_models.flashcard_models import answer_error, question_error
from services.input_models.user_models import email_error, name_error, password_error

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


class MenuResult(Enum):
    CONTINUE = 'continue'
    EXIT = 'exit'


class MenuOption(Enum):
    LIST = 'list'
    CREATE = 'create'
    DELETE = 'delete'
    PRACTICE = 'practice'
    STATISTICS = 'statistics'
    RESET = 'reset'
    LOGS = 'logs'
    TRASH_BIN = 'trash-bin'
    EXIT = 'exit'

    @property
    def label(self) -> str:
        return MENU_LABELS[self]


MENU_LABELS = {
    MenuOption.LIST: 'List Flashcards',
    MenuOption.CREATE: 'Create Flashcard',
    MenuOption.DELETE: 'Delete Flashcard',
    MenuOption.PRACTICE: 'Practice Study Mode',
    MenuOption.STATISTICS: 'Statistics',
    MenuOption.RESET: 'Reset the flashcards data',
    MenuOption.LOGS: 'View Activity Logs',
    MenuOption.TRASH_BIN: 'Trash Bin',
    MenuOption.EXIT: 'Exit',
}


def _preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    return text if len(text) <= length else text[:length] + '...'


def _required(message):
    return lambda value: None if value else message


def _new_email_error(value):
    message = email_error(value)
    if message is None and get_user_by_email(value) is not None:
        message = 'The email has already been taken.'
    return message


def register_interactively(renderer, name=None, email=None, password=None):
    """
    Register a user, prompting for whatever was not passed in.

    Returns:
        The new User, or None when the input was rejected
    """
    if not name:
        name = renderer.ask('Enter your name', validate=name_error)
    if not email:
        email = renderer.ask('Enter your email', validate=_new_email_error)
    if not password:
        password = renderer.ask_secret('Enter your password', validate=password_error)

    try:
        user = register_user(name, email, password)
    except InputValidationError as e:
        for message in e.messages:
            renderer.error(message)
        return None
    except DuplicateEmailError as e:
        renderer.error(str(e))
        return None

    renderer.success(f'User {user.name} registered successfully with email {user.email}.')
    return user


class FlashcardActions:
    """The menu actions available to one logged-in user"""

    def __init__(self, user, renderer):
        self.user = user
        self.renderer = renderer
        self._handlers = {
            MenuOption.LIST: self.list_flashcards,
            MenuOption.CREATE: self.create_flashcard,
            MenuOption.DELETE: self.delete_flashcard,
            MenuOption.PRACTICE: self.practice,
            MenuOption.STATISTICS: self.show_statistics,
            MenuOption.RESET: self.reset_practice,
            MenuOption.LOGS: self.view_logs,
            MenuOption.TRASH_BIN: self.trash_bin,
            MenuOption.EXIT: self.exit,
        }

    def dispatch(self, option: MenuOption) -> MenuResult:
        logger.debug(f'User {self.user.id} selected menu option: {option.value}')
        try:
            return self._handlers[option]()
        except FlashcardAppError as e:
            self.renderer.error(str(e))
            return MenuResult.CONTINUE

    def list_flashcards(self) -> MenuResult:
        self.renderer.info('Listing all flashcards...')
        flashcard_service.list_viewed(self.user.id)

        pagination = flashcard_service.get_all_for_user(self.user.id)
        if not pagination.items:
            self.renderer.warning('You have no flashcards yet.')
            return MenuResult.CONTINUE

        self.renderer.table(
            ['Question', 'Answer'],
            [(card.question, card.answer) for card in pagination.items]
        )
        if pagination.pages > 1:
            self.renderer.note(f'Showing the {len(pagination.items)} newest of {pagination.total} flashcards.')
        return MenuResult.CONTINUE

    def create_flashcard(self) -> MenuResult:
        self.renderer.info('Creating a new flashcard...')
        question = self.renderer.ask('Enter the flashcard question', validate=question_error)
        answer = self.renderer.ask('Enter the flashcard answer', validate=answer_error)

        self.renderer.info(f'Question: {question}')
        self.renderer.info(f'Answer: {answer}')

        try:
            flashcard_service.create(self.user.id, question, answer)
        except InputValidationError as e:
            for message in e.messages:
                self.renderer.error(message)
            return MenuResult.CONTINUE

        self.renderer.success('Flashcard created successfully!')
        return MenuResult.CONTINUE

    def delete_flashcard(self) -> MenuResult:
        self.renderer.info('Deleting a flashcard...')
        flashcards = flashcard_service.get_all_for_user(self.user.id).items
        if not flashcards:
            self.renderer.warning('You have no flashcards to delete.')
            return MenuResult.CONTINUE

        options = [(str(card.id), _preview(card.question)) for card in flashcards]
        options.append(('cancel', 'Cancel deletion'))
        selected = self.renderer.select('Select a flashcard to delete:', options, default='cancel')

        if selected == 'cancel' or not self.renderer.confirm(
                'Are you sure you want to delete this flashcard?', default=False):
            self.renderer.info('Deletion cancelled.')
            return MenuResult.CONTINUE

        if flashcard_service.delete(self.user.id, int(selected)):
            self.renderer.success('Flashcard deleted successfully!')
        else:
            self.renderer.error('Failed to delete flashcard.')
        return MenuResult.CONTINUE

    def practice(self) -> MenuResult:
        """
        Quiz the user until every flashcard has a correct answer or they stop.

        Leaving the loop, whichever way, closes the study session and returns
        to the main menu.
        """
        self.renderer.info('Starting practice mode...')
        practice_round = practice_service.start_practice(self.user.id)

        try:
            if not practice_round.flashcards:
                self.renderer.warning('You have no flashcards to practice.')
                return MenuResult.CONTINUE

            while True:
                self._show_progress(practice_round.progress())

                if practice_round.is_complete:
                    self.renderer.success('Congratulations! You have correctly answered all flashcards.')
                    break

                options = [(str(card.id), _preview(card.question)) for card in practice_round.pending()]
                options.append(('exit', 'Exit practice mode'))
                selected = self.renderer.select('Select a flashcard to practice:', options, default='exit')

                if selected == 'exit':
                    self.renderer.info('Exiting practice mode...')
                    break

                flashcard_id = int(selected)
                question = next(card.question for card in practice_round.pending() if card.id == flashcard_id)
                self.renderer.info(f'Question: {question}')

                given = self.renderer.ask('Your answer', validate=_required('An answer is required.'))
                outcome = practice_round.answer(flashcard_id, given)

                if outcome.is_correct:
                    self.renderer.success(f'Correct! The answer is: {outcome.expected}')
                else:
                    self.renderer.error(f'Incorrect. The correct answer is: {outcome.expected}')

                if not self.renderer.confirm('Continue practicing?', default=True):
                    self.renderer.info('Ending practice session...')
                    break
        finally:
            practice_round.finish()

        return MenuResult.CONTINUE

    def _show_progress(self, progress) -> None:
        self.renderer.table(['Statistic', 'Value'], [
            ('Total Flashcards', progress.total),
            ('Correct Answers', progress.correct),
            ('Incorrect Answers', progress.incorrect),
            ('Not Answered', progress.not_answered),
            ('Completion', f'{progress.completion_percentage}%'),
        ])

    def show_statistics(self) -> MenuResult:
        self.renderer.info('Showing statistics...')
        statistics = statistic_service.get_statistics_for_user(self.user.id)
        statistic_service.statistics_viewed(self.user.id)

        self.renderer.table(['Statistic', 'Value'], [
            ('Total Flashcards', statistics['flashcards_created']),
            ('Study Sessions', statistics['study_sessions']),
            ('Correct Answers', statistics['correct_answers']),
            ('Incorrect Answers', statistics['incorrect_answers']),
            ('Success Rate', f"{statistics['success_rate']}%"),
            ('Completion', f"{statistics['completion_percentage']}%"),
            ('Average Study Session Duration',
             f'{statistic_service.get_average_study_session_duration(self.user.id)} minutes'),
            ('Total Study Time', f'{statistic_service.get_total_study_time(self.user.id)} minutes'),
        ])
        return MenuResult.CONTINUE

    def reset_practice(self) -> MenuResult:
        self.renderer.info('Resetting flashcard data...')
        confirmed = self.renderer.confirm(
            'Are you sure you want to reset all practice data? '
            'This will delete all practice results and study sessions.',
            default=False
        )
        if not confirmed:
            self.renderer.info('Reset cancelled.')
            return MenuResult.CONTINUE

        study_session_service.reset_practice_progress(self.user.id)
        self.renderer.success('Practice data reset successfully!')
        return MenuResult.CONTINUE

    def view_logs(self) -> MenuResult:
        entries = log_service.get_latest_activity_for_user(self.user.id)
        if not entries:
            self.renderer.warning('No activity logs found')
            return MenuResult.CONTINUE

        for entry in entries:
            self.renderer.info(f"[{entry['level']}] {entry['action']} - {entry['description']}")
        return MenuResult.CONTINUE

    def trash_bin(self) -> MenuResult:
        self.renderer.info('Accessing trash bin...')
        trashed = flashcard_service.get_deleted_for_user(self.user.id).items
        if not trashed:
            self.renderer.warning('Your trash bin is empty.')
            return MenuResult.CONTINUE

        self.renderer.table(['ID', 'Question', 'Answer', 'Deleted At'], [
            (card.id, _preview(card.question, 30), _preview(card.answer, 30),
             card.deleted_at.strftime('%Y-%m-%d %H:%M:%S') if card.deleted_at else 'N/A')
            for card in trashed
        ])

        choice = self.renderer.select('What would you like to do?', [
            ('restore', 'Restore a flashcard'),
            ('restore-all', 'Restore all flashcards'),
            ('delete', 'Permanently delete a flashcard'),
            ('delete-all', 'Permanently delete all flashcards'),
            ('cancel', 'Go back'),
        ], default='cancel')

        if choice == 'restore':
            self._restore_one(trashed)
        elif choice == 'restore-all':
            count = flashcard_service.restore_all_for_user(self.user.id)
            self.renderer.success(f'Restored {count} flashcards.')
        elif choice == 'delete':
            self._force_delete_one(trashed)
        elif choice == 'delete-all':
            if self.renderer.confirm('Permanently delete every flashcard in the trash bin? This cannot be undone.'):
                count = flashcard_service.force_delete_all_for_user(self.user.id)
                self.renderer.success(f'Permanently deleted {count} flashcards.')
            else:
                self.renderer.info('Deletion cancelled.')
        else:
            self.renderer.info('Returning to main menu...')
        return MenuResult.CONTINUE

    def _pick_trashed(self, trashed, label):
        options = [(str(card.id), _preview(card.question)) for card in trashed]
        options.append(('cancel', 'Cancel'))
        selected = self.renderer.select(label, options, default='cancel')
        return None if selected == 'cancel' else int(selected)

    def _restore_one(self, trashed) -> None:
        flashcard_id = self._pick_trashed(trashed, 'Select a flashcard to restore:')
        if flashcard_id is None:
            self.renderer.info('Restore cancelled.')
        elif flashcard_service.restore(self.user.id, flashcard_id):
            self.renderer.success('Flashcard restored successfully!')
        else:
            self.renderer.error('Failed to restore flashcard.')

    def _force_delete_one(self, trashed) -> None:
        flashcard_id = self._pick_trashed(trashed, 'Select a flashcard to permanently delete:')
        if flashcard_id is None or not self.renderer.confirm(
                'Are you sure? This flashcard cannot be restored afterwards.', default=False):
            self.renderer.info('Deletion cancelled.')
        elif flashcard_service.force_delete(self.user.id, flashcard_id):
            self.renderer.success('Flashcard permanently deleted.')
        else:
            self.renderer.error('Failed to delete flashcard.')

    def exit(self) -> MenuResult:
        record_exit(self.user.id)
        self.renderer.info('See you!')
        return MenuResult.EXIT


def run_menu(actions: FlashcardActions) -> None:
    """
    Show the main menu until the user exits.

    End of input and Ctrl-C count as choosing Exit.
    """
    renderer = actions.renderer
    renderer.info(f'Hi, {actions.user.name}. Welcome to your flashcards')
    options = [(option.value, option.label) for option in MenuOption]

    while True:
        try:
            choice = renderer.select('Please, select an option:', options, default=MenuOption.LIST.value)
            result = actions.dispatch(MenuOption(choice))
        except (EOFError, KeyboardInterrupt):
            logger.info(f'Input closed, exiting menu for user {actions.user.id}')
            actions.exit()
            return

        if result is MenuResult.EXIT:
            return
