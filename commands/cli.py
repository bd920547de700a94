"""
`flask flashcard ...` commands.

Usage:
    flask flashcard register John_Doe john@example.com 'Secret123!'
    flask flashcard interactive john@example.com 'Secret123!' --practice
    flask flashcard import --file cards.csv --email john@example.com
    flask flashcard logs 1 --limit 20
    flask flashcard stats 1 --recount
    flask flashcard reset 1 --yes
    flask flashcard create-test
    flask flashcard init-db
"""
import logging
import sys

import click
from flask.cli import AppGroup

from auth.utils import authenticate, get_user_by_email, get_user_by_id, register_user
from commands.actions import FlashcardActions, MenuOption, register_interactively, run_menu
from commands.console import ConsoleRenderer
from models import db
from services import flashcard_service, import_service, log_service, statistic_service, study_session_service
from services.exceptions import DuplicateEmailError, ImportFileError, InputValidationError
from services.input_models.user_models import email_error

logger = logging.getLogger(__name__)

flashcard_cli = AppGroup('flashcard', help='Flashcard study commands.')

LOGIN_ATTEMPTS = 3

DIRECT_ACTIONS = [
    ('list_', MenuOption.LIST),
    ('create', MenuOption.CREATE),
    ('delete', MenuOption.DELETE),
    ('practice', MenuOption.PRACTICE),
    ('statistics', MenuOption.STATISTICS),
    ('reset', MenuOption.RESET),
    ('logs', MenuOption.LOGS),
    ('trash_bin', MenuOption.TRASH_BIN),
]

SAMPLE_FLASHCARDS = [
    ('What is Flask?', 'Flask is a lightweight WSGI web application framework for Python.'),
    ('What is SQLAlchemy?', 'SQLAlchemy is the Python SQL toolkit and object relational mapper.'),
    ('What is pytest?', 'pytest is a framework that makes it easy to write small, readable tests.'),
    ('What is pip?', 'pip is the package installer for Python.'),
    ('What is a virtual environment?', 'An isolated Python installation with its own packages.'),
]


def _user_or_exit(renderer, user_id):
    user = get_user_by_id(user_id)
    if user is None:
        renderer.error(f'User not found with ID: {user_id}')
        sys.exit(1)
    return user


def _login(renderer, email, password):
    """Authenticate from arguments, prompting for whatever is missing"""
    if not email:
        email = renderer.ask('Enter your user email', validate=email_error)

    if get_user_by_email(email) is None:
        renderer.error('The email is not registered. Please, register first.')
        if renderer.confirm('Would you like to register now?', default=True):
            return register_interactively(renderer, email=email)
        return None

    if password:
        return authenticate(email, password)

    for _ in range(LOGIN_ATTEMPTS):
        user = authenticate(email, renderer.ask_secret('Enter your password'))
        if user is not None:
            return user
        renderer.error('Invalid password. Please try again.')
    return None


def _run_interactive(renderer, user, option=None):
    actions = FlashcardActions(user, renderer)
    if option is not None:
        try:
            actions.dispatch(option)
        except (EOFError, KeyboardInterrupt):
            renderer.note('Input closed.')
        return
    run_menu(actions)


@flashcard_cli.command('register')
@click.argument('name', required=False)
@click.argument('email', required=False)
@click.argument('password', required=False)
@click.option('--skip-interactive', is_flag=True, help='Do not open the menu after registering.')
def register_command(name, email, password, skip_interactive):
    """Register a new user. Underscores in NAME become spaces."""
    renderer = ConsoleRenderer()

    if name and email and password:
        try:
            user = register_user(name, email, password)
        except InputValidationError as e:
            for message in e.messages:
                renderer.error(message)
            sys.exit(1)
        except DuplicateEmailError as e:
            renderer.error(str(e))
            sys.exit(1)
        renderer.success(f'User {user.name} registered successfully with email {user.email}.')
    else:
        user = register_interactively(renderer, name, email, password)
        if user is None:
            sys.exit(1)

    if not skip_interactive:
        _run_interactive(renderer, user)


@flashcard_cli.command('interactive')
@click.argument('email', required=False)
@click.argument('password', required=False)
@click.option('--list', 'list_', is_flag=True, help='List all flashcards.')
@click.option('--create', is_flag=True, help='Create a new flashcard.')
@click.option('--delete', is_flag=True, help='Delete a flashcard.')
@click.option('--practice', is_flag=True, help='Practice study mode.')
@click.option('--statistics', is_flag=True, help='Show statistics.')
@click.option('--reset', is_flag=True, help='Reset the practice data.')
@click.option('--register', is_flag=True, help='Register a new user.')
@click.option('--logs', is_flag=True, help='View user activity logs.')
@click.option('--trash-bin', is_flag=True, help='Access the trash bin.')
def interactive_command(email, password, register, **flags):
    """Log in and open the flashcard menu, or run a single action."""
    renderer = ConsoleRenderer()

    if register:
        if register_interactively(renderer) is None:
            sys.exit(1)
        return

    try:
        user = _login(renderer, email, password)
    except (EOFError, KeyboardInterrupt):
        user = None

    if user is None:
        renderer.error('Could not validate or find user. Exiting.')
        sys.exit(1)

    option = next((menu_option for flag, menu_option in DIRECT_ACTIONS if flags.get(flag)), None)
    _run_interactive(renderer, user, option)


@flashcard_cli.command('import')
@click.option('--file', 'file_path', required=True, help='CSV file with question and answer columns.')
@click.option('--email', required=True, help='Email of the user receiving the flashcards.')
def import_command(file_path, email):
    """Import flashcards from a CSV file."""
    renderer = ConsoleRenderer()

    user = get_user_by_email(email)
    if user is None:
        renderer.error(f'User not found with email: {email}')
        sys.exit(1)

    try:
        report = import_service.import_flashcards_from_file(user.id, file_path)
    except ImportFileError as e:
        renderer.error(str(e))
        sys.exit(1)

    for message in report.skipped:
        renderer.warning(message)
    renderer.success(f'Successfully imported {report.imported} flashcards for user ID {user.id}.')


@flashcard_cli.command('logs')
@click.argument('user_id', type=int)
@click.option('--limit', default=50, show_default=True, type=click.IntRange(min=1))
def logs_command(user_id, limit):
    """Show a user's activity log, newest first."""
    renderer = ConsoleRenderer()
    user = _user_or_exit(renderer, user_id)

    entries = log_service.get_logs_for_user(user.id, limit)
    if not entries:
        renderer.warning('No activity logs found')
        return

    for entry in entries:
        renderer.info(f"[{entry['level']}] {entry['action']} - {entry['description']}")


@flashcard_cli.command('stats')
@click.argument('user_id', type=int)
@click.option('--recount', is_flag=True, help='Rebuild the counters from stored rows first.')
def stats_command(user_id, recount):
    """Show a user's statistics."""
    renderer = ConsoleRenderer()
    user = _user_or_exit(renderer, user_id)

    if recount:
        statistic_service.recount_for_user(user.id)
        renderer.note('Counters rebuilt from stored flashcards, sessions and results.')

    statistics = statistic_service.get_statistics_for_user(user.id)
    renderer.table(['Statistic', 'Value'], [
        ('Total Flashcards', statistics['flashcards_created']),
        ('Study Sessions', statistics['study_sessions']),
        ('Correct Answers', statistics['correct_answers']),
        ('Incorrect Answers', statistics['incorrect_answers']),
        ('Success Rate', f"{statistics['success_rate']}%"),
        ('Completion', f"{statistics['completion_percentage']}%"),
        ('Average Study Session Duration',
         f'{statistic_service.get_average_study_session_duration(user.id)} minutes'),
        ('Total Study Time', f'{statistic_service.get_total_study_time(user.id)} minutes'),
    ], title=f'Statistics for {user.name}')


@flashcard_cli.command('reset')
@click.argument('user_id', type=int)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation.')
def reset_command(user_id, yes):
    """Delete a user's practice results and study sessions."""
    renderer = ConsoleRenderer()
    user = _user_or_exit(renderer, user_id)

    if not yes and not renderer.confirm(
            f'Reset all practice data for {user.name}? This cannot be undone.', default=False):
        renderer.info('Reset cancelled.')
        return

    study_session_service.reset_practice_progress(user.id)
    renderer.success(f'Practice data for user ID {user.id} has been reset.')


@flashcard_cli.command('create-test')
@click.argument('email', default='test@example.com')
@click.argument('password', default='Secret123!')
def create_test_command(email, password):
    """Create a user with sample flashcards and some practice history."""
    renderer = ConsoleRenderer()

    user = get_user_by_email(email)
    if user is None:
        try:
            user = register_user('Test User', email, password)
        except InputValidationError as e:
            for message in e.messages:
                renderer.error(message)
            sys.exit(1)
        renderer.info(f'User created with email: {user.email}')
    else:
        renderer.info(f'Using existing user: {user.name}')

    existing = {card.question: card for card in flashcard_service.get_all_for_user(user.id, per_page=100).items}
    flashcards = []
    for question, answer in SAMPLE_FLASHCARDS:
        if question in existing:
            renderer.info(f'Flashcard already exists: {question}')
            flashcards.append(existing[question])
            continue
        flashcards.append(flashcard_service.create(user.id, question, answer))
        renderer.info(f'Created flashcard: {question}')

    renderer.info('Simulating practice session...')
    study_session = study_session_service.start_session(user.id)
    for index, flashcard in enumerate(flashcards):
        # two out of three answers correct
        is_correct = index % 3 != 0
        study_session_service.record_practice_result(user.id, flashcard.id, is_correct)
        renderer.info(f"Recorded {'correct' if is_correct else 'incorrect'} answer for: {flashcard.question}")
    study_session_service.end_session(user.id, study_session.id)

    statistics = statistic_service.get_statistics_for_user(user.id)
    renderer.success(
        f"Done. {statistics['flashcards_created']} flashcards, "
        f"{statistics['correct_answers']} correct and {statistics['incorrect_answers']} incorrect answers."
    )


@flashcard_cli.command('init-db')
def init_db_command():
    """Create all database tables."""
    db.create_all()
    logger.info('Database tables created')
    ConsoleRenderer().success('Database tables created.')
