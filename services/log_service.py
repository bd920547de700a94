"""
Audit log service.

Every user-visible action leaves one row in the ``logs`` table. Each row is
also mirrored to Python logging at the matching level, so the audit trail
shows up in the application log as well.
"""
import logging
from typing import Dict, List, Optional

from models.flashcard import Flashcard
from models.log import LEVEL_DEBUG, LEVEL_ERROR, LEVEL_INFO, LEVEL_WARNING, VALID_LEVELS, Log
from models.study_session import StudySession
from models.user import User
from repositories import log_repository, user_repository

logger = logging.getLogger(__name__)

_PYTHON_LEVELS = {
    LEVEL_DEBUG: logging.DEBUG,
    LEVEL_INFO: logging.INFO,
    LEVEL_WARNING: logging.WARNING,
    LEVEL_ERROR: logging.ERROR,
}


def create_entry(user_id: int, action: str, level: str, description: str,
                 details: Optional[dict] = None) -> Log:
    """
    Append an audit log entry.

    Args:
        user_id: The user the entry belongs to
        action: Machine readable event name, e.g. "created_flashcard"
        level: One of debug, info, warning, error
        description: Human readable summary
        details: Optional JSON payload

    Returns:
        The flushed (not yet committed) Log row

    Raises:
        ValueError: If level is not a known log level
    """
    if level not in VALID_LEVELS:
        raise ValueError(f'Invalid log level: {level}')

    entry = log_repository.create(user_id, action, level, description, details)
    logger.log(_PYTHON_LEVELS[level], f'[user {user_id}] {action}: {description}')
    return entry


def _user_name(user_id: int) -> str:
    user = user_repository.get_by_id(user_id)
    return user.name if user else f'#{user_id}'


def log_user_registered(user: User) -> Log:
    return create_entry(user.id, 'user_registered', LEVEL_INFO,
                        f'User {user.name} registered with email {user.email}')


def log_user_login(user_id: int) -> Log:
    return create_entry(user_id, 'user_login', LEVEL_INFO, f'User {_user_name(user_id)} logged in')


def log_user_exit(user_id: int) -> Log:
    return create_entry(user_id, 'user_exit', LEVEL_INFO,
                        f'User {_user_name(user_id)} exited the application')


def log_flashcard_creation(user_id: int, flashcard: Flashcard) -> Log:
    return create_entry(
        user_id, 'created_flashcard', LEVEL_INFO,
        f'Created flashcard ID: {flashcard.id}, Question: {flashcard.question}',
        {'flashcard_id': flashcard.id}
    )


def log_flashcard_update(user_id: int, flashcard: Flashcard) -> Log:
    return create_entry(
        user_id, 'updated_flashcard', LEVEL_INFO,
        f'Updated flashcard ID: {flashcard.id}, Question: {flashcard.question}',
        {'flashcard_id': flashcard.id}
    )


def log_flashcard_deletion(user_id: int, flashcard: Flashcard) -> Log:
    return create_entry(
        user_id, 'deleted_flashcard', LEVEL_WARNING,
        f'Deleted flashcard ID: {flashcard.id}, Question: {flashcard.question}',
        {'flashcard_id': flashcard.id}
    )


def log_flashcard_list(user_id: int) -> Log:
    return create_entry(user_id, 'viewed_flashcard_list', LEVEL_DEBUG, 'User viewed flashcard list')


def log_flashcard_restoration(user_id: int, flashcard: Flashcard) -> Log:
    return create_entry(
        user_id, 'restored_flashcard', LEVEL_INFO,
        f'Restored flashcard ID: {flashcard.id}, Question: {flashcard.question}',
        {'flashcard_id': flashcard.id}
    )


def log_flashcard_force_delete(user_id: int, flashcard_id: int, question: str) -> Log:
    return create_entry(
        user_id, 'force_deleted_flashcard', LEVEL_WARNING,
        f'Permanently deleted flashcard ID: {flashcard_id}, Question: {question}',
        {'flashcard_id': flashcard_id}
    )


def log_flashcard_practice(user_id: int, flashcard: Flashcard, is_correct: bool) -> Log:
    if is_correct:
        action, level, result = 'flashcard_answered_correctly', LEVEL_INFO, 'correct'
    else:
        action, level, result = 'flashcard_answered_incorrectly', LEVEL_WARNING, 'incorrect'
    return create_entry(
        user_id, action, level,
        f'Answered flashcard ID: {flashcard.id}, Result: {result.capitalize()}',
        {'flashcard_id': flashcard.id, 'result': result}
    )


def log_study_session_start(user_id: int, study_session: StudySession) -> Log:
    return create_entry(
        user_id, 'started_study_session', LEVEL_INFO,
        f'Started study session ID: {study_session.id}',
        {'session_id': study_session.id}
    )


def log_study_session_end(user_id: int, study_session: StudySession) -> Log:
    duration_seconds = None
    if study_session.started_at and study_session.ended_at:
        duration_seconds = int((study_session.ended_at - study_session.started_at).total_seconds())
    return create_entry(
        user_id, 'ended_study_session', LEVEL_INFO,
        f'Ended study session ID: {study_session.id}',
        {'session_id': study_session.id, 'duration_seconds': duration_seconds}
    )


def log_statistics_view(user_id: int) -> Log:
    return create_entry(user_id, 'statistics_viewed', LEVEL_DEBUG, 'User viewed statistics')


def log_practice_reset(user_id: int) -> Log:
    return create_entry(user_id, 'practice_reset', LEVEL_WARNING, 'Reset practice progress')


def log_all_flashcards_restore(user_id: int, count: int) -> Log:
    return create_entry(user_id, 'restored_all_flashcards', LEVEL_INFO,
                        'Restored all deleted flashcards', {'count': count})


def log_all_flashcards_permanent_delete(user_id: int, count: int) -> Log:
    return create_entry(user_id, 'permanently_deleted_all_flashcards', LEVEL_WARNING,
                        'Permanently deleted all flashcards', {'count': count})


def log_flashcard_import(user_id: int, import_count: int) -> Log:
    return create_entry(
        user_id, 'imported_flashcards', LEVEL_INFO,
        f'Imported {import_count} flashcards from file',
        {'import_count': import_count}
    )


def get_logs_for_user(user_id: int, limit: int = 50) -> List[Dict]:
    """The user's most recent log entries, newest first, as dictionaries"""
    return [entry.to_dict() for entry in log_repository.latest_for_user(user_id, limit)]


def get_latest_activity_for_user(user_id: int, limit: int = 10) -> List[Dict]:
    return get_logs_for_user(user_id, limit)
