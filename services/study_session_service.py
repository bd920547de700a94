"""Study session management and practice result recording"""
import logging
from typing import List, Optional

from models.flashcard import Flashcard
from models.study_session import StudySession
from repositories import (
    flashcard_repository,
    practice_result_repository,
    study_session_repository,
)
from repositories.unit_of_work import unit_of_work
from services import log_service, statistic_service

logger = logging.getLogger(__name__)

DEFAULT_PRACTICE_LIMIT = 10


def start_session(user_id: int) -> StudySession:
    """
    Start a new study session for a user.

    Args:
        user_id: The ID of the user

    Returns:
        The newly created StudySession
    """
    with unit_of_work():
        study_session = study_session_repository.start(user_id)
        log_service.log_study_session_start(user_id, study_session)
        statistic_service.increment_study_sessions(user_id)

    return study_session


def get_active_session(user_id: int) -> Optional[StudySession]:
    """The user's most recently started session that has not ended yet"""
    return study_session_repository.get_active(user_id)


def get_or_start_session(user_id: int) -> StudySession:
    active_session = get_active_session(user_id)

    if active_session:
        return active_session

    return start_session(user_id)


def get_by_id(session_id: int) -> Optional[StudySession]:
    return study_session_repository.get_by_id(session_id)


def find_for_user(user_id: int, session_id: int) -> Optional[StudySession]:
    return study_session_repository.find_for_user(user_id, session_id)


def end_session(user_id: int, session_id: int) -> bool:
    """
    End one of the user's sessions.

    Returns:
        False when the session does not exist for this user or already ended
    """
    study_session = study_session_repository.find_for_user(user_id, session_id)

    if study_session is None or not study_session.is_active:
        return False

    with unit_of_work():
        study_session_repository.end(study_session)
        log_service.log_study_session_end(user_id, study_session)

    return True


def get_flashcards_for_practice(user_id: int, limit: int = DEFAULT_PRACTICE_LIMIT) -> List[Flashcard]:
    """
    Flashcards to practice next, making sure a session is running.

    Flashcards whose latest answer was wrong come first, then flashcards
    never practiced, then the ones practiced longest ago.
    """
    get_or_start_session(user_id)
    return flashcard_repository.practice_queue(user_id, limit)


def record_practice_result(user_id: int, flashcard_id: int, is_correct: bool) -> bool:
    """
    Record an answer to one of the user's active flashcards.

    The result goes into the active session, which is started when missing.

    Returns:
        False when the flashcard is not an active flashcard of this user
    """
    flashcard = flashcard_repository.find_for_user(user_id, flashcard_id)

    if flashcard is None:
        logger.warning(f'User {user_id} answered unknown flashcard {flashcard_id}')
        return False

    with unit_of_work():
        study_session = get_or_start_session(user_id)
        practice_result_repository.create(user_id, flashcard.id, study_session.id, is_correct)
        log_service.log_flashcard_practice(user_id, flashcard, is_correct)
        if is_correct:
            statistic_service.increment_correct_answers(user_id)
        else:
            statistic_service.increment_incorrect_answers(user_id)

    return True


def reset_practice_progress(user_id: int) -> bool:
    """
    Wipe the user's practice history.

    Ends the running session, deletes every practice result and study
    session of the user and zeroes the practice counters. Flashcards and
    the total_flashcards counter are left alone.
    """
    with unit_of_work():
        active_session = study_session_repository.get_active(user_id)
        if active_session:
            study_session_repository.end(active_session)

        deleted_results = practice_result_repository.delete_for_user(user_id)
        deleted_sessions = study_session_repository.delete_all_for_user(user_id)
        statistic_service.reset_practice_statistics(user_id)
        log_service.log_practice_reset(user_id)

    logger.info(
        f'Reset practice progress for user {user_id}: '
        f'{deleted_results} results, {deleted_sessions} sessions removed'
    )
    return True
