"""
Flashcard service.

Create, edit and move flashcards through their lifecycle:
active -> trashed (soft delete) -> active (restore) or purged (force delete).
Each mutation writes an audit log entry and, for creation, bumps the user's
flashcard counter in the same transaction.
"""
import logging
from typing import Optional

from models.flashcard import Flashcard, FlashcardState, can_transition
from repositories import flashcard_repository
from repositories.unit_of_work import unit_of_work
from services import log_service, statistic_service
from services.exceptions import InvalidTransitionError
from services.input_models import validate_flashcard

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 15


def _check_transition(flashcard: Flashcard, target: FlashcardState) -> None:
    if not can_transition(flashcard.state, target):
        raise InvalidTransitionError(flashcard.state, target)


def get_all_for_user(user_id: int, page: int = 1, per_page: int = DEFAULT_PER_PAGE):
    """Active flashcards, newest first, as a Flask-SQLAlchemy Pagination"""
    return flashcard_repository.paginate_active(user_id, page, per_page)


def get_deleted_for_user(user_id: int, page: int = 1, per_page: int = DEFAULT_PER_PAGE):
    """Trashed flashcards, most recently deleted first"""
    return flashcard_repository.paginate_trashed(user_id, page, per_page)


def find_for_user(user_id: int, flashcard_id: int, with_trashed: bool = False) -> Optional[Flashcard]:
    return flashcard_repository.find_for_user(user_id, flashcard_id, with_trashed=with_trashed)


def create(user_id: int, question: str, answer: str) -> Flashcard:
    """
    Create a flashcard for a user.

    Args:
        user_id: Owner of the new flashcard
        question: Question text, at least 3 characters after trimming
        answer: Answer text, at least 2 characters after trimming

    Returns:
        The committed Flashcard

    Raises:
        InputValidationError: If the question or answer is rejected
    """
    data = validate_flashcard(question, answer)

    with unit_of_work():
        flashcard = flashcard_repository.add(
            Flashcard(user_id=user_id, question=data.question, answer=data.answer)
        )
        log_service.log_flashcard_creation(user_id, flashcard)
        statistic_service.increment_total_flashcards(user_id)

    return flashcard


def update(user_id: int, flashcard_id: int, question: str, answer: str) -> bool:
    """
    Replace the question and answer of an active flashcard.

    Returns:
        False when the user has no such active flashcard

    Raises:
        InputValidationError: If the new question or answer is rejected
    """
    data = validate_flashcard(question, answer)

    flashcard = flashcard_repository.find_for_user(user_id, flashcard_id)
    if flashcard is None:
        logger.warning(f'User {user_id} tried to update missing flashcard {flashcard_id}')
        return False

    with unit_of_work():
        flashcard.question = data.question
        flashcard.answer = data.answer
        log_service.log_flashcard_update(user_id, flashcard)

    return True


def delete(user_id: int, flashcard_id: int) -> bool:
    """Move an active flashcard to the trash bin. False when not found."""
    flashcard = flashcard_repository.find_for_user(user_id, flashcard_id)
    if flashcard is None:
        logger.warning(f'User {user_id} tried to delete missing flashcard {flashcard_id}')
        return False

    _check_transition(flashcard, FlashcardState.TRASHED)
    with unit_of_work():
        flashcard_repository.soft_delete(flashcard)
        log_service.log_flashcard_deletion(user_id, flashcard)

    return True


def restore(user_id: int, flashcard_id: int) -> bool:
    """
    Bring a trashed flashcard back.

    Returns:
        False when the user has no such flashcard

    Raises:
        InvalidTransitionError: If the flashcard is not in the trash bin
    """
    flashcard = flashcard_repository.find_for_user(user_id, flashcard_id, with_trashed=True)
    if flashcard is None:
        return False

    _check_transition(flashcard, FlashcardState.ACTIVE)
    with unit_of_work():
        flashcard_repository.restore(flashcard)
        log_service.log_flashcard_restoration(user_id, flashcard)

    return True


def force_delete(user_id: int, flashcard_id: int) -> bool:
    """Permanently delete a flashcard, active or trashed. False when not found."""
    flashcard = flashcard_repository.find_for_user(user_id, flashcard_id, with_trashed=True)
    if flashcard is None:
        return False

    _check_transition(flashcard, FlashcardState.PURGED)
    question = flashcard.question
    with unit_of_work():
        flashcard_repository.purge(flashcard)
        log_service.log_flashcard_force_delete(user_id, flashcard_id, question)

    return True


def restore_all_for_user(user_id: int) -> int:
    """Restore the whole trash bin, returning how many flashcards came back"""
    with unit_of_work():
        count = flashcard_repository.restore_trashed_for_user(user_id)
        if count:
            log_service.log_all_flashcards_restore(user_id, count)
    return count


def force_delete_all_for_user(user_id: int) -> int:
    """Empty the trash bin, returning how many flashcards were purged"""
    with unit_of_work():
        count = flashcard_repository.purge_trashed_for_user(user_id)
        if count:
            log_service.log_all_flashcards_permanent_delete(user_id, count)
    return count


def list_viewed(user_id: int) -> None:
    with unit_of_work():
        log_service.log_flashcard_list(user_id)


def get_by_id(flashcard_id: int) -> Optional[Flashcard]:
    """Any flashcard by id, whoever owns it and whether or not it is trashed"""
    return flashcard_repository.get_by_id(flashcard_id)
