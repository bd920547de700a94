"""Per-user statistics: counters, success rate and study time"""
import logging
from typing import Dict

from models.statistic import Statistic
from repositories import (
    flashcard_repository,
    practice_result_repository,
    statistic_repository,
    study_session_repository,
)
from repositories.unit_of_work import unit_of_work
from services import log_service, practice_rules

logger = logging.getLogger(__name__)


def get_statistics_for_user(user_id: int) -> Dict:
    """
    Summary of a user's activity.

    Creates an empty statistics row the first time it is asked for.

    Returns:
        Dictionary with:
        - flashcards_created: Flashcards ever created (trashed ones included)
        - study_sessions: Study sessions ever started
        - correct_answers / incorrect_answers: Recorded practice results
        - success_rate: Correct answers as a percentage of all answers
        - completion_percentage: Active flashcards answered correctly at least once
    """
    with unit_of_work():
        statistic = statistic_repository.get_or_create_for_user(user_id)

    active_flashcards = flashcard_repository.count_for_user(user_id)
    answered_correctly = practice_result_repository.count_correctly_answered_flashcards(user_id)

    return {
        'flashcards_created': statistic.total_flashcards,
        'study_sessions': statistic.total_study_sessions,
        'correct_answers': statistic.total_correct_answers,
        'incorrect_answers': statistic.total_incorrect_answers,
        'success_rate': practice_rules.success_rate(
            statistic.total_correct_answers, statistic.total_incorrect_answers
        ),
        'completion_percentage': practice_rules.completion_percentage(
            active_flashcards, answered_correctly
        ),
    }


def get_practice_success_rate(user_id: int) -> float:
    statistic = statistic_repository.get_for_user(user_id)
    if statistic is None:
        return 0.0
    return practice_rules.success_rate(statistic.total_correct_answers, statistic.total_incorrect_answers)


def _ended_session_minutes(user_id: int):
    return [
        practice_rules.session_duration_minutes(s.started_at, s.ended_at)
        for s in study_session_repository.ended_for_user(user_id)
    ]


def get_average_study_session_duration(user_id: int) -> float:
    """Average length of the user's ended sessions in minutes"""
    return practice_rules.average_minutes(_ended_session_minutes(user_id))


def get_total_study_time(user_id: int) -> float:
    """Total length of the user's ended sessions in minutes"""
    return practice_rules.total_minutes(_ended_session_minutes(user_id))


# Increments flush inside the caller's unit of work so that the counter moves
# together with the action it counts.

def increment_total_flashcards(user_id: int) -> Statistic:
    return statistic_repository.increment(user_id, 'total_flashcards')


def increment_study_sessions(user_id: int) -> Statistic:
    return statistic_repository.increment(user_id, 'total_study_sessions')


def increment_correct_answers(user_id: int) -> Statistic:
    return statistic_repository.increment(user_id, 'total_correct_answers')


def increment_incorrect_answers(user_id: int) -> Statistic:
    return statistic_repository.increment(user_id, 'total_incorrect_answers')


def reset_practice_statistics(user_id: int) -> Statistic:
    """Zero the practice counters, keeping total_flashcards"""
    return statistic_repository.set_counters(
        user_id,
        total_study_sessions=0,
        total_correct_answers=0,
        total_incorrect_answers=0,
    )


def recount_for_user(user_id: int) -> Statistic:
    """
    Rebuild every counter from the rows that actually exist.

    Flashcards are counted including the trash bin, since total_flashcards
    counts cards created rather than cards currently active.
    """
    with unit_of_work():
        statistic = statistic_repository.set_counters(
            user_id,
            total_flashcards=flashcard_repository.count_for_user(user_id, with_trashed=True),
            total_study_sessions=study_session_repository.count_for_user(user_id),
            total_correct_answers=practice_result_repository.count_for_user(user_id, True),
            total_incorrect_answers=practice_result_repository.count_for_user(user_id, False),
        )
    logger.info(f'Recounted statistics for user {user_id}: {statistic!r}')
    return statistic


def statistics_viewed(user_id: int) -> None:
    with unit_of_work():
        log_service.log_statistics_view(user_id)
