"""Pure practice and statistics calculations, free of any database access"""

from datetime import datetime
from typing import Iterable, Optional


def normalize_answer(value: Optional[str]) -> str:
    """Trim surrounding whitespace and case-fold an answer for comparison"""
    if value is None:
        return ''
    return value.strip().casefold()


def answers_match(given: Optional[str], expected: Optional[str]) -> bool:
    """
    Compare a typed answer against the flashcard answer.

    The comparison ignores case and surrounding whitespace, so
    "Paris", " paris " and "PARIS" all match "Paris".

    Args:
        given: What the user typed
        expected: The flashcard's stored answer

    Returns:
        True when both normalize to the same non-empty text
    """
    normalized_given = normalize_answer(given)
    if not normalized_given:
        return False
    return normalized_given == normalize_answer(expected)


def percentage(part: int, whole: int, places: int = 2) -> float:
    """part / whole * 100 rounded, 0.0 when whole is zero"""
    if not whole:
        return 0.0
    return round(part / whole * 100, places)


def success_rate(correct: int, incorrect: int) -> float:
    """
    Share of correct answers as a percentage.

    Examples:
        >>> success_rate(0, 0)
        0.0
        >>> success_rate(4, 0)
        100.0
        >>> success_rate(5, 2)
        71.43
    """
    return percentage(correct, correct + incorrect)


def completion_percentage(total_flashcards: int, completed: int) -> float:
    """Completed flashcards over total, capped at 100"""
    return min(percentage(completed, total_flashcards), 100.0)


def session_duration_minutes(started_at: datetime, ended_at: datetime) -> int:
    """Whole minutes elapsed between two timestamps (10:00:00 -> 10:30:00 is 30)"""
    seconds = (ended_at - started_at).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def total_minutes(durations: Iterable[int]) -> float:
    return float(sum(durations))


def average_minutes(durations: Iterable[int]) -> float:
    durations = list(durations)
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 2)
