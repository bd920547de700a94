"""
Practice round service.

A PracticeRound holds the state of one pass over a user's active flashcards:
which cards already have a correct answer, which were only ever answered
wrong and which were never tried. It knows nothing about the console, so the
interactive menu and tests drive it the same way.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List

from models.flashcard import Flashcard
from models.study_session import StudySession
from repositories import flashcard_repository, practice_result_repository
from services import practice_rules, study_session_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PracticeProgress:
    total: int
    correct: int
    incorrect: int
    not_answered: int
    completion_percentage: float


@dataclass(frozen=True)
class PracticeOutcome:
    flashcard: Flashcard
    is_correct: bool
    expected: str


class PracticeRound:
    """
    One practice pass over a user's active flashcards.

    Usage:
        round_ = start_practice(user_id)
        while not round_.is_complete:
            card = round_.pending()[0]
            outcome = round_.answer(card.id, input(card.question))
        round_.finish()
    """

    def __init__(self, user_id: int, flashcards: List[Flashcard],
                 answers: Dict[int, List[bool]], study_session: StudySession):
        self.user_id = user_id
        self.flashcards = flashcards
        self.study_session = study_session
        self._answers = defaultdict(list)
        for flashcard in flashcards:
            self._answers[flashcard.id].extend(answers.get(flashcard.id, []))

    def _answered_correctly(self, flashcard_id: int) -> bool:
        return any(self._answers[flashcard_id])

    def progress(self) -> PracticeProgress:
        total = len(self.flashcards)
        correct = sum(1 for card in self.flashcards if self._answered_correctly(card.id))
        not_answered = sum(1 for card in self.flashcards if not self._answers[card.id])
        incorrect = total - correct - not_answered
        return PracticeProgress(
            total=total,
            correct=correct,
            incorrect=incorrect,
            not_answered=not_answered,
            completion_percentage=practice_rules.percentage(correct, total),
        )

    def pending(self) -> List[Flashcard]:
        """Flashcards still waiting for a correct answer"""
        return [card for card in self.flashcards if not self._answered_correctly(card.id)]

    @property
    def is_complete(self) -> bool:
        return not self.pending()

    def answer(self, flashcard_id: int, given: str) -> PracticeOutcome:
        """
        Check an answer and record the result.

        Args:
            flashcard_id: A flashcard from this round
            given: What the user typed

        Returns:
            PracticeOutcome with the verdict and the expected answer

        Raises:
            ValueError: If the flashcard is not part of this round or is no
                longer an active flashcard of the user
        """
        flashcard = next((card for card in self.flashcards if card.id == flashcard_id), None)
        if flashcard is None:
            raise ValueError(f'Flashcard {flashcard_id} is not part of this practice round')

        is_correct = practice_rules.answers_match(given, flashcard.answer)
        if not study_session_service.record_practice_result(self.user_id, flashcard.id, is_correct):
            raise ValueError(f'Flashcard {flashcard_id} is no longer available for practice')
        # the result lands in a fresh session when ours was ended meanwhile
        self.study_session = study_session_service.get_active_session(self.user_id)

        self._answers[flashcard.id].append(is_correct)
        return PracticeOutcome(flashcard=flashcard, is_correct=is_correct, expected=flashcard.answer)

    def finish(self) -> bool:
        """Close the round's study session, False when it was already closed"""
        ended = study_session_service.end_session(self.user_id, self.study_session.id)
        if ended:
            logger.info(f'Practice round finished for user {self.user_id}: {self.progress()}')
        return ended


def start_practice(user_id: int) -> PracticeRound:
    """Load the user's active flashcards and past results into a new round"""
    study_session = study_session_service.get_or_start_session(user_id)
    flashcards = flashcard_repository.active_for_user(user_id)

    answers = defaultdict(list)
    for result in practice_result_repository.for_user(user_id):
        answers[result.flashcard_id].append(result.is_correct)

    return PracticeRound(user_id, flashcards, answers, study_session)
