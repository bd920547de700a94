"""Exceptions raised by the service layer"""

from typing import List, Optional


class FlashcardAppError(Exception):
    """Base exception class for flashcard application errors."""
    pass


class InputValidationError(FlashcardAppError):
    """Raised when flashcard, registration or practice input is rejected."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__('; '.join(self.messages))


class DuplicateEmailError(FlashcardAppError):
    """Raised when registering an email that already has an account."""
    pass


class InvalidTransitionError(FlashcardAppError):
    """Raised when a flashcard lifecycle transition is not allowed."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f'Cannot move flashcard from {current.value} to {target.value}')


class AuthorizationError(FlashcardAppError):
    """Raised when a policy denies an action on a resource."""

    def __init__(self, ability: str, message: Optional[str] = None):
        self.ability = ability
        super().__init__(message or f'This action is unauthorized: {ability}')


class ImportFileError(FlashcardAppError):
    """Raised when a CSV import cannot proceed at all."""
    pass
