"""
Input Pydantic Models

Validation models shared by the console commands, the JSON API and CSV import:
- Flashcard models (FlashcardInput)
- User models (RegistrationInput, CredentialsInput)
- Practice models (PracticeResultInput)
"""

from .flashcard_models import FlashcardInput, validate_flashcard
from .user_models import RegistrationInput, CredentialsInput
from .practice_models import PracticeResultInput
from .errors import validation_messages

__all__ = [
    'FlashcardInput',
    'validate_flashcard',
    'RegistrationInput',
    'CredentialsInput',
    'PracticeResultInput',
    'validation_messages'
]
