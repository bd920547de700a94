"""
Flashcard Pydantic Models

Validation for flashcard question/answer pairs. The same rules apply to the
interactive console, the JSON API and CSV import.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from services.exceptions import InputValidationError
from .errors import validation_messages

QUESTION_MIN_LENGTH = 3
ANSWER_MIN_LENGTH = 2
TEXT_MAX_LENGTH = 500


def _length_error(field: str, value: str, minimum: int) -> Optional[str]:
    if len(value) < minimum:
        unit = 'character' if minimum == 1 else 'characters'
        return f'The {field} must be at least {minimum} {unit}.'
    if len(value) > TEXT_MAX_LENGTH:
        return f'The {field} cannot exceed {TEXT_MAX_LENGTH} characters.'
    return None


def question_error(value: str) -> Optional[str]:
    """Message describing why a question is rejected, None if it is fine"""
    return _length_error('question', (value or '').strip(), QUESTION_MIN_LENGTH)


def answer_error(value: str) -> Optional[str]:
    """Message describing why an answer is rejected, None if it is fine"""
    return _length_error('answer', (value or '').strip(), ANSWER_MIN_LENGTH)


class FlashcardInput(BaseModel):
    """
    A question/answer pair submitted by a user.

    Example:
    {
        "question": "What is the capital of France?",
        "answer": "Paris"
    }
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str
    answer: str

    @field_validator('question')
    @classmethod
    def check_question(cls, value: str) -> str:
        message = question_error(value)
        if message:
            raise PydanticCustomError('rule_question_length', message)
        return value

    @field_validator('answer')
    @classmethod
    def check_answer(cls, value: str) -> str:
        message = answer_error(value)
        if message:
            raise PydanticCustomError('rule_answer_length', message)
        return value


def validate_flashcard(question, answer) -> FlashcardInput:
    """
    Validate a question/answer pair.

    Raises:
        InputValidationError: With one message per rejected field
    """
    try:
        return FlashcardInput(question=question, answer=answer)
    except ValidationError as e:
        raise InputValidationError(validation_messages(e))
