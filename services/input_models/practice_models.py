"""
Practice Pydantic Models

Body of a practice submission: either a verdict the client already
computed, or the raw answer text to be checked on the server.
"""

from typing import Optional

from pydantic import BaseModel, model_validator
from pydantic_core import PydanticCustomError


class PracticeResultInput(BaseModel):
    """
    Example:
    {"is_correct": true}
    or
    {"answer": " paris "}
    """
    is_correct: Optional[bool] = None
    answer: Optional[str] = None

    @model_validator(mode='after')
    def check_verdict_or_answer(self) -> 'PracticeResultInput':
        if self.is_correct is None and self.answer is None:
            raise PydanticCustomError('rule_practice_body', 'Provide either "is_correct" or "answer".')
        return self
