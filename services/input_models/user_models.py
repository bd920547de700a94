"""
User Pydantic Models

Validation for registration and login input.
"""

import re
from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from models.user import EMAIL_PATTERN

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 250
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 250


def name_error(value: str) -> Optional[str]:
    value = (value or '').strip()
    if not value:
        return 'The username cannot be empty.'
    if len(value) < NAME_MIN_LENGTH:
        return f'The username must be at least {NAME_MIN_LENGTH} characters.'
    if len(value) > NAME_MAX_LENGTH:
        return f'The username cannot exceed {NAME_MAX_LENGTH} characters.'
    return None


def email_error(value: str) -> Optional[str]:
    value = (value or '').strip()
    if not value:
        return 'The email cannot be empty.'
    if len(value) > EMAIL_MAX_LENGTH or not re.match(EMAIL_PATTERN, value):
        return 'The email format is invalid.'
    return None


def password_error(value: str) -> Optional[str]:
    value = value or ''
    if re.search(r'\s', value):
        return 'Password must not contain spaces.'
    if len(value) < PASSWORD_MIN_LENGTH:
        return f'Password must be at least {PASSWORD_MIN_LENGTH} characters long.'
    if len(value) > PASSWORD_MAX_LENGTH:
        return f'Password cannot exceed {PASSWORD_MAX_LENGTH} characters.'
    if not re.search(r'[A-Z]', value):
        return 'Password must contain at least one uppercase letter.'
    if not re.search(r'[a-z]', value):
        return 'Password must contain at least one lowercase letter.'
    if not re.search(r'\d', value):
        return 'Password must contain at least one number.'
    if not re.search(r'[^A-Za-z0-9]', value):
        return 'Password must contain at least one special character.'
    return None


class RegistrationInput(BaseModel):
    """
    New account details.

    Underscores in the name become spaces, so "John_Doe" registers as
    "John Doe" (handy when the name is passed as a single CLI argument).
    The password is checked exactly as typed.
    """

    name: str
    email: str
    password: str

    @field_validator('name')
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.replace('_', ' ').strip()
        message = name_error(value)
        if message:
            raise PydanticCustomError('rule_name', message)
        return value

    @field_validator('email')
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip()
        message = email_error(value)
        if message:
            raise PydanticCustomError('rule_email', message)
        return value.lower()

    @field_validator('password')
    @classmethod
    def check_password(cls, value: str) -> str:
        message = password_error(value)
        if message:
            raise PydanticCustomError('rule_password', message)
        return value


class CredentialsInput(BaseModel):
    """Email and password pair used to log in"""

    email: str
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()
