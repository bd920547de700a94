"""Helpers turning pydantic validation errors into user-facing messages"""

from typing import List

from pydantic import ValidationError


def validation_messages(error: ValidationError) -> List[str]:
    """
    Flatten a pydantic ValidationError into plain messages.

    Custom errors raised by the field validators already carry a full
    sentence; built-in errors (missing field, wrong type) are prefixed
    with the field name so the user knows what to fix.
    """
    messages = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item.get('loc', ()))
        if item.get('type', '').startswith('rule_') or not location:
            messages.append(item['msg'])
        else:
            messages.append(f"{location}: {item['msg']}")
    return messages
