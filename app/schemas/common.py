"""
app/schemas/common.py

Purpose: Shared request schema building blocks

- ObjectIdStr / EmailStr annotated string types
- RequestModel base (enum values stored as plain strings)
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel

from utils.validation_utils import is_valid_email, is_valid_object_id, normalize_email


def _check_object_id(value: str) -> str:
    if not is_valid_object_id(value):
        raise ValueError("must be a valid id")
    return value


def _check_email(value: str) -> str:
    if not is_valid_email(value):
        raise ValueError("must be a valid email address")
    return normalize_email(value)


ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]
EmailStr = Annotated[str, AfterValidator(_check_email)]


class RequestModel(BaseModel):
    """Base for request bodies."""

    class Config:
        use_enum_values = True
        str_strip_whitespace = True
