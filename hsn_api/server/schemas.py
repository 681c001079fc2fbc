"""
API Schemas.

This module contains the shared Pydantic building blocks used by every
project's request and response models: the camelCase base schema, the
response envelope and the reusable field validators.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_core import PydanticCustomError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Error types produced by the validators below. The validation exception
# handler turns them into the public error messages.
BLANK_FIELD_ERROR = "blank_field"
INVALID_EMAIL_ERROR = "invalid_email"

DataT = TypeVar("DataT")


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """Shared base for all API payload models.

    - Enables populate_by_name for using either snake_case or camelCase
    - Uses a snake->camel alias generator for JSON interop
    - Reads attributes from ORM entities
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
        alias_generator=_to_camel,
    )


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope of every API response."""

    success: bool = Field(description="Whether the request succeeded")
    message: str = Field(description="Human readable outcome")
    data: Optional[DataT] = Field(default=None, description="Response payload")


def _require_text(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError(BLANK_FIELD_ERROR, "Field is required")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError(INVALID_EMAIL_ERROR, "Invalid email format")
    return value


RequiredText = Annotated[str, BeforeValidator(_require_text)]
"""A string that must be present and not blank."""

EmailText = Annotated[str, BeforeValidator(_require_text), AfterValidator(_check_email)]
"""A required string shaped like an email address."""

OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
"""An optional string where blank values count as absent."""
