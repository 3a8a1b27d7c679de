from __future__ import annotations
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# INTEGER columns are 32-bit on PostgreSQL
MAX_DB_INT = 2**31 - 1
# Numeric(10, 2) holds at most eight integer digits
MAX_QUANTITY = 1e8

DbId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]
Quantity = Annotated[float, Field(ge=0, lt=MAX_QUANTITY)]


def _fold_email(value: str) -> str:
    return value.strip().lower()


# one spelling per address: stored, looked up and compared lowercased
Email = Annotated[EmailStr, AfterValidator(_fold_email)]
LoginEmail = Annotated[str, AfterValidator(_fold_email)]


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire (`usuario_id` ⇄ `usuarioId`)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    data: T
    message: str | None = None


class ApiError(BaseModel):
    message: str
    error: str | None = None
