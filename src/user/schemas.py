from datetime import datetime
from typing import Any

from pydantic import ConfigDict, EmailStr, Field, field_validator

from src.core.schemas import Base, EmailNormalizationMixin

NAME_ERROR_MESSAGE = "Name must be a string and cannot be empty"
DISABLED_ERROR_MESSAGE = "Disabled must be a boolean"


def _validate_name(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(NAME_ERROR_MESSAGE)
    return value


class CreateUserModel(EmailNormalizationMixin, Base):
    # None defaults send missing fields through the validators below.
    name: str = Field(None, max_length=255, validate_default=True)  # type: ignore[assignment]
    email: EmailStr = Field(None, validate_default=True)  # type: ignore[assignment]

    model_config = ConfigDict(json_schema_extra={"required": ["name", "email"]})

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any) -> str:
        return _validate_name(value)


class UpdateUserModel(Base):
    """Partial update; only the fields present in the request body are applied."""

    name: str | None = Field(None, max_length=255)
    disabled: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value: Any) -> str:
        return _validate_name(value)

    @field_validator("disabled", mode="before")
    @classmethod
    def validate_disabled(cls, value: Any) -> Any:
        if value is None:
            raise ValueError(DISABLED_ERROR_MESSAGE)
        return value


class UserViewModel(Base):
    id: int
    name: str
    email: EmailStr
    disabled: bool
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(None, serialization_alias="updatedAt")
