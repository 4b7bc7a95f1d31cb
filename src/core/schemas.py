from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator

from src.core.utils.security import normalize_email

EMAIL_ERROR_MESSAGE = "Email must be a valid email address"


class Base(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, use_enum_values=True, extra="forbid"
    )


class EmailNormalizationMixin(BaseModel):
    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _normalize_email(cls, v: Any) -> str:
        """
        Normalize the address and check its syntax, reporting every failure
        (missing, wrong type, malformed) with the same message.
        """
        if not isinstance(v, str):
            raise ValueError(EMAIL_ERROR_MESSAGE)
        email = normalize_email(v)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(EMAIL_ERROR_MESSAGE) from exc
        return email
