"""Login request/response models for POST /auth/login."""

from typing import Optional

from pydantic import Field, field_validator

from journeo.models.enums import Role
from journeo.schemas.common import CamelModel, strip_required


class LoginRequest(CamelModel):
    email: str = Field(max_length=255, description="Account email", examples=["admin@hws.com"])
    password: str = Field(description="Plaintext password", examples=["admin123"])

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        # Checked for blankness only; the password itself is never trimmed
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class LoginResponse(CamelModel):
    token: str = Field(description="Signed bearer token (JWT)")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
