"""
Journeo Backend — User Schemas
================================

What:  Request and response models for the /users endpoints.
Who:   routes/users.py, GuideResponse (assigned users), UserService.

Roles arrive as plain strings and are resolved by the service through
`parse_choice`, so an unknown role is a 400 Bad Request with the list of
allowed values rather than a generic validation message.

The password hash is never part of any response model.
"""

from typing import Optional

from pydantic import Field, field_validator

from journeo.models.enums import Role
from journeo.schemas.common import CamelModel, strip_optional, strip_required


class UserCreateRequest(CamelModel):
    email: str = Field(max_length=255, examples=["newuser@example.com"])
    password: str = Field(examples=["password123"])
    role: Optional[str] = Field(
        default=None,
        description="USER (default) or ADMIN; ADMIN requires an ADMIN caller",
        examples=["USER"],
    )
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def email_not_blank(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("role", "first_name", "last_name")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class UserUpdateRequest(CamelModel):
    """Partial update: every field is optional and blank means 'keep current value'."""
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None
    role: Optional[str] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("email", "role", "first_name", "last_name")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)

    @field_validator("password")
    @classmethod
    def blank_password_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v


class RoleChangeRequest(CamelModel):
    role: str = Field(examples=["ADMIN"])


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
