"""
Journeo Backend — User Model
==============================

What:  ORM model for the `users` table.
Who:   UserService (CRUD), AuthService (login lookup), access policy (identity).

Table Design:
    - email is globally unique (unique index); the service pre-checks it and
      maps a racing IntegrityError onto ConflictError.
    - password_hash holds a bcrypt hash; it is never part of any response model.
    - guides is the inverse side of the guide_users many-to-many.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journeo.database import Base
from journeo.models.enums import Role
from journeo.models.guide import guide_users

if TYPE_CHECKING:
    from journeo.models.guide import Guide


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, unique across all users",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, native_enum=False, length=20),
        nullable=False,
        default=Role.USER,
    )

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Not eagerly loaded: a user's guides are read with an explicit join query
    # (GuideService.list_guides_of_user). This side is only touched by the unit
    # of work and by back_populates bookkeeping, never by attribute access.
    guides: Mapped[List["Guide"]] = relationship(
        secondary=guide_users,
        back_populates="users",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
