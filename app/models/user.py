"""ORM model for application users (credential store, auth and RBAC)."""

import enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.types import TypeDecorator

from app.models.base import Base, TimestampMixin


class Role(enum.IntEnum):
    """Authorization tier; stored and serialized as 0/1."""

    STANDARD = 0
    ADMIN = 1

    def is_admin(self) -> bool:
        return self is Role.ADMIN


class RoleType(TypeDecorator):
    """Persist Role as a plain integer column."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(Role(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Role(value)


class User(TimestampMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored trimmed and lower-cased; the unique index makes it the
    case-insensitive login identifier. token_version is embedded in refresh
    tokens and bumped when the password changes, which invalidates
    every refresh token issued before.
    """

    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(RoleType(), nullable=False, default=Role.STANDARD)
    token_version = Column(Integer, nullable=False, default=0)
