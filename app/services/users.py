"""Credential store: user lookup, registration, authentication and administration."""

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import AuthenticationError, AuthorizationError, ConflictError, NotFoundError
from app.core.security import hash_password, verify_password
from app.models.user import Role, User
from app.services.validators import normalize_email

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
DUPLICATE_EMAIL = "Email is already registered."


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.name, User.id).all()


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.STANDARD,
) -> User:
    """
    Insert a new user. The unique index on email decides races between
    concurrent registrations; the loser gets ConflictError.
    """
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
        token_version=0,
    )
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError as e:
        logger.info("Registration rejected: email already registered")
        raise ConflictError(DUPLICATE_EMAIL) from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": int(user.role)})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Return the user for valid credentials. Unknown email and wrong password
    raise the same AuthenticationError.
    """
    user = get_by_email(db, email)
    if user is None:
        # Same bcrypt work as a real check so response time does not reveal the email.
        verify_password(password, _dummy_hash())
        logger.info("Login failed", extra={"reason": "unknown_email"})
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"reason": "bad_password", "user_id": user.id})
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info("Login succeeded", extra={"user_id": user.id})
    return user


def update_user(
    db: Session,
    user: User,
    *,
    name: str | None = None,
    email: str | None = None,
    role: Role | None = None,
    password: str | None = None,
) -> User:
    """
    Apply a profile update. A password change revokes every refresh token
    issued before it; a role change reaches the client on its next refresh.
    """
    revoke = False
    if name is not None:
        user.name = name.strip()
    if email is not None:
        user.email = normalize_email(email)
    if role is not None:
        user.role = Role(role)
    if password is not None:
        user.password_hash = hash_password(password)
        user.token_version = (user.token_version or 0) + 1
        revoke = True
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError as e:
        raise ConflictError(DUPLICATE_EMAIL) from e
    db.refresh(user)
    logger.info(
        "User updated",
        extra={"user_id": user.id, "tokens_revoked": revoke},
    )
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> User:
    """Self-service password change; the current password must verify."""
    if not verify_password(current_password, user.password_hash):
        logger.info("Password change rejected", extra={"user_id": user.id})
        raise AuthenticationError(INVALID_CREDENTIALS)
    return update_user(db, user, password=new_password)


def delete_user(db: Session, actor_id: int, user_id: int) -> None:
    """Admin delete. Admins cannot delete themselves or another admin."""
    if actor_id == user_id:
        raise AuthorizationError("You cannot delete your own account.")
    user = get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    if user.role.is_admin():
        raise AuthorizationError("Admin accounts cannot be deleted.")
    try:
        with transaction(db):
            db.delete(user)
    except IntegrityError as e:
        raise ConflictError("User has recipes used in other users' orders.") from e
    logger.info("User deleted", extra={"user_id": user_id, "actor_id": actor_id})
