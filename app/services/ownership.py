"""Row-level ownership: standard users only see rows whose user_id is their own."""

from typing import TypeVar

from sqlalchemy.orm import Query, Session

from app.core.errors import NotFoundError
from app.schemas.auth import CurrentUser

T = TypeVar("T")


def scoped(query: Query, model: type, user: CurrentUser) -> Query:
    """Restrict a query to the caller's rows unless the caller is an admin."""
    if user.is_admin():
        return query
    return query.filter(model.user_id == user.id)


def owned_or_404(
    db: Session,
    model: type[T],
    obj_id: int,
    user: CurrentUser,
    message: str = "Not found.",
) -> T:
    """
    Return the row when it exists and the caller owns it (or is an admin).
    Rows owned by someone else raise NotFoundError, same as missing rows.
    """
    obj = db.get(model, obj_id)
    if obj is None or not (user.is_admin() or obj.user_id == user.id):
        raise NotFoundError(message)
    return obj
