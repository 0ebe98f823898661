"""Client CRUD, scoped to the caller's own rows (admins see all)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, patch_fields
from app.core.database import get_db, transaction
from app.models import Client
from app.schemas.auth import CurrentUser
from app.schemas.client import ClientFields, ClientOut, ClientUpdate
from app.services.ownership import owned_or_404, scoped

router = APIRouter()

ClientId = Annotated[int, Path(gt=0, description="Client id")]
NOT_FOUND = "Client not found."


@router.get("", response_model=list[ClientOut])
def list_clients(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[Client]:
    query = scoped(db.query(Client), Client, user)
    return query.order_by(Client.name, Client.id).all()


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: ClientId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Client:
    return owned_or_404(db, Client, client_id, user, NOT_FOUND)


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Client:
    client = Client(user_id=user.id, **body.model_dump())
    with transaction(db):
        db.add(client)
    db.refresh(client)
    return client


@router.put("/{client_id}", response_model=ClientOut)
def replace_client(
    client_id: ClientId,
    body: ClientFields,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Client:
    client = owned_or_404(db, Client, client_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in body.model_dump().items():
            setattr(client, key, value)
    db.refresh(client)
    return client


@router.patch("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: ClientId,
    body: ClientUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Client:
    data = patch_fields(body, nullable=frozenset({"address"}))
    client = owned_or_404(db, Client, client_id, user, NOT_FOUND)
    with transaction(db):
        for key, value in data.items():
            setattr(client, key, value)
    db.refresh(client)
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_client(
    client_id: ClientId,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a client together with its orders."""
    client = owned_or_404(db, Client, client_id, user, NOT_FOUND)
    with transaction(db):
        db.delete(client)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
