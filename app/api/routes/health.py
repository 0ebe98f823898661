"""Liveness plus database reachability; 503 while the database is down."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    connected = check_db_connected(db)
    if not connected:
        logger.warning("Health check: database unreachable")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        version=settings.APP_VERSION,
        database="connected" if connected else "disconnected",
    )
