"""Health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = Field(description="ok when every dependency answers")
    environment: Literal["dev", "prod"]
    version: str
    database: Literal["connected", "disconnected"]
