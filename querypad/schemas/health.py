"""Health endpoint payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: str
    backend: Literal["sql", "mongo"] = Field(description="Value of STORE_BACKEND")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether the store answered a ping"
    )
