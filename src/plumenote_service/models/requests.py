"""Request and response models shared by API endpoints."""

from typing import Optional
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    version: str
    database_connected: bool


class ProblemDetail(BaseModel):
    """RFC 7807 problem details body returned for errors."""
    type: str
    title: str
    status: int
    detail: Optional[str] = None
