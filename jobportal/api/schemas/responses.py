"""Response schemas for API endpoints."""

from typing import Any, Dict, List

from jobportal.models.base import CamelModel
from jobportal.models.application import Application


class MessageResponse(CamelModel):
    message: str


class ApplicationResponse(CamelModel):
    """A lifecycle operation's result: message plus the full application."""
    message: str
    application: Application


class ApplicationListResponse(CamelModel):
    applications: List[Application]
    pagination: Dict[str, Any]
    total: int


class ApplicationStatsResponse(CamelModel):
    """Application counts per status for the caller's scope."""
    stats: Dict[str, int]
    total_applications: int
    recent_applications: List[Application]
