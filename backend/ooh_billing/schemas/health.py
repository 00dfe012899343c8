"""
Health check response schemas.
"""

from pydantic import BaseModel
from typing import Dict, Any


class HealthResponse(BaseModel):
    """Service status with uptime as an ISO 8601 duration."""
    status: str
    version: str
    uptime: str
    checks: Dict[str, Any] = {}
