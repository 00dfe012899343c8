"""
Health service.
Provides health check functionality.
"""

import time
from datetime import date

from ooh_billing.core.config import settings
from ooh_billing.schemas.health import HealthResponse
from ooh_billing.services.base_service import BaseService
from ooh_billing.utils.rent_calculator import compute_rent


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self) -> HealthResponse:
        """
        Get service health status.

        Returns:
            HealthResponse with status, version, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        checks = {}

        # Known answer: 9000/month over 10 days is 3000.00
        try:
            result = compute_rent(9000, date(2024, 1, 1), date(2024, 1, 10))
            checks["pricing"] = "ok" if str(result.rent_amount) == "3000.00" else "error: unexpected rent"
        except Exception as e:
            checks["pricing"] = f"error: {str(e)}"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )
