"""
Request rate limiting with slowapi, keyed by client address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ooh_billing.core.config import settings


limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

EXPORT_RATE_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
