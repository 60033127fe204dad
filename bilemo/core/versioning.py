"""
API version negotiation.

Clients ask for a payload version through a parameter of the Accept header:

    Accept: application/json; version=2.0

Without that parameter the configured default applies.
"""
import logging
from typing import Optional

from fastapi import Request

from bilemo.core.config import settings

logger = logging.getLogger(__name__)


class VersioningService:
    def __init__(self, default_version: float):
        self.default_version = default_version

    def parse(self, accept: Optional[str]) -> float:
        if not accept:
            return self.default_version

        for part in accept.split(";"):
            name, sep, value = part.partition("=")
            if sep and name.strip().lower() == "version":
                try:
                    return float(value.strip().strip('"'))
                except ValueError:
                    logger.warning("Ignoring unparsable API version %r", value)
                    return self.default_version
        return self.default_version

    def get_version(self, request: Request) -> float:
        return self.parse(request.headers.get("accept"))


versioning_service = VersioningService(settings.DEFAULT_API_VERSION)


def get_api_version(request: Request) -> float:
    """Dependency resolving the API version requested by the caller."""
    return versioning_service.get_version(request)
