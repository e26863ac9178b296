"""Client side of the booking service: HTTP collaborator and screen controllers."""

from ayambil.client.api import (
    AuthenticationRequired,
    CalendarServiceClient,
    ServiceError,
    ServiceTimeout,
    Session,
    ValidationFailed,
)
from ayambil.client.i18n import CalendarLocale

__all__ = [
    "AuthenticationRequired",
    "CalendarLocale",
    "CalendarServiceClient",
    "ServiceError",
    "ServiceTimeout",
    "Session",
    "ValidationFailed",
]
