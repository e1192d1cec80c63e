from __future__ import annotations

from app.schemas.contact import (
    ContactAccepted,
    ContactSubmission,
    ErrorMessage,
    NotificationMail,
    Receipt,
)

__all__ = [
    "ContactSubmission",
    "ContactAccepted",
    "ErrorMessage",
    "NotificationMail",
    "Receipt",
]
