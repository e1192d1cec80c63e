from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("name", "phone", "product_type")


class ContactSubmission(BaseModel):
    """One contact-form request, normalized.

    Every field is a trimmed string; values the form could not have produced
    (lists, objects, booleans) collapse to an empty string so a malformed body
    ends up as a missing-field error instead of a validation exception.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    phone: str = ""
    email: str = ""
    product_type: str = ""
    message: str = ""
    page: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, bool) or value is None:
            return ""
        if isinstance(value, (int, float)):
            try:
                return str(value).strip()
            except ValueError:
                # int too large for str() under the interpreter's digit limit
                return ""
        return ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ContactSubmission":
        return cls.model_validate({k: v for k, v in payload.items() if k in cls.model_fields})

    def missing_required(self) -> list[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]

    @property
    def is_valid(self) -> bool:
        return not self.missing_required()


class Receipt(BaseModel):
    model_config = ConfigDict(frozen=True)

    receipt_id: str
    received_at: str


class NotificationMail(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: str
    recipient: str
    reply_to: Optional[str] = None
    subject: str
    text: str
    html: str


class ContactAccepted(BaseModel):
    ok: bool = True


class ErrorMessage(BaseModel):
    message: str = Field(min_length=1)
