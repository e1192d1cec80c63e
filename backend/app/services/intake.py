from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Union

from app.core.config import MailSettings, settings
from app.schemas.contact import ContactAccepted, ContactSubmission, ErrorMessage
from app.services.mail_composer import build_receipt, compose_notification, random_token, utc_now
from app.services.mail_transport import TransportFactory, smtp_transport_factory

logger = logging.getLogger(__name__)

MSG_METHOD_NOT_ALLOWED = "Method Not Allowed"
MSG_REQUIRED_MISSING = "필수 항목이 누락되었습니다."
MSG_CONFIG_MISSING = "메일 서버 설정이 필요합니다."
MSG_SEND_FAILED = "메일 전송에 실패했습니다."

JSON_HEADERS = {"Content-Type": "application/json"}

RawBody = Union[str, bytes, dict, None]


@dataclass(frozen=True)
class IntakeRequest:
    method: str
    body: RawBody = None


@dataclass(frozen=True)
class IntakeResponse:
    status_code: int
    payload: Optional[dict[str, Any]] = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, status_code: int, payload: dict[str, Any]) -> "IntakeResponse":
        return cls(status_code=status_code, payload=payload, headers=dict(JSON_HEADERS))

    @classmethod
    def error(cls, status_code: int, message: str) -> "IntakeResponse":
        return cls.json(status_code, ErrorMessage(message=message).model_dump())


def parse_body(body: Any) -> dict[str, Any]:
    """Best-effort decode of a request body into a JSON object.

    Malformed input yields an empty dict, which later fails required-field
    validation like any other incomplete submission.
    """
    if not body:
        return {}
    if isinstance(body, dict):
        return body
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError:
            return {}
    if not isinstance(body, str):
        return {}
    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        return {}
    return data if isinstance(data, dict) else {}


class ContactIntakeHandler:
    def __init__(
        self,
        mail_settings: MailSettings,
        *,
        transport_factory: TransportFactory = smtp_transport_factory,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[], str] = random_token,
        brand: Optional[str] = None,
    ) -> None:
        self.mail_settings = mail_settings
        self.transport_factory = transport_factory
        self.clock = clock
        self.token_factory = token_factory
        self.brand = brand or settings.MAIL_BRAND

    def handle(self, request: IntakeRequest) -> IntakeResponse:
        method = (request.method or "").upper()
        if method == "OPTIONS":
            return IntakeResponse(status_code=204)
        if method != "POST":
            return IntakeResponse.error(405, MSG_METHOD_NOT_ALLOWED)
        return self._submit(request.body)

    def _submit(self, body: RawBody) -> IntakeResponse:
        submission = ContactSubmission.from_payload(parse_body(body))
        if not submission.is_valid:
            missing = ", ".join(submission.missing_required())
            logger.info("Rejected contact submission, missing fields: %s", missing)
            return IntakeResponse.error(400, MSG_REQUIRED_MISSING)

        cfg = self.mail_settings
        if not cfg.is_complete:
            logger.error("Mail server is not configured, missing: %s", ", ".join(cfg.missing_fields()))
            return IntakeResponse.error(500, MSG_CONFIG_MISSING)

        receipt = build_receipt(self.clock, self.token_factory)
        mail = compose_notification(submission, receipt, cfg, self.brand)

        try:
            self.transport_factory(cfg).send(mail)
        except Exception:
            logger.exception("Email send failed for receipt %s", receipt.receipt_id)
            return IntakeResponse.error(500, MSG_SEND_FAILED)

        logger.info("Contact submission %s relayed to %s", receipt.receipt_id, cfg.mail_to)
        return IntakeResponse.json(200, ContactAccepted().model_dump())
