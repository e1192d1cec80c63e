from __future__ import annotations

import html
import random
import string
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.core.config import MailSettings
from app.schemas.contact import ContactSubmission, NotificationMail, Receipt

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
KST_OFFSET = timedelta(hours=9)
RECEIPT_PREFIX = "ECO"
TOKEN_ALPHABET = string.digits + string.ascii_uppercase

EMAIL_PLACEHOLDER = "미입력"
MESSAGE_PLACEHOLDER = "문의 내용 없음"
TITLE = "상담문의 접수"

_LABEL_STYLE = "text-align: left; padding: 8px 0; color: #6b7280;"
_VALUE_STYLE = "padding: 8px 0;"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def format_kst(instant: datetime) -> str:
    # Fixed +9h projection of the UTC instant; KST has no DST.
    kst = _as_utc(instant) + KST_OFFSET
    return kst.strftime("%Y-%m-%d %H:%M:%S") + " (KST)"


def random_token(length: int = 4) -> str:
    return "".join(random.choices(TOKEN_ALPHABET, k=length))


def create_receipt_id(instant: datetime, token: str) -> str:
    millis = (_as_utc(instant) - EPOCH) // timedelta(milliseconds=1)
    return f"{RECEIPT_PREFIX}-{millis}-{token}"


def build_receipt(
    clock: Callable[[], datetime] = utc_now,
    token_factory: Callable[[], str] = random_token,
) -> Receipt:
    now = clock()
    return Receipt(receipt_id=create_receipt_id(now, token_factory()), received_at=format_kst(now))


def compose_subject(submission: ContactSubmission, brand: str) -> str:
    return f"[{brand}] {submission.product_type} | {submission.name} | {submission.phone}"


def compose_text(submission: ContactSubmission, receipt: Receipt) -> str:
    lines = [
        TITLE,
        f"접수번호: {receipt.receipt_id}",
        f"접수시간: {receipt.received_at}",
        "",
        f"이름: {submission.name}",
        f"연락처: {submission.phone}",
        f"이메일: {submission.email or EMAIL_PLACEHOLDER}",
        f"제품 종류: {submission.product_type}",
        "",
        "문의 내용:",
        submission.message or MESSAGE_PLACEHOLDER,
    ]
    if submission.page:
        lines.extend(["", f"접수 페이지: {submission.page}"])
    return "\n".join(lines)


def _table_row(label: str, value: str, *, first: bool = False) -> str:
    label_style = _LABEL_STYLE + (" width: 120px;" if first else "")
    return (
        "    <tr>\n"
        f'      <th style="{label_style}">{label}</th>\n'
        f'      <td style="{_VALUE_STYLE}">{html.escape(value)}</td>\n'
        "    </tr>\n"
    )


def compose_html(submission: ContactSubmission, receipt: Receipt) -> str:
    message = html.escape(submission.message or MESSAGE_PLACEHOLDER).replace("\n", "<br>")
    rows = (
        _table_row("이름", submission.name, first=True)
        + _table_row("연락처", submission.phone)
        + _table_row("이메일", submission.email or EMAIL_PLACEHOLDER)
        + _table_row("제품 종류", submission.product_type)
    )
    page = ""
    if submission.page:
        page = (
            '<p style="margin-top: 16px; color: #6b7280;">'
            f"<strong>접수 페이지:</strong> {html.escape(submission.page)}</p>"
        )

    return (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #1f2937;">\n'
        f'  <h2 style="margin: 0 0 12px;">{TITLE}</h2>\n'
        '  <p style="margin: 0 0 12px; color: #6b7280;">\n'
        f"    <strong>접수번호:</strong> {receipt.receipt_id}<br>\n"
        f"    <strong>접수시간:</strong> {receipt.received_at}\n"
        "  </p>\n"
        '  <table style="width: 100%; border-collapse: collapse; margin-bottom: 16px;">\n'
        f"{rows}"
        "  </table>\n"
        '  <div style="padding: 12px 16px; background: #f8fafc; border-radius: 8px; border: 1px solid #e5e7eb;">\n'
        "    <strong>문의 내용</strong>\n"
        f'    <p style="margin: 8px 0 0;">{message}</p>\n'
        "  </div>\n"
        f"  {page}\n"
        "</div>\n"
    )


def reply_to_address(submission: ContactSubmission) -> str | None:
    if submission.email and submission.email != EMAIL_PLACEHOLDER:
        return submission.email
    return None


def compose_notification(
    submission: ContactSubmission,
    receipt: Receipt,
    mail_settings: MailSettings,
    brand: str,
) -> NotificationMail:
    return NotificationMail(
        sender=mail_settings.mail_from,
        recipient=mail_settings.mail_to,
        reply_to=reply_to_address(submission),
        subject=compose_subject(submission, brand),
        text=compose_text(submission, receipt),
        html=compose_html(submission, receipt),
    )
