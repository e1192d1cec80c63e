from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from app.core.config import MailSettings
from app.services.intake import ContactIntakeHandler, IntakeRequest, IntakeResponse
from app.services.mail_transport import TransportFactory, smtp_transport_factory

router = APIRouter(prefix="/contact", tags=["contact"])

CONTACT_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def get_mail_settings() -> MailSettings:
    # Read on every request; see MailSettings.
    return MailSettings.from_env()


def get_transport_factory() -> TransportFactory:
    return smtp_transport_factory


def get_intake_handler(
    mail_settings: MailSettings = Depends(get_mail_settings),
    transport_factory: TransportFactory = Depends(get_transport_factory),
) -> ContactIntakeHandler:
    return ContactIntakeHandler(mail_settings, transport_factory=transport_factory)


def _to_response(result: IntakeResponse) -> Response:
    if result.payload is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(status_code=result.status_code, content=result.payload, headers=result.headers)


@router.api_route("", methods=CONTACT_METHODS, include_in_schema=False)
@router.api_route("/", methods=CONTACT_METHODS)
async def contact(
    request: Request,
    handler: ContactIntakeHandler = Depends(get_intake_handler),
) -> Response:
    body = await request.body()
    # The SMTP round trip blocks; keep it off the event loop.
    result = await run_in_threadpool(handler.handle, IntakeRequest(method=request.method, body=body))
    return _to_response(result)
