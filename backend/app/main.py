from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from app.api.api_v1 import api_router
from app.core.config import settings
from app.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.PROJECT_NAME)

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        # Preflight is answered by the route itself (204), so every request
        # goes through and only gets CORS headers attached here.
        response = await call_next(request)

        origin = request.headers.get("origin")
        if origin and ("*" in settings.CORS_ORIGINS or origin in settings.CORS_ORIGINS):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        elif "*" in settings.CORS_ORIGINS:
            response.headers["Access-Control-Allow-Origin"] = "*"

        response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        request_headers = request.headers.get("Access-Control-Request-Headers")
        if request_headers:
            response.headers["Access-Control-Allow-Headers"] = request_headers
        else:
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"

        return response

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.API_V1_STR)
    logger.info("%s ready, contact endpoint at %s/contact", settings.PROJECT_NAME, settings.API_V1_STR)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
