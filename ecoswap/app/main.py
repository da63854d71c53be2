import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from ecoswap.app.api.routes import api_router
from ecoswap.app.core.config import get_settings
from ecoswap.app.services.url_recipe_parser import get_browser_session

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


async def validation_exception_handler(request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "validation_error",
            "message": "Invalid request payload.",
            "details": details,
        },
    )


def create_app() -> FastAPI:
    settings = get_settings()
    started_at = time.monotonic()

    app = FastAPI(title="EcoSwap", version=APP_VERSION)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(api_router)

    @app.get("/api/health")
    async def health() -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3),
            "version": APP_VERSION,
        }

    @app.on_event("startup")
    async def startup_event() -> None:
        if settings.has_llm_credential:
            logger.info("Completion service credential configured; generative fallback enabled")
        else:
            logger.info("No completion service credential; generative fallback disabled")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        session = get_browser_session()
        if session.is_started:
            logger.info("Closing headless browser")
            await session.close()

    return app


app = create_app()
