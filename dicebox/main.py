from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.responses import Response

from dicebox.config import settings
from dicebox.errors import ResourceLimitError, ValidationError
from dicebox.rng import RandomSourceError
from dicebox.routers import dice
from dicebox.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app = FastAPI(title="Dicebox", debug=settings.debug)

app.include_router(dice.router)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


def _error_response(
    status_code: int, error: str, message: str, details: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        details=details or [],
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(body.model_dump(mode="json"), status_code=status_code)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.debug("Validation failed for %s: %s", request.url.path, exc.message)
    details = [ErrorDetail(field=e.field, message=e.message) for e in exc.errors]
    return _error_response(400, "ValidationError", exc.message, details)


@app.exception_handler(ResourceLimitError)
async def resource_limit_handler(request: Request, exc: ResourceLimitError) -> JSONResponse:
    logger.debug("Resource limit hit for %s: %s", request.url.path, exc.message)
    details = [ErrorDetail(field=exc.field, message=exc.message)]
    return _error_response(400, "ResourceLimitError", exc.message, details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in err["loc"] if part != "body") or "body",
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    if any("expression" in err["loc"] for err in exc.errors()):
        message = "Expression is required and must be a string"
    else:
        message = "; ".join(d.message for d in details) or "Invalid request body"
    return _error_response(400, "ValidationError", message, details)


@app.exception_handler(RandomSourceError)
async def random_source_handler(request: Request, exc: RandomSourceError) -> JSONResponse:
    logger.error("Random source failure while handling %s", request.url.path, exc_info=exc)
    return _error_response(500, "InternalError", "Internal Server Error")


def serve() -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    configure_logging()
    logger.info("Dicebox listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
