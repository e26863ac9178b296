"""Error payloads shared by the routers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def field_error(field: str, message: str) -> dict[str, str]:
    return {"field": field, "message": message}


def rejection(status_code: int, field: str, message: str) -> HTTPException:
    """HTTP error whose detail carries a single per-field message."""
    return HTTPException(
        status_code=status_code,
        detail={"message": message, "errors": [field_error(field, message)]},
    )


def _field_name(loc: tuple[object, ...]) -> str:
    parts = [str(part) for part in loc if str(part) not in _LOCATION_PREFIXES]
    if not parts:
        return "request"
    return to_camel(parts[0]) if "_" in parts[0] else parts[0]


def _clean_message(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render validation failures as ``{detail, errors: [{field, message}]}``."""
    errors = [
        field_error(_field_name(tuple(err.get("loc", ()))), _clean_message(err.get("msg", "")))
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(
            {
                "detail": errors[0]["message"] if errors else "Validation failed",
                "errors": errors,
            }
        ),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Flatten structured details so clients always find ``detail`` as a string."""
    content: dict[str, object]
    if isinstance(exc.detail, dict):
        content = {"detail": exc.detail.get("message", ""), **exc.detail}
        content.pop("message", None)
    else:
        content = {"detail": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )
