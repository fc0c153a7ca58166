"""Error Handlers — maps topology errors and bad payloads to JSON envelopes.

Invariants:
    - TopologyError → its own http_status and to_response() envelope, with the
      offending node in error.context.node_key (raw host:port, or the unresolved host)
    - Log level follows the error's severity: a bad host:port is a WARNING,
      a failed lookup an ERROR
    - Unparseable snapshot/position bodies → 400 INVALID_PAYLOAD, one detail per
      field, located relative to the body ("replica.binlog_format")

Design Decisions:
    - No catch-all handler: every decision in core is total over validated
      payloads, and Starlette's default 500 already hides internals
    - Pairing rejections never reach here: /compatibility answers them with 200
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repltopo.core.errors import ErrorCategory, ErrorSeverity, TopologyError

logger = logging.getLogger(__name__)

_LOG_LEVELS: dict[ErrorSeverity, int] = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register topology and payload error handlers on the FastAPI app."""
    app.add_exception_handler(TopologyError, topology_error_handler)
    app.add_exception_handler(RequestValidationError, invalid_payload_handler)


async def topology_error_handler(request: Request, exc: TopologyError) -> JSONResponse:
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "node_key": exc.context.node_key,
            "error_code": exc.code,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def invalid_payload_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Rejected payload on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "INVALID_PAYLOAD", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "INVALID_PAYLOAD",
                "message": "Request body does not describe valid nodes or positions",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "details": details,
            },
        },
    )


def _field_detail(error: dict) -> dict:
    """Field path without the leading "body" segment."""
    loc = [str(part) for part in error["loc"]]
    if loc and loc[0] == "body":
        loc = loc[1:]
    return {"field": ".".join(loc) or "body", "message": error["msg"]}
