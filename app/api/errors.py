import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConcurrencyConflict, LedgerError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": error, "message": message}},
        headers=headers,
    )


async def ledger_error_handler(_: Request, exc: LedgerError) -> JSONResponse:
    headers = {"Retry-After": "1"} if isinstance(exc, ConcurrencyConflict) else None
    return _error_response(exc.status_code, exc.code, exc.message, headers)


async def storage_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    if "database is locked" in str(exc.orig).lower():
        # SQLite busy timeout ran out; another writer holds the file
        logger.warning("Storage busy while handling %s %s: %s", request.method, request.url.path, exc.orig)
        return _error_response(
            ConcurrencyConflict.status_code,
            ConcurrencyConflict.code,
            "Storage is busy, retry the request",
            {"Retry-After": "1"},
        )
    logger.exception("Storage unavailable while handling %s %s.", request.method, request.url.path, exc_info=exc)
    return _error_response(503, "storage_unavailable", "Storage is unavailable")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(OperationalError, storage_error_handler)
