"""HTTP mapping for domain errors.

Protean's handlers cover ``ValidationError`` (400), ``ObjectNotFoundError``
(404) and ``InvalidStateError`` (409); forbidden and conflicting requests are
added on top.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from marketplace.shared.exceptions import ConflictError, ForbiddenError

_STATUS_CODES = {
    ForbiddenError: 403,
    ConflictError: 409,
}


def _handler(status_code):
    async def handle(request: Request, exc):
        return JSONResponse(status_code=status_code, content={"error": exc.messages})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler(status_code))
