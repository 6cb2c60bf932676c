"""
Centralized error handling: outcome -> HTTP status mapping and app-level handlers.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from jobboard.services.integrity_service import OperationResult, Outcome

logger = logging.getLogger(__name__)


OUTCOME_STATUS = {
    Outcome.success: 200,
    Outcome.not_found: 404,
    Outcome.forbidden: 403,
    Outcome.duplicate_application: 409,
    Outcome.already_shortlisted: 409,
}


def raise_for_outcome(result: OperationResult) -> OperationResult:
    """Raise the matching HTTPException unless the operation succeeded."""
    if not result.ok:
        raise HTTPException(status_code=OUTCOME_STATUS[result.outcome], detail=result.message)
    return result


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail, "success": False},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "message": "Validation failed",
                "data": jsonable_encoder(exc.errors()),
                "success": False,
            },
        )

    @app.exception_handler(PyMongoError)
    async def mongo_error_handler(request: Request, exc: PyMongoError):
        logger.exception("MongoDB error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"message": "Database operation failed", "success": False},
        )
