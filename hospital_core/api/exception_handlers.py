import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hospital_core.core.exceptions import BaseCustomException, create_error_response

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BaseCustomException)
    async def custom_exception_handler(request: Request, exc: BaseCustomException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(exc, request_id=request.headers.get("X-Request-ID")),
        )
