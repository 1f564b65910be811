from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uuid
import time
from typing import Optional

from src.api.endpoints import transactions
from src.common.logging_config import clear_request_id, get_logger, set_request_id, setup_logging
from src.common.settings import Settings, load_settings
from src.services.transactions import ProviderClient, TransactionService

logger = get_logger("api.main")


def create_app(client: Optional[ProviderClient] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the HTTP app. Without a provider client the app still starts and
    /status reports configured: false.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="Bank Sync Engine", version="1.0.0")
    app.state.settings = settings
    app.state.transaction_service = (
        TransactionService(client, settings=settings) if client is not None else None
    )

    # Request ID, request logging, and the last-resort error envelope
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        request_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or str(uuid.uuid4())
        )
        token = set_request_id(request_id)
        try:
            response = await _dispatch(request, call_next)
        finally:
            clear_request_id(token)

        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(transactions.router, tags=["Transactions"])
    return app


async def _dispatch(request: Request, call_next):
    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path}",
        method=request.method,
        path=request.url.path,
        client=request.client.host if request.client else "unknown",
    )

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            "Unhandled error in request handler",
            url=str(request.url.path),
            method=request.method,
            error={"name": type(e).__name__, "message": str(e)},
            process_time_ms=round(process_time * 1000, 2),
            exc_info=True,
        )
        return JSONResponse({
            "status": "ok",
            "data": {
                "error_code": "INTERNAL_ERROR",
                "error_type": str(e) or "internal-error",
            },
        })

    process_time = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",
        status_code=response.status_code,
        process_time_ms=round(process_time * 1000, 2),
    )
    return response


app = create_app()

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
