import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blockbreaker.api.v1.router import api_router
from blockbreaker.core.config import get_settings
from blockbreaker.core.exceptions import CryptanalysisError, ValidationError
from blockbreaker.core.logging_config import configure_logging
from blockbreaker.dependencies import get_session_store
from blockbreaker.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the dictionary before serving; drop live sessions on exit."""
    configure_logging(settings.log_level)
    store = get_session_store()
    logger.info(
        "%s ready (%d dictionary words, up to %d sessions)",
        settings.app_name,
        len(store.dictionary),
        store.max_sessions,
    )
    yield
    logger.info("Closing %d live sessions", len(store))
    store.clear()


async def cryptanalysis_error_handler(request: Request, exc: CryptanalysisError) -> JSONResponse:
    """Render library errors that reach the app as ErrorResponse bodies."""
    code = (
        status.HTTP_400_BAD_REQUEST
        if isinstance(exc, ValidationError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    body = ErrorResponse(error=type(exc).__name__, message=exc.message, details=exc.details)
    return JSONResponse(status_code=code, content=body.model_dump())


def create_app() -> FastAPI:
    """Build the workbench API."""
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Interactive cryptanalysis of a Caesar/substitution block cipher: "
            "frequency analysis, substitution guessing, chained Caesar-shift "
            "reconstruction and dictionary scoring."
        ),
        version="0.1.0",
        debug=settings.debug,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # Browser clients are allowed only from configured origins
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type"],
        )

    app.add_exception_handler(CryptanalysisError, cryptanalysis_error_handler)
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "blockbreaker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
