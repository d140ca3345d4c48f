"""FastAPI application entry point"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from theme_api.api import generate, progress, result
from theme_api.core.auth import require_api_key
from theme_api.core.config import settings
from theme_api.core.sessions import cleanup_idle_sessions
from theme_api.models.errors import ApplicationError
from theme_api.models.schemas import ErrorResponse

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("THEME GENERATOR STARTING")
    logger.info(f"Completion endpoint: {settings.completion_base_url} | model: {settings.completion_model}")
    logger.info(f"Strict steps: {settings.strict_steps} | evolve theme: {settings.evolve_theme}")
    logger.info("=" * 60)

    cleanup_task = asyncio.create_task(cleanup_idle_sessions())
    try:
        yield
    finally:
        cleanup_task.cancel()
        logger.info("Theme generator shutdown complete")


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApplicationError)
async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed | code: {exc.code.value} | {exc.message}")
    body = ErrorResponse(**exc.model_dump())
    return JSONResponse(status_code=exc.http_status, content=body.model_dump())


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.api_version}


@app.get("/health")
async def health():
    """Health check for monitoring"""
    return {"status": "healthy"}


app.include_router(generate.router, prefix="/api", tags=["generate"], dependencies=[Depends(require_api_key)])
app.include_router(result.router, prefix="/api", tags=["result"], dependencies=[Depends(require_api_key)])
app.include_router(progress.router, prefix="/sse", tags=["progress"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level=settings.log_level.lower(),
    )
