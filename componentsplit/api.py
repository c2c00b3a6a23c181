"""
HTTP API for componentsplit (FastAPI).

Run with ``uvicorn componentsplit.api:app``.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse

from componentsplit import __version__
from componentsplit.core.config import ModularizerConfig
from componentsplit.core.error_handling import EmptyInputError, ModularizerError
from componentsplit.core.input_validation import validate_source_code
from componentsplit.core.orchestrator import Modularizer

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(config: Optional[ModularizerConfig] = None) -> FastAPI:
    """Build the API application around an immutable configuration."""
    app = FastAPI(title="componentsplit", version=__version__)
    settings = config or ModularizerConfig()

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc), "timestamp": _timestamp()},
        )

    @app.post("/api/modularize")
    def modularize(payload: Optional[Dict[str, Any]] = Body(None)):
        """Split the posted ``code`` into component modules"""
        code = (payload or {}).get("code")
        try:
            validate_source_code(code)
        except EmptyInputError as e:
            return JSONResponse(
                status_code=400,
                content={"error": "No code provided", "message": e.message},
            )

        logger.info("Processing modularization request...")
        try:
            # A fresh orchestrator per request keeps runs isolated
            result = Modularizer(settings).process(code)
        except ModularizerError as e:
            logger.error(f"Modularization failed: {e}")
            return JSONResponse(
                status_code=500,
                content={"error": "Modularization failed", "message": e.message, "timestamp": _timestamp()},
            )
        logger.info(f"Extracted {result.extracted_count} components in {result.processing_time}ms")
        return JSONResponse({**result.to_payload(), "timestamp": _timestamp()})

    @app.get("/api/health")
    def health():
        """Health check"""
        return {"status": "healthy", "timestamp": _timestamp(), "uptime": round(time.monotonic() - STARTED_AT, 3)}

    @app.get("/api/status")
    def status():
        """Service information"""
        return {
            "service": "componentsplit",
            "version": __version__,
            "status": "active",
            "endpoints": [
                "POST /api/modularize - Split React code into components",
                "GET /api/health - Health check",
                "GET /api/status - API information",
            ],
            "timestamp": _timestamp(),
        }

    return app


app = create_app()
