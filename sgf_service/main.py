"""
SGF Diagram Service - FastAPI Application
Provides SGF game information and board diagram tools over HTTP
"""

import logging
import os
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import __version__
from .config import load_settings
from .errors import ErrorKind, InvalidParametersError
from .tools import (
    TOOL_DEFINITIONS,
    call_tool,
    error_envelope,
    list_tools,
    render_diagram,
)

settings = load_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="SGF Diagram Service",
    description="Game information and board diagrams from SGF records",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

STATUS_BY_KIND: Dict[str, int] = {
    ErrorKind.INVALID_PARAMETERS.value: 400,
    ErrorKind.INVALID_FORMAT.value: 400,
    ErrorKind.PARSING_ERROR.value: 400,
    ErrorKind.FILE_TOO_LARGE.value: 413,
    ErrorKind.UNSUPPORTED_GAME.value: 422,
    ErrorKind.UNEXPECTED_ERROR.value: 500,
}


def status_for(result: Dict[str, Any]) -> int:
    """HTTP status for an operation result envelope."""
    if result.get("success"):
        return 200
    return STATUS_BY_KIND.get(result["error"]["type"], 500)


async def _read_arguments(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise InvalidParametersError(
            f"Request body is not valid JSON: {e}",
            rule="json",
        ) from e


@app.get("/")
async def root():
    """Service banner"""
    return {
        "service": "SGF Diagram Service",
        "status": "running",
        "version": __version__
    }


@app.get("/health")
async def health_check():
    """Health check for container orchestration"""
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.get("/tools")
async def get_tools():
    """List the available tools and their input schemas"""
    return {"tools": list_tools()}


@app.post("/tools/get-sgf-diagram/image")
async def get_sgf_diagram_image(request: Request):
    """
    Render a diagram and return the raw image bytes.

    Failures are reported with the same JSON envelope as the tool endpoint.
    """
    try:
        arguments = await _read_arguments(request)
        response, image_bytes = await render_diagram(arguments, settings=settings)
    except Exception as e:
        result = error_envelope(e)
        if result["error"]["type"] == ErrorKind.UNEXPECTED_ERROR.value:
            logger.error(f"Error rendering diagram image: {e}", exc_info=True)
        else:
            logger.warning(f"Diagram image rejected: {e}")
        return JSONResponse(content=result, status_code=status_for(result))

    data = response.data
    return Response(
        content=image_bytes,
        media_type=data.mime_type,
        headers={
            "X-Moves-Covered": str(data.moves_covered),
            "X-Board-Size": str(data.board_size),
        },
    )


@app.post("/tools/{name}")
async def invoke_tool(name: str, request: Request):
    """
    Invoke a tool by name with the JSON request body as its arguments.

    Returns the tool's result envelope; the HTTP status reflects the error
    kind when the call fails.
    """
    if name not in TOOL_DEFINITIONS:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

    try:
        arguments = await _read_arguments(request)
    except InvalidParametersError as e:
        logger.warning(f"{name} rejected: {e}")
        result = error_envelope(e)
        return JSONResponse(content=result, status_code=status_for(result))

    result = await call_tool(name, arguments, settings=settings)
    return JSONResponse(content=result, status_code=status_for(result))


if __name__ == "__main__":
    import uvicorn

    # When run directly (e.g. via `python -m sgf_service.main`), bind to
    # 0.0.0.0 and respect SGF_SERVICE_PORT.
    port_str = os.getenv("SGF_SERVICE_PORT", str(settings.port))
    try:
        port = int(port_str)
    except ValueError:
        port = settings.port

    uvicorn.run(app, host="0.0.0.0", port=port)
