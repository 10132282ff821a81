"""qr2term microservice -- FastAPI application.

Endpoints:
    POST /render       -- Render text as a terminal QR code (JSON with geometry)
    POST /render/text  -- Render text as a terminal QR code (plain ANSI text)
    GET  /health       -- Health check

The rendered text contains ANSI color sequences and is meant to be written
verbatim to a terminal, e.g. ``curl -s ... | jq -r .text``.
"""

from __future__ import annotations

import sys

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from .qr import DEFAULT_ERROR_CORRECTION, QUIET_ZONE_WIDTH, build_matrix
from .renderer import compute_height, compute_width, render_to_text

structlog.configure(
    processors=[
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(sys.stderr),
)

logger = structlog.get_logger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="qr2term",
    description="Render QR codes as ANSI text for character-cell terminals",
    version=VERSION,
)


# --------------------------------------------------------------------------
# Request / Response models
# --------------------------------------------------------------------------


class RenderRequest(BaseModel):
    """Request body for /render and /render/text."""

    data: str = Field(
        ...,
        description="Text to encode, sent to the encoder as UTF-8",
        examples=["WIFI:S:home;T:WPA;P:hunter2;;"],
    )
    quiet_zone: int = Field(
        default=QUIET_ZONE_WIDTH,
        ge=0,
        le=16,
        description="Width of the light border around the code, in pixels",
    )
    error_correction: str = Field(
        default=DEFAULT_ERROR_CORRECTION,
        description="QR error correction level",
        examples=["L", "M", "Q", "H"],
    )


class RenderResponse(BaseModel):
    """Response body for /render."""

    text: str = Field(description="Rendered QR code with ANSI color sequences")
    width: int = Field(description="Width of the rendered text in character columns")
    height: int = Field(description="Height of the rendered text in lines")


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str
    service: str
    version: str


# --------------------------------------------------------------------------
# Endpoints
# --------------------------------------------------------------------------


@app.post("/render", response_model=RenderResponse)
async def render_endpoint(request: RenderRequest) -> RenderResponse:
    """Render text into a terminal QR code and report its size."""
    try:
        matrix = build_matrix(request.data, request.quiet_zone, request.error_correction)
        text = render_to_text(matrix)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("render_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Rendering failed")

    return RenderResponse(text=text, width=compute_width(matrix), height=compute_height(matrix))


@app.post(
    "/render/text",
    response_class=PlainTextResponse,
    responses={
        200: {"content": {"text/plain": {}}, "description": "ANSI-colored QR code"},
        422: {"description": "Invalid input"},
    },
)
async def render_text_endpoint(request: RenderRequest) -> PlainTextResponse:
    """Render text into a terminal QR code as plain text."""
    try:
        matrix = build_matrix(request.data, request.quiet_zone, request.error_correction)
        text = render_to_text(matrix)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("render_text_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Rendering failed")

    return PlainTextResponse(content=text)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for Docker and load balancer probes."""
    return HealthResponse(
        status="healthy",
        service="qr2term",
        version=VERSION,
    )
