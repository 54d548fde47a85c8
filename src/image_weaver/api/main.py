"""Image Weaver — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, mounts the Gradio UI at
``/``, and provides the ``main()`` CLI function that launches uvicorn.

Architecture
------------
- **The prompt flow** (:class:`~image_weaver.core.flow.PromptFlow`) is built
  once at startup from the configured provider and stored on ``app.state``.
  Routes obtain it through the :func:`get_flow` dependency so tests can
  substitute a flow bound to a fake provider.
- **No persistence** — every request is independent and nothing is written
  to disk.
- **The UI** is the Gradio Blocks app from :mod:`image_weaver.ui.app`,
  mounted after the API routes so ``/api/...`` paths take precedence.

Endpoints
---------
========  ===========================  =====================================
Method    Path                         Purpose
========  ===========================  =====================================
GET       ``/api/health``              Liveness probe
GET       ``/api/config``              Provider, variation bounds, file types
POST      ``/api/variations``          Variations for an image URL (JSON)
POST      ``/api/variations/upload``   Variations for an uploaded image file
GET       ``/``                        Gradio UI
========  ===========================  =====================================

Usage
-----
CLI (installed entry point)::

    image-weaver

Direct invocation::

    python -m image_weaver.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from image_weaver import __version__
from image_weaver.api.models import ConfigResponse, VariationsRequest, VariationsResponse
from image_weaver.core.config import DEFAULT_VARIATIONS, MAX_VARIATIONS, MIN_VARIATIONS, config
from image_weaver.core.errors import FlowError, RequestValidationError
from image_weaver.core.flow import PromptFlow, VariationResult, get_default_flow
from image_weaver.core.intake import (
    ACCEPTED_EXTENSIONS,
    ACCEPTED_MIME_TYPES,
    image_bytes_to_data_url,
    is_accepted_image,
)
from image_weaver.ui.app import create_ui

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error generating image variations"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the prompt flow on startup and drop it on shutdown.

    Building the flow does not contact the provider; credentials are only
    checked when the first request is made.
    """
    app.state.flow = get_default_flow(config)
    logger.info(f"Prompt flow ready (provider: {app.state.flow.provider.name}).")

    yield

    app.state.flow = None
    logger.info("Prompt flow released on shutdown.")


app = FastAPI(
    title="Image Weaver",
    description="Generate AI variations of an uploaded image.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so a separately served frontend can call the
# API during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_flow(request: Request) -> PromptFlow:
    """FastAPI dependency returning the application's prompt flow."""
    flow = getattr(request.app.state, "flow", None)
    if flow is None:
        raise HTTPException(status_code=503, detail="Prompt flow is not initialised")
    return flow


def _run_flow(flow: PromptFlow, image_url: str, number_of_variations: int) -> VariationResult:
    """Run *flow* and translate flow failures into HTTP errors.

    Input rejection maps to 422.  Output-validation and provider failures are
    reported identically as 502 with a generic message; the cause is only
    logged.
    """
    try:
        return flow.run(image_url=image_url, number_of_variations=number_of_variations)
    except RequestValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except FlowError as e:
        logger.warning(f"{GENERIC_ERROR}: {e}")
        raise HTTPException(status_code=502, detail=GENERIC_ERROR) from e


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/health")
async def health() -> dict:
    """Return a static liveness payload."""
    return {"status": "ok", "version": __version__}


@app.get("/api/config", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Return the settings a client needs to build a valid request."""
    return ConfigResponse(
        version=__version__,
        provider=config.default_provider,
        min_variations=MIN_VARIATIONS,
        max_variations=MAX_VARIATIONS,
        default_variations=DEFAULT_VARIATIONS,
        accepted_extensions=list(ACCEPTED_EXTENSIONS),
        accepted_mime_types=list(ACCEPTED_MIME_TYPES),
        max_upload_bytes=config.max_upload_bytes,
    )


@app.post("/api/variations", response_model=VariationsResponse)
def create_variations(
    req: VariationsRequest, flow: PromptFlow = Depends(get_flow)
) -> VariationsResponse:
    """Generate variations of the image at ``req.image_url``.

    Declared with ``def`` so FastAPI runs the blocking provider call in its
    threadpool.

    Raises:
        HTTPException: 422 for invalid input (no provider call is made),
            502 if the provider fails or returns malformed output.
    """
    result = _run_flow(flow, req.image_url, req.number_of_variations)
    return VariationsResponse(count=len(result), images=result.urls)


@app.post("/api/variations/upload", response_model=VariationsResponse)
def upload_variations(
    file: UploadFile = File(..., description="JPEG or PNG image."),
    number_of_variations: int = Form(DEFAULT_VARIATIONS, ge=MIN_VARIATIONS, le=MAX_VARIATIONS),
    flow: PromptFlow = Depends(get_flow),
) -> VariationsResponse:
    """Generate variations of an uploaded image file.

    The file passes through the intake filter first; rejected files never
    reach the flow.

    Raises:
        HTTPException: 415 for non-image files, 413 for oversized files,
            422 for unreadable images or invalid counts, 502 for provider or
            output failures.
    """
    filename = file.filename or ""
    if not is_accepted_image(filename, file.content_type):
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported file type. Accepted types: {', '.join(ACCEPTED_EXTENSIONS)}",
        )

    # One byte past the limit is enough to tell an oversized file apart.
    data = file.file.read(config.max_upload_bytes + 1)
    if len(data) > config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File is too large. Maximum is {config.max_upload_bytes} bytes.",
        )

    try:
        image_url = image_bytes_to_data_url(data, filename, mime_type=file.content_type)
    except RequestValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    result = _run_flow(flow, image_url, number_of_variations)
    return VariationsResponse(count=len(result), images=result.urls)


# Mounted last so the API routes above are matched first.
app = gr.mount_gradio_app(app, create_ui(), path="/")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~image_weaver.core.config.config`
    (``WEAVER_SERVER_HOST`` and ``WEAVER_SERVER_PORT``).  Defaults to
    ``0.0.0.0:7860``.

    Registered as the ``image-weaver`` console script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "image_weaver.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
