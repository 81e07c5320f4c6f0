"""
FastAPI server for the Emocore service.

This module implements the HTTP intake for logging state of mind samples,
listing what has been saved, and streaming newly saved samples to clients
via Server-Sent Events.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from .adapter import from_external
from .config import Settings, load_settings
from .errors import (
    ConversionError,
    StateOfMindError,
    StoreError,
    StoreUnavailable,
    Unauthorized,
    ValidationError,
)
from .intent import LogStateOfMindIntent
from .models import LogRequest, StateOfMind
from .store import InMemoryHealthStore

logger = logging.getLogger(__name__)


# API Response Schemas
class SampleResponse(BaseModel):
    """Response model for a single logged sample."""

    sample: StateOfMind = Field(..., description="The persisted sample")
    title: str = Field(..., description="Short human readable summary")


class SampleListResponse(BaseModel):
    """Response model for the sample listing."""

    samples: list[StateOfMind] = Field(..., description="Saved samples, oldest first")


def _status_code(error: StateOfMindError) -> int:
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, Unauthorized):
        return 403
    if isinstance(error, StoreUnavailable):
        return 503
    if isinstance(error, StoreError):
        return 502
    return 500


def create_app(store: InMemoryHealthStore, settings: Settings | None = None) -> FastAPI:
    """
    Create a FastAPI application backed by the given store.

    Args:
        store: The health store samples are saved into
        settings: Service settings, loaded from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = load_settings()
    policy = settings.calendar_policy()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        logger.info("Daily mood policy: %s", policy)
        yield

    app = FastAPI(
        title="Emocore",
        description="Log state of mind samples into a health record store",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "emocore"}

    @app.post("/state-of-mind", status_code=201)
    async def log_sample(request: LogRequest) -> SampleResponse:
        """
        Validate, normalize and save a state of mind sample.

        Args:
            request: The sample to log

        Returns:
            The sample as read back from the store
        """
        intent = LogStateOfMindIntent(store, policy)
        try:
            sample = await intent.perform(request)
        except StateOfMindError as e:
            raise HTTPException(status_code=_status_code(e), detail=e.to_dict())
        return SampleResponse(sample=sample, title=sample.title)

    @app.get("/state-of-mind")
    async def list_samples() -> SampleListResponse:
        """Return every saved sample, oldest first."""
        records = await store.read_all()
        try:
            samples = [from_external(record) for record in records]
        except ConversionError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())
        return SampleListResponse(samples=samples)

    @app.get("/state-of-mind/stream")
    async def stream_samples() -> StreamingResponse:
        """
        Stream saved samples via Server-Sent Events.

        Samples saved before the connection are replayed first, then each
        new sample is sent as soon as it is saved.

        Returns:
            StreamingResponse with text/event-stream content type
        """

        async def event_generator() -> AsyncGenerator[str, None]:
            """Generate SSE events for saved samples."""
            try:
                async with store.stream() as record_stream:
                    async for record in record_stream:
                        sample = from_external(record)
                        yield f"data: {sample.model_dump_json()}\n\n"
            except asyncio.CancelledError:
                # Client disconnected
                pass
            except StateOfMindError as e:
                yield f"event: error\ndata: {json.dumps(e.to_dict())}\n\n"

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": "*",
            },
        )

    return app


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(InMemoryHealthStore(), settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
