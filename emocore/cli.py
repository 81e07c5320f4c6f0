"""
Command-line interface tools for the Emocore service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer
from httpx_sse import ServerSentEvent, aconnect_sse

from .models import StateOfMind

DEFAULT_BASE_URL = "http://localhost:8000"

app = typer.Typer(help="Emocore CLI tools")


class ServerError(Exception):
    """An error payload returned by the service."""

    def __init__(self, detail: dict[str, Any]) -> None:
        self.detail = detail
        message = f"{detail['error']}: {detail.get('message', 'Unknown error')}"
        if detail.get("value") is not None:
            message += f" (value: {detail['value']})"
        super().__init__(message)


# MARK: - Commands


@app.command("log")
def log_sample(
    kind: str = typer.Argument(..., help="momentary_emotion or daily_mood (or its code)"),
    valence: float = typer.Argument(..., help="How you feel, from -1 to 1"),
    labels: list[str] = typer.Option([], "--label", "-l", help="Label name or code"),
    associations: list[str] = typer.Option(
        [], "--association", "-a", help="Association name or code"
    ),
    date: datetime | None = typer.Option(
        None, "--date", "-d", help="When the feeling was experienced (defaults to now)"
    ),
    keep_time: bool = typer.Option(
        False, "--keep-time", help="Don't move a past daily mood to the end of its day"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Emocore service"
    ),
) -> None:
    """Log a state of mind sample."""
    payload: dict[str, Any] = {
        "kind": kind,
        "valence": valence,
        "labels": labels,
        "associations": associations,
        "override_past_daily_mood_time": not keep_time,
    }
    if date is not None:
        payload["date"] = date.isoformat()

    async def _log() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(f"{base_url}/state-of-mind", json=payload)
            _raise_for_error(response)
            sample = StateOfMind.model_validate(response.json()["sample"])
            print(f"Logged: {_format_sample(sample)}")

    _run_with_error_handling(_log(), base_url)


@app.command("list")
def list_samples(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Emocore service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """List saved state of mind samples."""

    async def _list() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/state-of-mind")
            _raise_for_error(response)
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            if not result["samples"]:
                print("No samples logged")
            for raw in result["samples"]:
                print(_format_sample(StateOfMind.model_validate(raw)))

    _run_with_error_handling(_list(), base_url)


@app.command()
def stream(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Emocore service"
    ),
) -> None:
    """Stream saved samples in real-time."""

    async def _stream() -> None:
        print(f"Streaming from {base_url}/state-of-mind/stream... (Ctrl+C to stop)")

        async with httpx.AsyncClient(timeout=None) as client:
            async with aconnect_sse(
                client, "GET", f"{base_url}/state-of-mind/stream"
            ) as event_source:
                async for sse in event_source.aiter_sse():
                    _handle_sse_event(sse)

    _run_with_error_handling(_stream(), base_url)


# MARK: - Private Helpers


def _format_sample(sample: StateOfMind) -> str:
    """Format a sample as a single line."""
    line = f"{sample.subtitle} > {sample.title} ({sample.valence:+.2f})"
    tags = [label.display_name for label in sample.labels]
    tags += [association.display_name for association in sample.associations]
    if tags:
        line += f" [{', '.join(tags)}]"
    return line


def _raise_for_error(response: httpx.Response) -> None:
    """Raise ServerError for structured error payloads, else HTTP errors."""
    if response.is_success:
        return
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, dict) and "error" in detail:
        raise ServerError(detail)
    response.raise_for_status()


def _handle_sse_event(sse: ServerSentEvent) -> None:
    """Handle a single SSE event."""
    try:
        if sse.event == "error":
            error_data = json.loads(sse.data)
            print(f"Server error: {error_data.get('message', 'Unknown error')}")
            return

        sample = StateOfMind.model_validate_json(sse.data)
        print(_format_sample(sample))

    except ValueError as e:
        print(f"Warning: Could not parse SSE data: {sse.data} - {e}")


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except ServerError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
