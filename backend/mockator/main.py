from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator
import json
import logging

from fastapi import FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import ValidationError as PydanticValidationError

from .core import (
    ErrorResponse,
    GenerationRequest,
    MockatorError,
    OutputFormat,
    ProviderInfo,
    UnknownError,
    UpstreamError,
    ValidationError,
    error_message,
    get_cached_settings,
)
from .llm import (
    DEFAULT_TEMPERATURE,
    build_prompts,
    clamp_row_count,
    expected_prefix,
    list_providers,
    parse_provider_id,
    require_credential,
    resolve_client,
)
from .security import validate_input

settings = get_cached_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mockator", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Provider", "X-Api-Key"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing provider or invalid input"},
    401: {"model": ErrorResponse, "description": "Missing API key for the selected provider"},
    500: {"model": ErrorResponse, "description": "Provider or streaming failure"},
}


# --- Structured Error Response ---

def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON error envelope returned for every failed request."""
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


# --- Request Parsing ---

async def _read_body(request: Request) -> GenerationRequest:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError("Request body must be valid JSON.") from exc

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")

    try:
        return GenerationRequest.model_validate(payload)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise ValidationError(f"Invalid request body: {fields}.") from exc


# --- Streaming ---

def _timeout_error(timeout: int) -> UpstreamError:
    return UpstreamError(f"Generation exceeded the {timeout}s time limit.")


async def _first_chunk(chunks: AsyncGenerator[str, None], deadline: float, timeout: int) -> str | None:
    """Wait for the first chunk so setup failures still get a JSON error."""
    try:
        async with asyncio.timeout_at(deadline):
            return await anext(chunks)
    except StopAsyncIteration:
        return None
    except TimeoutError as exc:
        await chunks.aclose()
        raise _timeout_error(timeout) from exc


def _check_leading_token(first: str, output_format: OutputFormat) -> None:
    """Log (but still relay) output that breaks the format contract."""
    prefix = expected_prefix(output_format)
    if prefix and not first.lstrip().upper().startswith(prefix):
        logger.warning(f"Model output does not start with {prefix!r} for format {output_format.value}")


async def _relay(
    first: str,
    chunks: AsyncGenerator[str, None],
    deadline: float,
    timeout: int,
) -> AsyncIterator[str]:
    """Forward model chunks in arrival order until the stream ends."""
    count = 1
    try:
        yield first
        while True:
            try:
                async with asyncio.timeout_at(deadline):
                    chunk = await anext(chunks)
            except StopAsyncIteration:
                break
            count += 1
            yield chunk
        logger.info(f"Generation completed: {count} chunks relayed")
    except TimeoutError as exc:
        logger.error(f"Generation timed out after {count} chunks")
        raise _timeout_error(timeout) from exc
    except MockatorError as exc:
        # Headers are already sent; aborting the body is the only signal left
        logger.error(f"Generation stream failed after {count} chunks: {exc}")
        raise
    finally:
        await chunks.aclose()


# --- API Endpoints ---

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/providers", response_model=list[ProviderInfo])
def providers() -> list[ProviderInfo]:
    """List supported providers with their default models."""
    return list_providers()


@app.post("/api/generate", response_class=PlainTextResponse, responses=ERROR_RESPONSES)
async def generate(
    request: Request,
    x_provider: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None),
):
    """
    Generate mock data and stream the model's raw text back.

    - **X-Provider**: openai, anthropic, google or groq
    - **X-Api-Key**: API key for that provider (never stored or logged)
    - **body**: `{inputMode, input, format, rowCount}`

    Returns `text/plain` chunks as the model emits them, or `{"error": ...}`
    with status 400, 401 or 500.
    """
    timeout = get_cached_settings().request_timeout
    deadline = asyncio.get_running_loop().time() + timeout

    try:
        provider_id = parse_provider_id(x_provider)
        api_key = require_credential(provider_id, x_api_key)
        body = await _read_body(request)
        user_input = validate_input(body.input)
        row_cap = clamp_row_count(body.row_count)

        logger.info(
            f"Generate request: provider={provider_id.value}, format={body.format.value}, "
            f"mode={body.input_mode.value}, rows={row_cap}, input_chars={len(user_input)}"
        )

        prompts = build_prompts(body.format, body.input_mode, user_input, row_cap)
        client, model_id = resolve_client(provider_id, api_key)
        logger.info(f"Streaming from {provider_id.value} model={model_id}")

        chunks = client.stream_completion(
            prompts.system_prompt,
            prompts.user_prompt,
            temperature=DEFAULT_TEMPERATURE,
        )
        first = await _first_chunk(chunks, deadline, timeout)
    except MockatorError as exc:
        logger.warning(f"Generate request failed ({exc.status_code}): {exc}")
        return error_response(exc.status_code, error_message(exc))
    except Exception as exc:
        logger.exception("Unexpected error during generation")
        unknown = UnknownError(error_message(exc))
        return error_response(unknown.status_code, unknown.message)

    if first is None:
        logger.warning("Model returned an empty stream")
        return PlainTextResponse("")

    _check_leading_token(first, body.format)
    return StreamingResponse(
        _relay(first, chunks, deadline, timeout),
        media_type="text/plain; charset=utf-8",
    )
