"""Provider-specific transport for analysis requests.

Architectural role:
    Executes exactly one request against the provider described by a resolved
    call config and reduces the provider response to plain report text.

Model invocation flow:
    `service.AnalysisDispatcher.analyze` -> `resolve_call_config` ->
    `send_openai_request` (requests) or `send_google_request` (google-genai).

Retry behavior:
    No retry loop is implemented. Each call is attempted once, without an explicit
    timeout, so the transport default applies.

Empty responses:
    - OpenAI-compatible: missing content degrades to `EMPTY_RESPONSE_PLACEHOLDER`.
    - Gemini: missing text raises `EmptyResponseError`.
    The two branches intentionally keep this asymmetry.

Failure handling model:
    Transport and upstream failures are logged and re-raised as `ProviderError`
    subclasses with the original exception attached as `__cause__`.
"""

import json
import logging

import httpx
import requests
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from strategist.llm.errors import (
    EmptyResponseError,
    ProviderError,
    ProviderRejectionError,
    ProviderTransportError,
)
from strategist.llm.provider_config import GoogleCallConfig, OpenAICallConfig


logger = logging.getLogger(__name__)

EMPTY_RESPONSE_PLACEHOLDER = "No content received from the model."


# =========================================================
# OPENAI-COMPATIBLE
# =========================================================

def build_openai_payload(config: OpenAICallConfig, prompt: str) -> dict:
    """Build the chat-completions body.

    The whole prompt goes into a single user turn; no system role is sent.
    """
    return {
        "model": config.model_name,
        "messages": [
            {"role": "user", "content": prompt},
        ],
        "temperature": config.temperature,
    }


def _parse_error_body(response) -> dict:
    """Best-effort JSON decode of an error response; `{}` when not parseable."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if body is not None else {}


def _extract_message_content(data):
    """Return `choices[0].message.content` or `None` when any level is missing."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not choices or not isinstance(choices, list):
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def send_openai_request(config: OpenAICallConfig, prompt: str) -> str:
    """Send one chat-completions request.

    Args:
        config: Resolved OpenAI-compatible call config.
        prompt: Fully built analysis prompt.

    Returns:
        Message content, or `EMPTY_RESPONSE_PLACEHOLDER` when the provider
        answered successfully without content.

    Raises:
        ProviderTransportError: The request raised before any response arrived.
        ProviderRejectionError: Non-2xx status.
        ProviderError: Success status with a body that is not JSON.
    """
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }

    try:
        response = requests.post(
            config.endpoint,
            headers=headers,
            json=build_openai_payload(config, prompt),
        )
    except requests.exceptions.RequestException as err:
        logger.exception("OpenAI-compatible request to %s failed", config.endpoint)
        raise ProviderTransportError(f"Request to {config.endpoint} failed: {err}") from err

    if not 200 <= response.status_code < 300:
        body = _parse_error_body(response)
        logger.error(
            "OpenAI-compatible endpoint rejected request status=%s reason=%s",
            response.status_code,
            response.reason,
        )
        raise ProviderRejectionError(
            f"API Error: {response.status_code} {response.reason or ''} - "
            f"{json.dumps(body, ensure_ascii=False)}",
            status_code=response.status_code,
            reason=response.reason or "",
            body=body,
        )

    try:
        data = response.json()
    except ValueError as err:
        logger.exception("OpenAI-compatible endpoint returned a non-JSON body")
        raise ProviderError("Provider returned a response that is not valid JSON.") from err

    content = _extract_message_content(data)
    if not content:
        logger.warning("OpenAI-compatible endpoint returned no message content")
        return EMPTY_RESPONSE_PLACEHOLDER

    return content


# =========================================================
# GOOGLE GEMINI
# =========================================================

def create_gemini_client(api_key: str):
    """Default factory for the Gemini SDK client."""
    return genai.Client(api_key=api_key)


def build_generation_config(config: GoogleCallConfig):
    """Return the SDK generation config, or `None` when nothing needs sending.

    Only a thinking budget is ever configured, and only for models resolved as
    reasoning-capable.
    """
    if config.thinking_budget is None:
        return None
    return types.GenerateContentConfig(
        thinking_config=types.ThinkingConfig(thinking_budget=config.thinking_budget),
    )


def send_google_request(config: GoogleCallConfig, prompt: str, client_factory=None) -> str:
    """Send one `generate_content` call through the Gemini SDK.

    Args:
        config: Resolved Gemini call config.
        prompt: Fully built analysis prompt, sent as the sole content.
        client_factory: Callable `api_key -> client`; defaults to
            `create_gemini_client`.

    Raises:
        ProviderRejectionError: The API answered with an error status.
        ProviderTransportError: The HTTP layer failed.
        EmptyResponseError: The response carries no text.
    """
    factory = client_factory or create_gemini_client

    try:
        client = factory(config.api_key)
        response = client.models.generate_content(
            model=config.model_name,
            contents=prompt,
            config=build_generation_config(config),
        )
    except genai_errors.APIError as err:
        logger.error("Gemini API error code=%s status=%s", err.code, err.status)
        raise ProviderRejectionError(
            f"Gemini API Error: {err.code} {err.status or ''} - {err.message or ''}",
            status_code=err.code,
            reason=err.status or "",
            body=err.details or {},
        ) from err
    except httpx.HTTPError as err:
        logger.exception("Gemini request failed model=%s", config.model_name)
        raise ProviderTransportError(f"Gemini request failed: {err}") from err
    except ValueError as err:
        # Covers genai_errors.UnknownApiResponseError and client construction failures.
        logger.exception("Gemini returned an unusable response model=%s", config.model_name)
        raise ProviderError(f"Gemini request failed: {err}") from err

    text = getattr(response, "text", None)
    if not text:
        raise EmptyResponseError("The model produced no response.")
    return text
