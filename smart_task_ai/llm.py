from __future__ import annotations

from typing import Any, Optional

from openai import APIError, OpenAI, OpenAIError

from smart_task_ai.config import DEFAULT_MODEL, Settings, load_settings

DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_MAX_OUTPUT_TOKENS = 1200


class LLMError(RuntimeError):
    """Raised when an OpenAI call fails or returns no text."""


def get_default_model(settings: Optional[Settings] = None) -> str:
    """Return the configured model name (``OPENAI_MODEL``) or the default."""

    return (settings or load_settings()).openai_model


def get_openai_client(settings: Optional[Settings] = None) -> Optional[OpenAI]:
    """Create an OpenAI client from the loaded settings; ``None`` without an API key."""

    active = settings or load_settings()
    api_key = active.openai_api_key
    if not api_key:
        return None

    base_url = active.openai_base_url
    client_kwargs: dict[str, str] = {"api_key": api_key}
    if base_url:
        client_kwargs["base_url"] = base_url

    return OpenAI(**client_kwargs)  # type: ignore[arg-type]


def _responses_resource(client: OpenAI, timeout: float) -> Any:
    return client.responses.with_options(timeout=timeout)  # type: ignore[attr-defined]


def request_text_response(
    *,
    client: OpenAI,
    model: str,
    prompt: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> str:
    """Send one prompt to the Responses API and return the generated text.

    A single attempt is made; every failure surfaces as ``LLMError``.
    """

    try:
        response = _responses_resource(client, timeout).create(
            model=model,
            input=prompt,
            max_output_tokens=max_output_tokens,
        )
    except APIError as exc:
        raise LLMError("OpenAI API rejected the request.") from exc
    except OpenAIError as exc:
        raise LLMError("OpenAI request failed.") from exc
    except Exception as exc:  # noqa: BLE001
        raise LLMError("Unexpected error during OpenAI call.") from exc

    text = getattr(response, "output_text", None)
    if not text or not str(text).strip():
        raise LLMError("No text returned by the model.")
    return str(text)


__all__ = [
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT_SECONDS",
    "LLMError",
    "get_default_model",
    "get_openai_client",
    "request_text_response",
]
