"""Provider settings, defaults, and branch-specific call configuration.

Architectural role:
    Centralizes the settings value owned by callers (`ProviderConfig`), the
    constant defaults it resets to, and the resolution of those settings into one
    of two branch-specific call configurations consumed by `strategist.llm.client`.

Model call flow integration:
    - Adapters hold a `ProviderConfig` and transform it with `update_settings` /
      `reset_settings`.
    - `service.AnalysisDispatcher` calls `resolve_call_config` once per request.
    - `client` sends the request described by the resolved call config.

Determinism:
    Every function here is pure except `load_key` / `load_ambient_credential`,
    which read the process environment and key files. The dispatcher never calls
    those two itself; adapters resolve the ambient credential and inject it.

Failure behavior:
    Incomplete settings raise `ProviderConfigurationError` naming the missing
    field, before any network I/O happens.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from dotenv import load_dotenv

from strategist.llm.errors import ProviderConfigurationError

load_dotenv()


class ProviderKind(str, Enum):
    """Supported provider families."""

    GOOGLE = "google"
    OPENAI = "openai"


# Accepted spellings for the OpenAI-compatible branch.
_PROVIDER_ALIASES = {
    "openai-compatible": ProviderKind.OPENAI,
    "openai_compatible": ProviderKind.OPENAI,
    "gemini": ProviderKind.GOOGLE,
}

DEFAULT_GOOGLE_MODEL = "gemini-3-pro-preview"
THINKING_BUDGET = 8192
# Models whose name contains this marker receive a thinking budget.
THINKING_MODEL_MARKER = "gemini"

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"
OPENAI_TEMPERATURE = 0.7

# Environment variables checked, in order, for the ambient Google credential.
AMBIENT_CREDENTIAL_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def parse_provider(value) -> ProviderKind:
    """Coerce a provider label into a `ProviderKind`.

    Raises:
        ProviderConfigurationError: For labels outside the supported set.
    """
    if isinstance(value, ProviderKind):
        return value

    label = str(value or "").strip().lower()
    if label in _PROVIDER_ALIASES:
        return _PROVIDER_ALIASES[label]
    try:
        return ProviderKind(label)
    except ValueError:
        raise ProviderConfigurationError(f"Unsupported provider: {value!r}") from None


@dataclass(frozen=True)
class ProviderConfig:
    """Caller-owned provider settings for one analysis call.

    Attributes:
        provider: Provider family.
        api_key: Credential; may be empty for Google when an ambient credential
            is available.
        base_url: Endpoint root or full chat-completions URL (OpenAI-compatible only).
        model_name: Model identifier; may be empty for Google.
    """

    provider: ProviderKind = ProviderKind.GOOGLE
    api_key: str = ""
    base_url: str = ""
    model_name: str = DEFAULT_GOOGLE_MODEL

    def __post_init__(self):
        object.__setattr__(self, "provider", parse_provider(self.provider))

    def redacted(self) -> dict:
        """Return a display-safe mapping with the key masked."""
        return {
            "provider": self.provider.value,
            "api_key_set": bool(self.api_key),
            "base_url": self.base_url,
            "model_name": self.model_name,
        }


DEFAULT_SETTINGS = ProviderConfig(
    provider=ProviderKind.GOOGLE,
    api_key="",
    base_url="",
    model_name=DEFAULT_GOOGLE_MODEL,
)


def update_settings(current: ProviderConfig, **changes) -> ProviderConfig:
    """Return a copy of `current` with `changes` applied.

    `None` values are ignored so partial updates can be forwarded unchanged.
    """
    changes = {name: value for name, value in changes.items() if value is not None}
    return replace(current, **changes)


def reset_settings() -> ProviderConfig:
    """Return the default settings."""
    return DEFAULT_SETTINGS


# =========================================================
# BRANCH-SPECIFIC CALL CONFIGURATION
# =========================================================

@dataclass(frozen=True)
class GoogleCallConfig:
    """Resolved Gemini call parameters."""

    api_key: str
    model_name: str
    thinking_budget: Optional[int] = None


@dataclass(frozen=True)
class OpenAICallConfig:
    """Resolved OpenAI-compatible call parameters."""

    api_key: str
    endpoint: str
    model_name: str
    temperature: float = OPENAI_TEMPERATURE


CallConfig = Union[GoogleCallConfig, OpenAICallConfig]


def normalize_endpoint(base_url: str) -> str:
    """Turn a base URL into a chat-completions endpoint.

    Trailing slashes are removed and `/chat/completions` is appended unless the
    URL already ends with it, so the result is idempotent.
    """
    url = (base_url or "").strip().rstrip("/")
    if url.endswith(CHAT_COMPLETIONS_SUFFIX):
        return url
    return url + CHAT_COMPLETIONS_SUFFIX


def supports_thinking(model_name: str) -> bool:
    """Return whether the model name indicates the reasoning-capable family."""
    return THINKING_MODEL_MARKER in (model_name or "").lower()


def resolve_call_config(settings: ProviderConfig, ambient_credential: Optional[str] = None) -> CallConfig:
    """Validate `settings` and build the call config for its provider branch.

    Args:
        settings: Caller-owned provider settings.
        ambient_credential: Fallback Google key injected by the dispatcher owner.

    Returns:
        `GoogleCallConfig` or `OpenAICallConfig`.

    Raises:
        ProviderConfigurationError: When a required field is missing.
    """
    provider = parse_provider(settings.provider)

    if provider is ProviderKind.OPENAI:
        api_key = (settings.api_key or "").strip()
        base_url = (settings.base_url or "").strip()
        model_name = (settings.model_name or "").strip()

        if not api_key:
            raise ProviderConfigurationError("API key is required for the OpenAI-compatible provider.")
        if not base_url:
            raise ProviderConfigurationError("Base URL is required for the OpenAI-compatible provider.")
        if not model_name:
            raise ProviderConfigurationError("Model name is required for the OpenAI-compatible provider.")

        return OpenAICallConfig(
            api_key=api_key,
            endpoint=normalize_endpoint(base_url),
            model_name=model_name,
        )

    if provider is ProviderKind.GOOGLE:
        api_key = (settings.api_key or "").strip() or (ambient_credential or "").strip()
        if not api_key:
            raise ProviderConfigurationError(
                "No credential configured: set an API key or the GEMINI_API_KEY environment variable."
            )

        model_name = (settings.model_name or "").strip() or DEFAULT_GOOGLE_MODEL
        return GoogleCallConfig(
            api_key=api_key,
            model_name=model_name,
            thinking_budget=THINKING_BUDGET if supports_thinking(model_name) else None,
        )

    raise ProviderConfigurationError(f"Unsupported provider: {provider!r}")


# =========================================================
# CREDENTIAL LOOKUP
# =========================================================

def load_key(path):
    """Load an API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/gemini.key` -> `GEMINI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def load_ambient_credential(key_file: str = "config/gemini.key") -> Optional[str]:
    """Resolve the process-level Google credential for adapters.

    Checks `AMBIENT_CREDENTIAL_ENV_VARS` in order, then `key_file`.
    """
    for name in AMBIENT_CREDENTIAL_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return load_key(key_file)
