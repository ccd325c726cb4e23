"""Exception taxonomy for provider dispatch.

Architectural role:
    Gives `strategist.llm.service` and `strategist.llm.client` one family of
    exceptions to raise, so adapters can present a single human-readable message
    without inspecting provider-specific error types.

Taxonomy:
    - `ProviderConfigurationError`: missing key/URL/model or unknown provider,
      detected before any network I/O.
    - `ProviderTransportError`: network/DNS/timeout failure, cause attached.
    - `ProviderRejectionError`: non-2xx upstream status with best-effort body.
    - `EmptyResponseError`: provider returned no text where text is mandatory.

Failure handling:
    Every class derives from `ProviderError`. Underlying causes are attached with
    `raise ... from exc` and remain available as `__cause__`.
"""


class ProviderError(Exception):
    """Base class for every failure surfaced by the analysis pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderConfigurationError(ProviderError):
    """Settings are incomplete or inconsistent for the selected provider."""


class ProviderTransportError(ProviderError):
    """The request never produced an HTTP response."""


class ProviderRejectionError(ProviderError):
    """Upstream answered with a non-success status.

    Attributes:
        status_code: HTTP status code, when known.
        reason: HTTP status text, when known.
        body: Parsed error body, or `{}` when it could not be parsed.
    """

    def __init__(self, message: str, status_code=None, reason: str = "", body=None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body if body is not None else {}


class EmptyResponseError(ProviderError):
    """Provider returned successfully but without any text."""
