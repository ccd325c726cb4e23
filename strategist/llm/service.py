"""Provider dispatcher for strategic analysis requests.

Architectural role:
    Provides the canonical analysis entrypoint used by `strategist.core.engine`.
    Bridges prompt construction (`strategist.prompting`) to transport
    (`strategist.llm.client`).

Model call flow:
    request -> prompt -> `resolve_call_config` (validation, endpoint
    normalization) -> branch transport -> report text.

State:
    The dispatcher holds only construction-time collaborators (ambient credential,
    template, Gemini client factory). Nothing is mutated per call, so concurrent
    calls are independent and are not deduplicated.

Failure scenarios:
    Configuration errors are raised before any network I/O. Transport and upstream
    failures are raised by `client` with the cause attached. Nothing is retried.
"""

import logging
from typing import Optional

from strategist.core.analysis_types import AnalysisRequest
from strategist.llm.client import send_google_request, send_openai_request
from strategist.llm.errors import ProviderConfigurationError
from strategist.llm.provider_config import (
    GoogleCallConfig,
    OpenAICallConfig,
    resolve_call_config,
)
from strategist.prompting.prompt_builder import STRATEGIC_ANALYSIS_PROMPT_TEMPLATE, build_prompt


logger = logging.getLogger(__name__)


class AnalysisDispatcher:
    """Run one analysis request against the provider selected by its settings.

    Args:
        ambient_credential: Fallback Google key used when settings carry none.
            Adapters resolve it (see `provider_config.load_ambient_credential`);
            the dispatcher never reads the environment itself.
        template: Prompt template; defaults to the strategic analysis template.
        gemini_client_factory: Callable `api_key -> client` for the Gemini SDK.
    """

    def __init__(
        self,
        ambient_credential: Optional[str] = None,
        template: str = STRATEGIC_ANALYSIS_PROMPT_TEMPLATE,
        gemini_client_factory=None,
    ):
        self._ambient_credential = ambient_credential
        self._template = template
        self._gemini_client_factory = gemini_client_factory

    @property
    def has_ambient_credential(self) -> bool:
        return bool(self._ambient_credential)

    def analyze(self, request: AnalysisRequest) -> str:
        """Build the prompt and dispatch exactly one provider call.

        Returns:
            Markdown report text.

        Raises:
            ProviderError: Any configuration, transport, upstream or empty-result
                failure (see `strategist.llm.errors`).
        """
        call_config = resolve_call_config(request.settings, self._ambient_credential)
        prompt = build_prompt(self._template, request.field, request.literature_data)

        if isinstance(call_config, OpenAICallConfig):
            logger.info(
                "Dispatching analysis provider=openai endpoint=%s model=%s prompt_chars=%d",
                call_config.endpoint,
                call_config.model_name,
                len(prompt),
            )
            return send_openai_request(call_config, prompt)

        if isinstance(call_config, GoogleCallConfig):
            logger.info(
                "Dispatching analysis provider=google model=%s thinking_budget=%s prompt_chars=%d",
                call_config.model_name,
                call_config.thinking_budget,
                len(prompt),
            )
            return send_google_request(
                call_config,
                prompt,
                client_factory=self._gemini_client_factory,
            )

        raise ProviderConfigurationError(f"Unsupported call configuration: {type(call_config).__name__}")
