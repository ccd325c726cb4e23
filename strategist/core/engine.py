"""Submission orchestration for strategic analysis.

Architectural role:
    Provides the execution step used by API/CLI adapters to turn one form
    submission into either a report or a user-facing error message.

Control-flow model:
    1. Validate that both inputs are non-blank.
    2. Build an immutable `AnalysisRequest`.
    3. Run the dispatcher once.
    4. Map the result to an `AnalysisOutcome`.

Error handling strategy:
    `ProviderError` is converted to a stable user-facing message and logged.
    Blank inputs raise `InvalidSubmissionError` so adapters can reject them before
    any provider work. Other exceptions propagate unchanged.

Side effects:
    None beyond the single provider call and log records.
"""

import logging
from typing import Optional

from strategist.core.analysis_types import AnalysisOutcome, AnalysisRequest
from strategist.llm.errors import ProviderConfigurationError, ProviderError
from strategist.llm.provider_config import DEFAULT_SETTINGS, ProviderConfig
from strategist.llm.service import AnalysisDispatcher


logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "分析服务暂时不可用，请稍后重试或检查 API Key。"


class InvalidSubmissionError(ValueError):
    """A required form input is blank."""


def validate_submission(field: str, literature_data: str) -> None:
    """Reject blank inputs.

    Raises:
        InvalidSubmissionError: Naming the first blank input.
    """
    if not (field or "").strip():
        raise InvalidSubmissionError("Research field is required.")
    if not (literature_data or "").strip():
        raise InvalidSubmissionError("Literature data is required.")


def process_analysis(request: AnalysisRequest, dispatcher: AnalysisDispatcher) -> AnalysisOutcome:
    """Run one validated request and wrap the result for adapters.

    Args:
        request: Immutable submission.
        dispatcher: Provider dispatcher owned by the adapter.

    Returns:
        `AnalysisOutcome` carrying either the report or the error message.

    Raises:
        InvalidSubmissionError: When either input is blank.
    """
    validate_submission(request.field, request.literature_data)

    try:
        report = dispatcher.analyze(request)
    except ProviderConfigurationError as exc:
        logger.warning("Analysis rejected by configuration: %s", exc.message)
        return AnalysisOutcome(error=exc.message or FALLBACK_ERROR_MESSAGE, error_kind="configuration")
    except ProviderError as exc:
        logger.error("Analysis failed: %s", exc.message, exc_info=exc)
        return AnalysisOutcome(error=exc.message or FALLBACK_ERROR_MESSAGE, error_kind="provider")

    return AnalysisOutcome(report=report)


def submit_analysis(
    field: str,
    literature_data: str,
    settings: Optional[ProviderConfig] = None,
    dispatcher: Optional[AnalysisDispatcher] = None,
) -> AnalysisOutcome:
    """Convenience wrapper building the request from raw form values."""
    request = AnalysisRequest(
        field=field,
        literature_data=literature_data,
        settings=settings or DEFAULT_SETTINGS,
    )
    return process_analysis(request, dispatcher or AnalysisDispatcher())
