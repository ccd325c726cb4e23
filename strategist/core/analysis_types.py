"""Request/outcome contracts for one analysis submission.

Architectural role:
    Defines the immutable input consumed by `strategist.llm.service` and the
    outcome shape returned by `strategist.core.engine` to adapters.

Determinism:
    Purely structural and state-free.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Optional

from strategist.llm.provider_config import DEFAULT_SETTINGS, ProviderConfig


@dataclass(frozen=True)
class AnalysisRequest:
    """One user submission.

    Attributes:
        field: Research field name.
        literature_data: Pasted literature metadata (year / venue / title rows).
        settings: Provider settings for this call only.
    """

    field: str
    literature_data: str
    settings: ProviderConfig = dataclass_field(default=DEFAULT_SETTINGS)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one submission as seen by an adapter.

    Exactly one of `report` / `error` is set. `error_kind` is
    `"configuration"` for settings problems detected before any network call and
    `"provider"` for every other failure.
    """

    report: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
