"""
HTTP API adapter for the strategic analysis pipeline.

Architectural role:
- Expose the analysis form and its settings panel as JSON endpoints.
- Enforce adapter-level input validation.
- Delegate analysis work to `strategist.core.engine.process_analysis`.
- Map outcomes to HTTP status codes.

Endpoint responsibilities:
- `GET /v1/health`: liveness probe.
- `GET /v1/settings`: current session settings (key redacted).
- `PUT /v1/settings`: partial settings update.
- `POST /v1/settings/reset`: restore default settings.
- `POST /v1/analysis`: validate input, run one analysis, return the report.

Settings lifecycle:
- One `ProviderConfig` is held in `app.state.settings` for the process lifetime.
- It is volatile: a restart returns to `DEFAULT_SETTINGS`.
- Requests may carry per-call overrides that are applied on top of the session
  settings without modifying them.

Error handling strategy:
- Blank inputs and unknown providers -> HTTP 400.
- Missing provider credentials/URL/model -> HTTP 400.
- Transport/upstream/empty-result failures -> HTTP 502.
- Unexpected exceptions follow FastAPI default handling.

Concurrency:
- `POST /v1/analysis` is a plain `def` route, so the blocking provider call runs
  in the server threadpool. Overlapping submissions are not deduplicated.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Resolves the ambient Google credential once at import time.
- Emits request debug logs only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from strategist.core.analysis_types import AnalysisRequest
from strategist.core.engine import InvalidSubmissionError, process_analysis
from strategist.llm.errors import ProviderConfigurationError
from strategist.llm.provider_config import (
    DEFAULT_SETTINGS,
    load_ambient_credential,
    reset_settings,
    update_settings,
)
from strategist.llm.service import AnalysisDispatcher


logger = logging.getLogger(__name__)

app = FastAPI(title="Academic Strategy Analyst")
# Request debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"

app.state.settings = DEFAULT_SETTINGS
app.state.dispatcher = AnalysisDispatcher(ambient_credential=load_ambient_credential())


# ============================================================
# Request Schemas
# ============================================================

class SettingsPayload(BaseModel):
    """Partial provider settings; omitted fields keep their current value."""
    model_config = ConfigDict(protected_namespaces=())

    provider: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model_name: Optional[str] = None


class AnalysisPayload(BaseModel):
    """One analysis submission."""
    field: str = ""
    literature_data: str = ""
    settings: Optional[SettingsPayload] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _settings_response(settings) -> dict:
    return {
        "settings": settings.redacted(),
        "ambient_credential": app.state.dispatcher.has_ambient_credential,
    }


# ============================================================
# Health
# ============================================================

@app.get("/v1/health")
def health():
    """Return a static liveness payload."""
    return {"status": "ok"}


# ============================================================
# Settings
# ============================================================

@app.get("/v1/settings")
def get_settings():
    """Return the current session settings with the API key masked."""
    return _settings_response(app.state.settings)


@app.put("/v1/settings")
def put_settings(payload: SettingsPayload):
    """Apply a partial settings update to the session.

    Input validation behavior:
    - Unknown provider label -> HTTP 400, session settings unchanged.
    """
    try:
        app.state.settings = update_settings(app.state.settings, **payload.model_dump())
    except ProviderConfigurationError as exc:
        return _error(400, exc.message)

    if DEBUG:
        logger.info("Settings updated: %s", app.state.settings.redacted())
    return _settings_response(app.state.settings)


@app.post("/v1/settings/reset")
def post_settings_reset():
    """Restore `DEFAULT_SETTINGS` for the session."""
    app.state.settings = reset_settings()
    return _settings_response(app.state.settings)


# ============================================================
# Analysis
# ============================================================

@app.post("/v1/analysis")
def post_analysis(payload: AnalysisPayload):
    """
    Run one strategic analysis.

    API request lifecycle:
    1. Resolve effective settings (session settings plus optional overrides).
    2. Validate that field and literature data are non-blank.
    3. Run the dispatcher once through `process_analysis`.
    4. Return `{"report": ...}` or an error payload.
    """
    settings = app.state.settings
    if payload.settings is not None:
        try:
            settings = update_settings(settings, **payload.settings.model_dump())
        except ProviderConfigurationError as exc:
            return _error(400, exc.message)

    if DEBUG:
        logger.info(
            "Analysis request field=%r literature_chars=%d settings=%s",
            payload.field,
            len(payload.literature_data),
            settings.redacted(),
        )

    request = AnalysisRequest(
        field=payload.field,
        literature_data=payload.literature_data,
        settings=settings,
    )

    try:
        outcome = process_analysis(request, app.state.dispatcher)
    except InvalidSubmissionError as exc:
        return _error(400, str(exc))

    if not outcome.ok:
        status_code = 400 if outcome.error_kind == "configuration" else 502
        return _error(status_code, outcome.error)

    return {"report": outcome.report}
