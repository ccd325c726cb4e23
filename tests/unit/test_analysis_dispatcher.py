import httpx
import pytest
import requests
from google.genai import errors as genai_errors

from strategist.core.analysis_types import AnalysisRequest
from strategist.llm.client import EMPTY_RESPONSE_PLACEHOLDER
from strategist.llm.errors import (
    EmptyResponseError,
    ProviderConfigurationError,
    ProviderError,
    ProviderRejectionError,
    ProviderTransportError,
)
from strategist.llm.provider_config import ProviderConfig
from strategist.llm.service import AnalysisDispatcher


def _openai_request(base_url="https://x.test", api_key="sk-test", model_name="deepseek-chat"):
    return AnalysisRequest(
        field="Perovskite solar cells",
        literature_data="2024  Nature Energy  Interface engineering",
        settings=ProviderConfig(provider="openai", api_key=api_key, base_url=base_url, model_name=model_name),
    )


def _google_request(model_name="gemini-3-pro-preview", api_key=""):
    return AnalysisRequest(
        field="Alzheimer drug discovery",
        literature_data="2023  Cell  Amyloid clearance",
        settings=ProviderConfig(provider="google", api_key=api_key, model_name=model_name),
    )


# ---------------------------------------------------------
# OpenAI-compatible branch
# ---------------------------------------------------------

def test_openai_success_returns_message_content(fake_post, http_response):
    post = fake_post(http_response(body={"choices": [{"message": {"content": "Report text"}}]}))

    out = AnalysisDispatcher().analyze(_openai_request())

    assert out == "Report text"
    assert len(post.calls) == 1


def test_openai_request_shape(fake_post, http_response):
    post = fake_post(http_response(body={"choices": [{"message": {"content": "ok"}}]}))
    request = _openai_request()

    AnalysisDispatcher().analyze(request)

    call = post.calls[0]
    assert call["url"] == "https://x.test/chat/completions"
    assert call["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer sk-test",
    }
    body = call["json"]
    assert body["model"] == "deepseek-chat"
    assert body["temperature"] == 0.7
    assert len(body["messages"]) == 1
    assert body["messages"][0]["role"] == "user"
    assert request.field in body["messages"][0]["content"]
    assert request.literature_data in body["messages"][0]["content"]


def test_openai_full_endpoint_is_not_extended(fake_post, http_response):
    post = fake_post(http_response(body={"choices": [{"message": {"content": "ok"}}]}))

    AnalysisDispatcher().analyze(_openai_request(base_url="https://x.test/chat/completions"))

    assert post.calls[0]["url"] == "https://x.test/chat/completions"


def test_openai_missing_key_fails_before_network(fake_post):
    post = fake_post()

    with pytest.raises(ProviderConfigurationError, match="API key"):
        AnalysisDispatcher().analyze(_openai_request(api_key=""))

    assert post.calls == []


def test_openai_error_status_is_reported(fake_post, http_response):
    fake_post(http_response(status_code=500, reason="Internal Server Error", body={"error": {"message": "boom"}}))

    with pytest.raises(ProviderRejectionError) as excinfo:
        AnalysisDispatcher().analyze(_openai_request())

    err = excinfo.value
    assert "500" in str(err)
    assert "Internal Server Error" in str(err)
    assert "boom" in str(err)
    assert err.status_code == 500
    assert err.body == {"error": {"message": "boom"}}


def test_openai_unparseable_error_body_falls_back_to_empty(fake_post, http_response):
    fake_post(http_response(status_code=401, reason="Unauthorized", body=None))

    with pytest.raises(ProviderRejectionError) as excinfo:
        AnalysisDispatcher().analyze(_openai_request())

    assert excinfo.value.body == {}
    assert "401" in excinfo.value.message


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": ""}}]},
        {},
    ],
)
def test_openai_empty_content_is_soft_placeholder(fake_post, http_response, body):
    fake_post(http_response(body=body))

    assert AnalysisDispatcher().analyze(_openai_request()) == EMPTY_RESPONSE_PLACEHOLDER


def test_openai_transport_error_keeps_cause(fake_post):
    cause = requests.exceptions.ConnectionError("dns failure")
    fake_post(exc=cause)

    with pytest.raises(ProviderTransportError) as excinfo:
        AnalysisDispatcher().analyze(_openai_request())

    assert excinfo.value.__cause__ is cause


def test_openai_non_json_success_body_fails(fake_post, http_response):
    fake_post(http_response(status_code=200, body=None))

    with pytest.raises(ProviderError):
        AnalysisDispatcher().analyze(_openai_request())


# ---------------------------------------------------------
# Google branch
# ---------------------------------------------------------

def test_google_uses_ambient_credential_and_thinking_config(gemini_factory):
    factory = gemini_factory(text="Gemini report")
    dispatcher = AnalysisDispatcher(ambient_credential="env-key", gemini_client_factory=factory)

    out = dispatcher.analyze(_google_request())

    assert out == "Gemini report"
    assert factory.api_keys == ["env-key"]
    call = factory.models.calls[0]
    assert call["model"] == "gemini-3-pro-preview"
    assert "Alzheimer drug discovery" in call["contents"]
    assert call["config"].thinking_config.thinking_budget == 8192


def test_google_non_gemini_model_omits_thinking_config(gemini_factory):
    factory = gemini_factory()
    dispatcher = AnalysisDispatcher(gemini_client_factory=factory)

    dispatcher.analyze(_google_request(model_name="custom-model", api_key="k"))

    call = factory.models.calls[0]
    assert call["model"] == "custom-model"
    assert call["config"] is None


def test_google_blank_model_uses_default(gemini_factory):
    factory = gemini_factory()

    AnalysisDispatcher(gemini_client_factory=factory).analyze(_google_request(model_name="", api_key="k"))

    assert factory.models.calls[0]["model"] == "gemini-3-pro-preview"


def test_google_without_any_credential_fails_before_client(gemini_factory):
    factory = gemini_factory()

    with pytest.raises(ProviderConfigurationError, match="No credential configured"):
        AnalysisDispatcher(gemini_client_factory=factory).analyze(_google_request())

    assert factory.api_keys == []


def test_google_empty_text_is_hard_failure(gemini_factory, fake_post, http_response):
    factory = gemini_factory(text="")

    with pytest.raises(EmptyResponseError, match="no response"):
        AnalysisDispatcher(ambient_credential="k", gemini_client_factory=factory).analyze(_google_request())

    # Same empty-content scenario on the other branch degrades instead of failing.
    fake_post(http_response(body={"choices": [{"message": {"content": ""}}]}))
    assert AnalysisDispatcher().analyze(_openai_request()) == EMPTY_RESPONSE_PLACEHOLDER


def test_google_transport_error_keeps_cause(gemini_factory):
    cause = httpx.ConnectError("connection refused")
    factory = gemini_factory(exc=cause)

    with pytest.raises(ProviderTransportError) as excinfo:
        AnalysisDispatcher(ambient_credential="k", gemini_client_factory=factory).analyze(_google_request())

    assert excinfo.value.__cause__ is cause


def test_google_api_error_is_rejection(gemini_factory):
    cause = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
    )
    factory = gemini_factory(exc=cause)

    with pytest.raises(ProviderRejectionError) as excinfo:
        AnalysisDispatcher(ambient_credential="k", gemini_client_factory=factory).analyze(_google_request())

    assert excinfo.value.status_code == 429
    assert "429" in excinfo.value.message
    assert excinfo.value.__cause__ is cause


def test_google_unparseable_response_is_provider_error(gemini_factory):
    cause = ValueError("Failed to parse response body as JSON")
    factory = gemini_factory(exc=cause)

    with pytest.raises(ProviderError) as excinfo:
        AnalysisDispatcher(ambient_credential="k", gemini_client_factory=factory).analyze(_google_request())

    assert "Failed to parse response body" in excinfo.value.message
    assert excinfo.value.__cause__ is cause


def test_google_unusable_response_reaches_engine_as_outcome(gemini_factory):
    from strategist.core.engine import process_analysis

    factory = gemini_factory(exc=ValueError("unexpected payload"))
    dispatcher = AnalysisDispatcher(ambient_credential="k", gemini_client_factory=factory)

    outcome = process_analysis(_google_request(), dispatcher)

    assert outcome.error_kind == "provider"
    assert "unexpected payload" in outcome.error
