"""Tests for pdfscout.tools.summarize."""
import asyncio

import pytest

from conftest import FakeModels, fake_genai, model_response
from pdfscout.config import Settings
from pdfscout.errors import ConfigurationError, ProviderEmptyResult, UpstreamError
from pdfscout.tools.summarize import make_client, summarize_text


def _summarize(text: str, models: FakeModels, settings: Settings) -> str:
    return asyncio.run(summarize_text(text, fake_genai(models), settings))


def test_streamed_deltas_are_concatenated(settings: Settings) -> None:
    models = FakeModels(chunks=[model_response("This is "), model_response("a summary.")])

    assert _summarize("doc text", models, settings) == "This is a summary."


def test_prompt_is_single_user_turn_with_text(settings: Settings) -> None:
    models = FakeModels(chunks=[model_response("ok")])
    _summarize("Hello World\nAgain", models, settings)

    call = models.calls[0]
    assert call["model"] == settings.summary_model
    assert len(call["contents"]) == 1
    content = call["contents"][0]
    assert content.role == "user"
    assert content.parts[0].text.startswith("Summarize this content clearly")
    assert "Hello World\nAgain" in content.parts[0].text


def test_non_streamed_uses_first_candidate(settings: Settings) -> None:
    settings = settings.model_copy(update={"summary_stream": False})
    models = FakeModels(response=model_response("Short ", "summary"))

    assert _summarize("doc", models, settings) == "Short summary"
    assert models.calls[0]["stream"] is False


def test_chunks_without_candidates_are_skipped(settings: Settings) -> None:
    models = FakeModels(chunks=[model_response(), model_response("text")])
    assert _summarize("doc", models, settings) == "text"


def test_empty_stream_is_empty_result(settings: Settings) -> None:
    models = FakeModels(chunks=[model_response()])
    with pytest.raises(ProviderEmptyResult):
        _summarize("doc", models, settings)


def test_no_candidates_is_empty_result(settings: Settings) -> None:
    settings = settings.model_copy(update={"summary_stream": False})
    with pytest.raises(ProviderEmptyResult):
        _summarize("doc", FakeModels(response=model_response()), settings)


def test_provider_error_is_upstream_error(settings: Settings) -> None:
    models = FakeModels(error=RuntimeError("quota exceeded: secret detail"))
    with pytest.raises(UpstreamError) as exc_info:
        _summarize("doc", models, settings)
    assert exc_info.value.message == "Failed to generate summary"
    assert "secret" not in exc_info.value.message


def test_slow_provider_times_out(settings: Settings) -> None:
    settings = settings.model_copy(update={"summary_timeout": 0.05})
    models = FakeModels(chunks=[model_response("late")], delay=1.0)
    with pytest.raises(UpstreamError):
        _summarize("doc", models, settings)


def test_empty_text_still_summarized(settings: Settings) -> None:
    models = FakeModels(chunks=[model_response("Nothing to summarize.")])
    assert _summarize("", models, settings) == "Nothing to summarize."


def test_make_client_requires_api_key(settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        make_client(settings)
