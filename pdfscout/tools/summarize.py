"""Summarize cached document text with Gemini."""
import asyncio
import logging
from typing import AsyncIterator, Optional

from google import genai
from google.genai import types

from pdfscout.config import Settings
from pdfscout.errors import ConfigurationError, ProviderEmptyResult, UpstreamError
from pdfscout.models.summary import NO_TOKENS_MESSAGE

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = "Summarize this content clearly\n\n{text}"
PROVIDER_FAILURE = "Failed to generate summary"


def make_client(settings: Settings) -> genai.Client:
    """Build a Gemini client from configured credentials."""
    if not settings.google_api_key:
        raise ConfigurationError("GOOGLE_API_KEY not found")
    return genai.Client(api_key=settings.google_api_key)


def build_contents(text: str) -> list[types.Content]:
    """A single user-role turn embedding the document text."""
    return [
        types.Content(
            role="user",
            parts=[types.Part(text=SUMMARY_PROMPT.format(text=text))]
        )
    ]


async def summarize_text(text: str, client: genai.Client, settings: Settings) -> str:
    """
    Ask the model for a summary of text.

    Streams by default and concatenates the deltas; the whole exchange is
    bounded by ``settings.summary_timeout`` and can be cancelled by the
    caller at any await point.

    Raises:
        ProviderEmptyResult: the model answered with no candidates/text
        UpstreamError: the provider call failed or timed out
    """
    if settings.summary_stream:
        call = _collect(_stream_deltas(text, client, settings.summary_model))
    else:
        call = _generate_once(text, client, settings.summary_model)

    try:
        summary = await asyncio.wait_for(call, settings.summary_timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"Summary timed out after {settings.summary_timeout:g}s")
        raise UpstreamError(PROVIDER_FAILURE, details="timed out") from e
    except Exception as e:
        logger.exception("Summary request failed")
        raise UpstreamError(PROVIDER_FAILURE) from e

    if not summary:
        raise ProviderEmptyResult(NO_TOKENS_MESSAGE)
    return summary


async def _stream_deltas(text: str, client: genai.Client, model: str) -> AsyncIterator[str]:
    """Yield text deltas from a streamed generation as they arrive."""
    stream = await client.aio.models.generate_content_stream(
        model=model,
        contents=build_contents(text),
    )
    async for chunk in stream:
        delta = _first_candidate_text(chunk)
        if delta:
            yield delta


async def _collect(deltas: AsyncIterator[str]) -> str:
    parts = [delta async for delta in deltas]
    return "".join(parts)


async def _generate_once(text: str, client: genai.Client, model: str) -> str:
    response = await client.aio.models.generate_content(
        model=model,
        contents=build_contents(text),
    )
    return _first_candidate_text(response) or ""


def _first_candidate_text(response: types.GenerateContentResponse) -> Optional[str]:
    """Concatenate the text parts of the first candidate, if there is one."""
    candidates = response.candidates or []
    if not candidates:
        return None

    content = candidates[0].content
    if content is None or not content.parts:
        return None
    return "".join(part.text for part in content.parts if part.text)
