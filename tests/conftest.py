"""Shared fixtures: generated PDFs and a fake async Gemini client."""
import asyncio
from pathlib import Path
from types import SimpleNamespace

import fitz
import pytest
from google.genai import types

from pdfscout.config import Settings


def make_pdf(pages: list[list[tuple[float, str]]]) -> bytes:
    """Build a PDF; each page is a list of (baseline_y, text) lines."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for y, text in lines:
            page.insert_text((72, y), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def model_response(*texts: str) -> types.GenerateContentResponse:
    """A response whose first candidate carries the given text parts."""
    if not texts:
        return types.GenerateContentResponse(candidates=[])
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=t) for t in texts])
            )
        ]
    )


class FakeModels:
    """Stands in for ``client.aio.models``."""

    def __init__(self, chunks=None, response=None, error=None, delay=0.0):
        self.chunks = chunks or []
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content_stream(self, model, contents):
        self.calls.append({"model": model, "contents": contents, "stream": True})
        if self.error:
            raise self.error

        async def deltas():
            for chunk in self.chunks:
                if self.delay:
                    await asyncio.sleep(self.delay)
                yield chunk

        return deltas()

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents, "stream": False})
        if self.error:
            raise self.error
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.response


def fake_genai(models: FakeModels) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=models))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        google_api_key=None,
        archive_base_url="https://archive.test",
        upload_dir=tmp_path / "uploads",
        summary_timeout=5.0,
    )
