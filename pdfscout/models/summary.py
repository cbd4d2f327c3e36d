"""Summarization proxy response shape."""
from pydantic import BaseModel

NO_TOKENS_MESSAGE = "No available tokens"


class SummaryResult(BaseModel):
    success: bool
    ai: str | None = None
    error: str | None = None
