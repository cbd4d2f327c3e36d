"""Search proxy request/response shapes."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchQuery(BaseModel):
    """Body of POST /api."""
    val: str = ""


class SearchResult(BaseModel):
    """One downloadable PDF asset of an archive item."""
    model_config = ConfigDict(populate_by_name=True)

    title: Any = None  # passed through as the archive returns it
    creator: Any = None
    year: Any = None
    pdf_link: str = Field(alias="pdfLink")
