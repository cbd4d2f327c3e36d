"""Cached reconstructed text for one caller identifier."""
from pydantic import BaseModel, field_validator


class ExtractedText(BaseModel):
    """Most recent extraction for an identifier (at most one per identifier)."""
    identifier: str
    num_pages: int = 0
    full_text: str = ""  # all pages, blank-line separated
    extracted_at: str  # ISO timestamp
    
    @field_validator('num_pages')
    @classmethod
    def validate_num_pages(cls, v: int) -> int:
        """Ensure num_pages is non-negative."""
        if v < 0:
            raise ValueError('num_pages must be non-negative')
        return v
