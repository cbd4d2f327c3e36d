"""Uploaded documents and the positioned text fragments pulled out of PDFs."""
from pydantic import BaseModel, Field, field_validator

DEFAULT_IDENTIFIER = "default"
PDF_MEDIA_TYPE = "application/pdf"


class TextFragment(BaseModel):
    """One positioned run of text from a PDF content stream."""
    text: str
    baseline: float  # vertical coordinate; only differences matter


class PageFragments(BaseModel):
    """Fragments of a single page, in content-stream order."""
    page_number: int  # 1-indexed
    fragments: list[TextFragment] = Field(default_factory=list)

    @field_validator('page_number')
    @classmethod
    def validate_page_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError('page_number must be >= 1')
        return v


class UploadedDocument(BaseModel):
    """Raw upload; lives only for one upload-then-read cycle."""
    content: bytes
    media_type: str = ""
    filename: str = ""
    identifier: str = DEFAULT_IDENTIFIER

    @field_validator('identifier', mode='before')
    @classmethod
    def default_identifier(cls, v):
        """Absent or blank identifiers fall back to the shared sentinel."""
        if v is None or (isinstance(v, str) and v == ""):
            return DEFAULT_IDENTIFIER
        return v

    @property
    def is_pdf(self) -> bool:
        media_type = (self.media_type or "").split(";", 1)[0].strip().lower()
        return media_type == PDF_MEDIA_TYPE


class UploadResult(BaseModel):
    """Response body for a successful upload."""
    message: str
    text: str | None = None  # set for PDFs
    filename: str | None = None  # set for everything else
