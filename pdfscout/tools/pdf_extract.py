"""Pull positioned text fragments out of PDFs using PyMuPDF with pdfplumber fallback."""
import logging
from pathlib import Path
from typing import Optional

from pdfscout.errors import ProcessingError
from pdfscout.models.document import PageFragments, TextFragment
from pdfscout.tools.line_rebuild import rebuild_document_text

logger = logging.getLogger(__name__)


def extract_page_fragments(file_path: Path) -> list[PageFragments]:
    """
    Extract text fragments with baselines from every page of a PDF.

    Uses PyMuPDF (fitz) as primary method, falls back to pdfplumber if needed.

    Raises:
        ProcessingError: if neither backend can read the file
    """
    # Try PyMuPDF first
    pages, pymupdf_error = _fragments_with_pymupdf(file_path)
    if pages is not None:
        return pages
    logger.warning(f"PyMuPDF could not read {file_path.name} ({pymupdf_error}), trying pdfplumber")

    # Fallback to pdfplumber
    pages, plumber_error = _fragments_with_pdfplumber(file_path)
    if pages is not None:
        return pages

    # Both failed
    raise ProcessingError(
        "File processing failed",
        details=str(plumber_error or pymupdf_error or "Unknown extraction error")
    )


def extract_pdf_text(file_path: Path) -> tuple[str, int]:
    """Extract and rebuild the full text of a PDF. Returns (text, num_pages)."""
    pages = extract_page_fragments(file_path)
    return rebuild_document_text(pages), len(pages)


def _fragments_with_pymupdf(
    file_path: Path
) -> tuple[Optional[list[PageFragments]], Optional[Exception]]:
    """Each span is one fragment; its origin y is the baseline."""
    try:
        import fitz

        pages = []
        # always parse as PDF, whatever extension the upload carried
        with fitz.open(file_path, filetype="pdf") as doc:
            for page_num, page in enumerate(doc, start=1):
                fragments = []
                # sort=False keeps content-stream order
                layout = page.get_text("dict", sort=False)
                for block in layout.get("blocks", []):
                    if block.get("type", 0) != 0:
                        continue  # image block
                    for line in block.get("lines", []):
                        for span in line.get("spans", []):
                            fragments.append(
                                TextFragment(text=span["text"], baseline=span["origin"][1])
                            )
                pages.append(PageFragments(page_number=page_num, fragments=fragments))

        return pages, None
    except Exception as e:
        return None, e


def _fragments_with_pdfplumber(
    file_path: Path
) -> tuple[Optional[list[PageFragments]], Optional[Exception]]:
    """Each word is one fragment; its bottom edge stands in for the baseline."""
    try:
        import pdfplumber

        pages = []
        with pdfplumber.open(file_path) as pdf:
            for page_num, page in enumerate(pdf.pages, start=1):
                words = page.extract_words(keep_blank_chars=True, use_text_flow=True)
                fragments = [
                    TextFragment(text=word["text"], baseline=word["bottom"])
                    for word in words
                ]
                pages.append(PageFragments(page_number=page_num, fragments=fragments))

        return pages, None
    except Exception as e:
        return None, e
