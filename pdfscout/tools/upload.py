"""Orchestrator for uploads: store, extract if PDF, update the text cache."""
import asyncio
import logging
from pathlib import Path

from pdfscout.errors import ProcessingError
from pdfscout.models.document import UploadedDocument, UploadResult
from pdfscout.tools.pdf_extract import extract_pdf_text
from pdfscout.tools.text_cache import TextCache
from pdfscout.tools.upload_store import UploadStore

logger = logging.getLogger(__name__)

PDF_MESSAGE = "PDF processed successfully"
NOT_PDF_MESSAGE = "File uploaded, but not a PDF. No extraction done."


async def handle_upload(
    document: UploadedDocument,
    cache: TextCache,
    store: UploadStore,
    timeout: float = 60.0
) -> UploadResult:
    """
    Process one upload.

    PDFs are rebuilt into text and cached under the document's identifier;
    anything else resets that identifier's cached text to "". When
    extraction fails the cache is left exactly as it was.

    Raises:
        ProcessingError: the PDF could not be parsed in time
    """
    with store.isolated(document.filename) as path:
        await asyncio.to_thread(path.write_bytes, document.content)

        if not document.is_pdf:
            cache.set(document.identifier, "")
            logger.info(f"Stored non-PDF {document.filename} for {document.identifier!r}")
            return UploadResult(message=NOT_PDF_MESSAGE, filename=document.filename)

        logger.info(f"📄 Extracting text from {document.filename} for {document.identifier!r}...")
        text, num_pages = await _extract(path, timeout)

    cache.set(document.identifier, text, num_pages=num_pages)
    logger.info(f"✅ Extracted {num_pages} pages from {document.filename}")
    return UploadResult(message=PDF_MESSAGE, text=text)


async def _extract(path: Path, timeout: float) -> tuple[str, int]:
    try:
        return await asyncio.wait_for(asyncio.to_thread(extract_pdf_text, path), timeout)
    except asyncio.TimeoutError:
        raise ProcessingError(
            "File processing failed",
            details=f"Extraction timed out after {timeout:g}s"
        )
