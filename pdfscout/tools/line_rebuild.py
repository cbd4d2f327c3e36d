"""Rebuild readable lines from positioned PDF text fragments.

Fragments on a page are joined with single spaces. A line break goes in
whenever a fragment's baseline moves more than LINE_BREAK_THRESHOLD units
away from the previous fragment's baseline. Only the magnitude of the
difference matters, so the coordinate origin and scale are irrelevant.
"""
from typing import Iterable, Sequence

from pdfscout.models.document import PageFragments, TextFragment

LINE_BREAK_THRESHOLD = 5.0
PAGE_SEPARATOR = "\n\n"


def rebuild_page_text(
    fragments: Iterable[TextFragment],
    threshold: float = LINE_BREAK_THRESHOLD
) -> str:
    """Join one page's fragments into text, breaking lines on baseline jumps."""
    lines: list[list[str]] = []
    last_baseline = None
    
    for fragment in fragments:
        if last_baseline is None or abs(last_baseline - fragment.baseline) > threshold:
            lines.append([])
        lines[-1].append(fragment.text)
        last_baseline = fragment.baseline
    
    return "\n".join(" ".join(words) for words in lines)


def rebuild_document_text(
    pages: Sequence[PageFragments],
    threshold: float = LINE_BREAK_THRESHOLD
) -> str:
    """
    Rebuild the text of a whole document.
    
    Pages are emitted in the order given, each followed by a blank line.
    The result has CRLF normalized to LF and is stripped, so empty pages
    only ever contribute separators.
    """
    full_text = "".join(
        rebuild_page_text(page.fragments, threshold) + PAGE_SEPARATOR
        for page in pages
    )
    return full_text.replace("\r\n", "\n").strip()
