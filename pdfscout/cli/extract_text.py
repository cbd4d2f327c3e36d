"""CLI to rebuild the text of a local PDF, the same way uploads are processed."""
import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from pdfscout.errors import ProcessingError
from pdfscout.tools.pdf_extract import extract_pdf_text


console = Console()


def main():
    """Extract text from one PDF and print or save it."""
    parser = argparse.ArgumentParser(description="Rebuild the text of a PDF")
    parser.add_argument("pdf", type=Path, help="PDF file to read")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write text here instead of printing it"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()
    
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    
    if not args.pdf.is_file():
        console.print(f"[red]Error:[/red] {args.pdf} not found")
        sys.exit(1)
    
    try:
        with console.status(f"Extracting {args.pdf.name}..."):
            text, num_pages = extract_pdf_text(args.pdf)
    except ProcessingError as e:
        console.print(f"[red]{e.message}:[/red] {e.details}")
        sys.exit(1)
    
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        console.print(f"[green]✓[/green] {num_pages} page(s) -> {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
