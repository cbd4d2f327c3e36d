"""CLI to run the pdfscout HTTP server."""
import argparse
import logging
import sys

import uvicorn
from dotenv import load_dotenv

from pdfscout.config import Settings


def main():
    load_dotenv()
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(
        description="Serve the upload, archive search and summary API"
    )
    parser.add_argument("--host", type=str, default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    
    args = parser.parse_args()
    
    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif args.verbose:
        log_level = logging.INFO
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        log_level = logging.WARNING
        log_format = "%(levelname)s - %(message)s"
    
    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    
    uvicorn.run(
        "pdfscout.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=logging.getLevelName(log_level).lower(),
    )


if __name__ == "__main__":
    main()
