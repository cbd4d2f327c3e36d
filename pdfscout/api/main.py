"""HTTP surface: upload, archive search proxy, summary proxy."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Optional, TypeVar

import httpx
from fastapi import APIRouter, Depends, FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google import genai

from pdfscout.config import Settings
from pdfscout.errors import (
    ConfigurationError,
    PdfScoutError,
    ProcessingError,
    ProviderEmptyResult,
    UpstreamError,
    ValidationError,
)
from pdfscout.models.document import DEFAULT_IDENTIFIER, UploadedDocument
from pdfscout.models.search import SearchQuery
from pdfscout.models.summary import NO_TOKENS_MESSAGE, SummaryResult
from pdfscout.tools.archive_search import PROXY_FAILURE, search_pdf_links
from pdfscout.tools.summarize import make_client, summarize_text
from pdfscout.tools.text_cache import TextCache
from pdfscout.tools.upload import handle_upload
from pdfscout.tools.upload_store import UploadStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.5

router = APIRouter()


class ClientDisconnected(Exception):
    """The caller went away before the response was ready."""


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    genai_client: Optional[genai.Client] = None
) -> FastAPI:
    """
    Build the application.

    Clients passed in are used as-is (and not closed on shutdown); otherwise
    they are created in the lifespan from ``settings``.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.cache = TextCache(ttl_seconds=settings.cache_ttl)
        app.state.store = UploadStore(settings.upload_dir)
        app.state.genai_client = genai_client
        owns_http = http_client is None
        app.state.http_client = http_client or httpx.AsyncClient(
            timeout=settings.http_timeout,
            follow_redirects=True
        )
        logger.info(f"pdfscout started (model={settings.summary_model})")
        try:
            yield
        finally:
            app.state.cache.clear()
            if owns_http:
                await app.state.http_client.aclose()
            logger.info("pdfscout stopped")

    app = FastAPI(title="pdfscout", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> TextCache:
    return request.app.state.cache


def get_store(request: Request) -> UploadStore:
    return request.app.state.store


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_genai_client(request: Request) -> genai.Client:
    """Gemini client, created on first use so the server can start without a key."""
    client = request.app.state.genai_client
    if client is None:
        client = make_client(request.app.state.settings)
        request.app.state.genai_client = client
    return client


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/upload")
async def upload(
    file: Optional[UploadFile] = File(None),
    identifier: Optional[str] = Form(None),
    cache: TextCache = Depends(get_cache),
    store: UploadStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    document = UploadedDocument(
        content=await file.read(),
        media_type=file.content_type or "",
        filename=file.filename,
        identifier=identifier,
    )
    result = await handle_upload(document, cache, store, timeout=settings.extract_timeout)
    return result.model_dump(exclude_none=True)


@router.post("/api")
async def search(
    query: SearchQuery,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    try:
        results = await search_pdf_links(query.val, client, settings)
    except UpstreamError:
        # this route has always reported upstream trouble as a plain 500
        return JSONResponse(status_code=500, content={"error": PROXY_FAILURE})
    return [r.model_dump(by_alias=True) for r in results]


@router.get("/summary")
async def summary(
    request: Request,
    identifier: str = Query(DEFAULT_IDENTIFIER),
    cache: TextCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    text = cache.get(identifier or DEFAULT_IDENTIFIER)
    try:
        client = get_genai_client(request)
        ai = await _cancel_on_disconnect(request, summarize_text(text, client, settings))
    except ProviderEmptyResult:
        return NO_TOKENS_MESSAGE
    except (UpstreamError, ConfigurationError) as e:
        body = SummaryResult(success=False, error=e.message)
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))
    except ClientDisconnected:
        logger.info(f"Client went away during summary for {identifier!r}")
        return JSONResponse(status_code=499, content={"success": False, "error": "Client disconnected"})

    return SummaryResult(success=True, ai=ai).model_dump(exclude_none=True)


@router.get("/health")
async def health(cache: TextCache = Depends(get_cache)):
    return {"status": "ok", "cached_identifiers": len(cache)}


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await work, cancelling it if the client disconnects first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------

def _install_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ProcessingError)
    async def processing_error(request: Request, exc: ProcessingError):
        logger.warning(f"Processing failed on {request.url.path}: {exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(PdfScoutError)
    async def pdfscout_error(request: Request, exc: PdfScoutError):
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        content: dict[str, Any] = {"error": exc.message}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning(f"Bad request on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Server Error"})
