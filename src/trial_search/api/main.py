"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from trial_search import __version__
from trial_search.config import Settings, get_settings
from trial_search.constants import (
    INDEX_TEMPLATE,
    INVALID_PAGE_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
)
from trial_search.data_sources.base_client import (
    ClientConfig,
    DataSourceError,
    UpstreamAPIError,
    UpstreamErrorBodyError,
)
from trial_search.data_sources.clinical_trials import ClinicalTrialsClient
from trial_search.services.search import InvalidPageError, parse_page, run_search

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def get_client(request: Request) -> ClinicalTrialsClient:
    return request.app.state.client


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request, templates: Jinja2Templates = Depends(get_templates)
) -> HTMLResponse:
    """Empty search form."""
    return templates.TemplateResponse(request, INDEX_TEMPLATE, {"search": None})


@router.get("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    expr: str = "",
    page: str = "",
    settings: Settings = Depends(get_app_settings),
    templates: Jinja2Templates = Depends(get_templates),
    client: ClinicalTrialsClient = Depends(get_client),
) -> HTMLResponse:
    """Search results for ``expr``, one page at a time."""
    page_number = parse_page(page)
    state = await run_search(client, expr, page_number, settings.page_size)
    return templates.TemplateResponse(request, INDEX_TEMPLATE, {"search": state})


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


async def invalid_page_handler(request: Request, exc: InvalidPageError) -> Response:
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return PlainTextResponse(INVALID_PAGE_MESSAGE, status_code=400)


async def upstream_api_error_handler(
    request: Request, exc: UpstreamAPIError
) -> Response:
    logger.error("Upstream rejected search: %s", exc)
    return PlainTextResponse(exc.api_message, status_code=500)


async def upstream_error_body_handler(
    request: Request, exc: UpstreamErrorBodyError
) -> Response:
    logger.error("Upstream error body could not be decoded: %s", exc)
    return PlainTextResponse(UNEXPECTED_ERROR_MESSAGE, status_code=500)


async def data_source_error_handler(request: Request, exc: DataSourceError) -> Response:
    logger.error("Upstream request failed: %s", exc)
    return Response(status_code=500)


async def template_error_handler(request: Request, exc: TemplateError) -> Response:
    logger.exception("Template render failed for %s", request.url.path)
    return Response(status_code=500)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    *,
    client: ClinicalTrialsClient | None = None,
    templates: Jinja2Templates | None = None,
) -> FastAPI:
    """Build the application.

    The template handle and upstream client are created from ``settings``
    unless given, and live on ``app.state`` for the lifetime of the app.
    """
    settings = settings or get_settings()
    if templates is None:
        templates = Jinja2Templates(directory=settings.templates_dir)
    if client is None:
        client = ClinicalTrialsClient(
            base_url=settings.upstream_base_url,
            page_size=settings.page_size,
            max_rank=settings.max_rank,
            config=ClientConfig(timeout_seconds=settings.upstream_timeout_seconds),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.client.close()

    app = FastAPI(
        title="trial-search",
        description="Search front-end for the ClinicalTrials.gov registry",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.templates = templates
    app.state.client = client

    app.mount("/assets", StaticFiles(directory=settings.assets_dir), name="assets")
    app.include_router(router)

    app.add_exception_handler(InvalidPageError, invalid_page_handler)
    app.add_exception_handler(UpstreamAPIError, upstream_api_error_handler)
    app.add_exception_handler(UpstreamErrorBodyError, upstream_error_body_handler)
    app.add_exception_handler(DataSourceError, data_source_error_handler)
    app.add_exception_handler(TemplateError, template_error_handler)

    return app
