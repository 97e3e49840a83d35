"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request decoding
- Rate limiting
- Per-request deadlines
- Mapping domain records to response models

All business logic is in URLService; errors are APIError subclasses rendered
by the handlers in shortener.api.error_handlers.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from shortener.api.decoding import decode_json
from shortener.api.schemas import (
    CreateURLRequest,
    ErrorResponse,
    LinkDetails,
    URLResponse,
    VisitsResponse,
)
from shortener.core.exceptions import InternalError, NotFoundError
from shortener.core.rate_limit import RATE_LIMITS, limiter
from shortener.core.setting import Settings
from shortener.core.validators import sanitize_token
from shortener.db.models import ShortLink
from shortener.services.qr_code import build_qr_code_link
from shortener.services.url_service import URLService

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter()

# Mounted only outside production
debug_router = APIRouter(prefix="/debug")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_url_service(request: Request) -> URLService:
    return request.app.state.url_service


async def with_deadline(settings: Settings, awaitable: Awaitable[T]) -> T:
    """Await ``awaitable``, cancelling it once REQUEST_TIMEOUT_SECONDS elapse."""
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError as e:
        raise InternalError(
            "request-timeout",
            debug=f"Service call exceeded {settings.REQUEST_TIMEOUT_SECONDS}s",
        ) from e


def require_token(token: str) -> str:
    """Reject tokens that could never have been issued, without a store lookup."""
    sanitized = sanitize_token(token)
    if not sanitized:
        raise NotFoundError("url-not-found", f"Couldn't find URL with token ({token}).")
    return sanitized


def to_url_response(link: ShortLink, settings: Settings) -> URLResponse:
    return URLResponse(
        token=link.token,
        target_url=link.destination_url,
        qr_code=build_qr_code_link(link.destination_url, settings.QR_CODE_API_URL),
    )


@router.post(
    "/shorten",
    response_model=URLResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a short URL",
    description="Takes a destination URL and returns a short token for it"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def shorten_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    settings: Settings = Depends(get_settings),
    url_service: URLService = Depends(get_url_service),
) -> URLResponse:
    body = await decode_json(request, CreateURLRequest, settings.MAX_REQUEST_BODY_SIZE)
    link = await with_deadline(settings, url_service.shorten(body.url))
    logger.info(f"Shortened {link.destination_url} to {link.token}")
    return to_url_response(link, settings)


@router.post(
    "/lengthen",
    response_model=URLResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a long URL",
    description="Takes a destination URL and returns an oversized token for it"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def lengthen_url(
    request: Request,
    settings: Settings = Depends(get_settings),
    url_service: URLService = Depends(get_url_service),
) -> URLResponse:
    body = await decode_json(request, CreateURLRequest, settings.MAX_REQUEST_BODY_SIZE)
    link = await with_deadline(settings, url_service.lengthen(body.url))
    logger.info(f"Lengthened {link.destination_url} to a {len(link.token)} character token")
    return to_url_response(link, settings)


@debug_router.get(
    "/links",
    response_model=list[LinkDetails],
    summary="List all links",
    description="Development only: returns every stored link"
)
async def list_links(
    settings: Settings = Depends(get_settings),
    url_service: URLService = Depends(get_url_service),
) -> list[LinkDetails]:
    links = await with_deadline(settings, url_service.list_all())
    return [
        LinkDetails(
            token=link.token,
            target_url=link.destination_url,
            visits=link.visit_count,
            created_at=link.created_at,
        )
        for link in links
    ]


@router.get(
    "/{token}/visits",
    response_model=VisitsResponse,
    responses=ERROR_RESPONSES,
    summary="Get visit count",
    description="Returns how many times a token has been followed"
)
@limiter.limit(RATE_LIMITS["visits"])
async def get_url_visits(
    token: str,
    request: Request,  # Required for rate limiting
    settings: Settings = Depends(get_settings),
    url_service: URLService = Depends(get_url_service),
) -> VisitsResponse:
    link = await with_deadline(settings, url_service.find_by_token(require_token(token)))
    return VisitsResponse(visits=link.visit_count)


@router.get(
    "/{token}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses=ERROR_RESPONSES,
    summary="Redirect to destination URL",
    description="Takes a token, records the visit and redirects to its destination"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    token: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    url_service: URLService = Depends(get_url_service),
) -> RedirectResponse:
    """
    Redirect to the destination URL for a given token.

    The visit is recorded before redirecting; if it cannot be recorded the
    request fails instead of redirecting.
    """
    token = require_token(token)

    async def visit() -> ShortLink:
        link = await url_service.find_by_token(token)
        await url_service.increment_visits(link)
        return link

    link = await with_deadline(settings, visit())
    return RedirectResponse(
        url=link.destination_url,
        status_code=status.HTTP_301_MOVED_PERMANENTLY
    )
