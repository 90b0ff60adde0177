"""Discogs Python SDK: rate-limited sync and async clients with cursor pagination."""

from __future__ import annotations

from discogs.logging_config import configure_logging, setup_logging
from discogs.sdk.client import AsyncDiscogsClient, DiscogsClient
from discogs.sdk.exceptions import (
    AuthenticationError,
    ConcurrentPagerUse,
    DecodeFailure,
    DiscogsError,
    IdentityCheckFailed,
    MalformedTarget,
    NilClient,
    NotFoundError,
    PageDone,
    RateLimitError,
    RateLimitWaitCanceled,
    RequestCanceled,
    RequestOptionFailed,
    TransportFailure,
    UnexpectedStatus,
    ValidationError,
)
from discogs.sdk.models import PageBody, PageInfo, PageURLs, RateInfo
from discogs.sdk.pagination import AsyncPager, Pager
from discogs.sdk.rate_limiter import AsyncRateLimiter, RateLimiter
from discogs.sdk.request import RequestBuilder
from discogs.sdk.response import ResponseEnvelope

__all__ = [
    "configure_logging",
    "setup_logging",
    "AsyncDiscogsClient",
    "DiscogsClient",
    "RequestBuilder",
    "RateLimiter",
    "AsyncRateLimiter",
    "ResponseEnvelope",
    "Pager",
    "AsyncPager",
    "RateInfo",
    "PageInfo",
    "PageURLs",
    "PageBody",
    "DiscogsError",
    "MalformedTarget",
    "RequestOptionFailed",
    "TransportFailure",
    "RateLimitWaitCanceled",
    "RequestCanceled",
    "NilClient",
    "DecodeFailure",
    "ConcurrentPagerUse",
    "IdentityCheckFailed",
    "UnexpectedStatus",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ValidationError",
    "PageDone",
]
