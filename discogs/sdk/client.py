"""Sync and async Discogs clients: rate-limited dispatch into response envelopes."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

import httpx

from discogs.config import ClientSettings, resolve_settings
from discogs.sdk.collection import AsyncCollectionService, CollectionService
from discogs.sdk.database import AsyncDatabaseService, DatabaseService
from discogs.sdk.exceptions import (
    DiscogsError,
    IdentityCheckFailed,
    RequestCanceled,
    TransportFailure,
)
from discogs.sdk.identity import AsyncIdentityService, IdentityService
from discogs.sdk.models import RateInfo
from discogs.sdk.rate_limiter import AsyncRateLimiter, RateLimiter
from discogs.sdk.request import RequestBuilder, RequestHook
from discogs.sdk.response import ResponseEnvelope
from discogs.services.request_context import request_scope

logger = logging.getLogger(__name__)


def _log_response(request: httpx.Request, envelope: ResponseEnvelope) -> None:
    logger.debug(
        "%s %s -> %d",
        request.method,
        request.url,
        envelope.status_code,
        extra={
            "method": request.method,
            "url": str(request.url),
            "status": envelope.status_code,
            "ratelimit_remaining": envelope.rate.remaining,
        },
    )


def _log_transport_failure(request: httpx.Request, exc: Exception) -> None:
    logger.warning(
        "%s %s failed: %r",
        request.method,
        request.url,
        exc,
        extra={"method": request.method, "url": str(request.url)},
    )


# ---------------------------------------------------------------------------
# Sync client
# ---------------------------------------------------------------------------


class DiscogsClient:
    """Synchronous client (backed by ``httpx.Client``).

    Safe to share between threads: the rate limiter is the only shared
    mutable state. With a token configured, construction verifies it against
    ``oauth/identity`` and raises :class:`IdentityCheckFailed` if that fails.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = resolve_settings(settings, token)
        self._builder = RequestBuilder(
            self.settings.base_url, self.settings.user_agent, self.settings.token,
        )
        self._limiter = RateLimiter(
            self.settings.rate_limit, self.settings.rate_limit_window,
        )
        kwargs: dict[str, Any] = {"timeout": self.settings.timeout}
        if transport is not None:
            kwargs["transport"] = transport
        self._timeout = httpx.Timeout(self.settings.timeout).as_dict()
        self._client = httpx.Client(**kwargs)
        self.last_rate_limit: RateInfo | None = None

        self.collection = CollectionService(self)
        self.identity = IdentityService(self)
        self.database = DatabaseService(self)

        if self.authenticated:
            try:
                identity = self.identity.get()
            except DiscogsError as exc:
                self.close()
                raise IdentityCheckFailed(f"error getting identity: {exc}") from exc
            logger.info("Authenticated as %s", identity.username)

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> DiscogsClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # -- properties ----------------------------------------------------------

    @property
    def authenticated(self) -> bool:
        return self._builder.authenticated

    @property
    def rate_limit(self) -> int:
        """Requests allowed per window by the client-side throttle."""
        return self._limiter.capacity

    # -- core ----------------------------------------------------------------

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *hooks: RequestHook,
    ) -> httpx.Request:
        return self._builder.build(method, path, body, hooks)

    def do(
        self,
        request: httpx.Request,
        cancel: threading.Event | None = None,
    ) -> ResponseEnvelope:
        """Send *request* through the rate limiter; any status is returned, never raised."""
        with request_scope():
            request.extensions.setdefault("timeout", self._timeout)
            self._limiter.acquire(cancel)
            if cancel is not None and cancel.is_set():
                raise RequestCanceled(f"{request.method} {request.url} canceled")
            try:
                response = self._client.send(request)
            except httpx.RequestError as exc:
                _log_transport_failure(request, exc)
                raise TransportFailure(exc) from exc
            envelope = ResponseEnvelope(response)
            self.last_rate_limit = envelope.rate
            _log_response(request, envelope)
            return envelope

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        cancel: threading.Event | None = None,
    ) -> ResponseEnvelope:
        return self.do(self.new_request(method, path, body), cancel)


# ---------------------------------------------------------------------------
# Async client
# ---------------------------------------------------------------------------


class AsyncDiscogsClient:
    """Async client (backed by ``httpx.AsyncClient``).

    Use ``await AsyncDiscogsClient.create(...)`` or ``async with`` so an
    authenticated client gets its identity check before first use.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = resolve_settings(settings, token)
        self._builder = RequestBuilder(
            self.settings.base_url, self.settings.user_agent, self.settings.token,
        )
        self._limiter = AsyncRateLimiter(
            self.settings.rate_limit, self.settings.rate_limit_window,
        )
        kwargs: dict[str, Any] = {"timeout": self.settings.timeout}
        if transport is not None:
            kwargs["transport"] = transport
        self._timeout = httpx.Timeout(self.settings.timeout).as_dict()
        self._client = httpx.AsyncClient(**kwargs)
        self.last_rate_limit: RateInfo | None = None
        self.verified = not self.authenticated

        self.collection = AsyncCollectionService(self)
        self.identity = AsyncIdentityService(self)
        self.database = AsyncDatabaseService(self)

    @classmethod
    async def create(
        cls,
        settings: ClientSettings | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AsyncDiscogsClient:
        client = cls(settings, token=token, transport=transport)
        await client.verify()
        return client

    async def verify(self) -> None:
        """Run the identity check once; closes the client if it fails."""
        if self.verified:
            return
        try:
            identity = await self.identity.get()
        except DiscogsError as exc:
            await self.close()
            raise IdentityCheckFailed(f"error getting identity: {exc}") from exc
        self.verified = True
        logger.info("Authenticated as %s", identity.username)

    # -- context manager -----------------------------------------------------

    async def __aenter__(self) -> AsyncDiscogsClient:
        await self.verify()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # -- properties ----------------------------------------------------------

    @property
    def authenticated(self) -> bool:
        return self._builder.authenticated

    @property
    def rate_limit(self) -> int:
        return self._limiter.capacity

    # -- core ----------------------------------------------------------------

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *hooks: RequestHook,
    ) -> httpx.Request:
        return self._builder.build(method, path, body, hooks)

    async def _send(
        self,
        request: httpx.Request,
        cancel: asyncio.Event | None,
    ) -> httpx.Response:
        if cancel is None:
            return await self._client.send(request)

        send = asyncio.ensure_future(self._client.send(request))
        canceled = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {send, canceled}, return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (send, canceled):
                if not task.done():
                    task.cancel()
        if send in done:
            return send.result()
        raise RequestCanceled(f"{request.method} {request.url} canceled")

    async def do(
        self,
        request: httpx.Request,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope:
        """Send *request* through the rate limiter; any status is returned, never raised."""
        with request_scope():
            request.extensions.setdefault("timeout", self._timeout)
            await self._limiter.acquire(cancel)
            if cancel is not None and cancel.is_set():
                raise RequestCanceled(f"{request.method} {request.url} canceled")
            try:
                response = await self._send(request, cancel)
            except httpx.RequestError as exc:
                _log_transport_failure(request, exc)
                raise TransportFailure(exc) from exc
            envelope = ResponseEnvelope(response)
            self.last_rate_limit = envelope.rate
            _log_response(request, envelope)
            return envelope

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> ResponseEnvelope:
        return await self.do(self.new_request(method, path, body), cancel)
