"""Generic cursor-following pagers over Discogs list responses.

A list call hands its first :class:`ResponseEnvelope` to
:meth:`Pager.create` together with the pydantic model describing the page
body. The pager then follows ``pagination.urls.next`` one page at a time,
strictly in the order the server links them, until the cursor runs out.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterator, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

import httpx
from pydantic import BaseModel

from discogs.sdk.exceptions import (
    ConcurrentPagerUse,
    MalformedTarget,
    NilClient,
    PageDone,
)
from discogs.sdk.models import PageInfo
from discogs.sdk.response import ResponseEnvelope

if TYPE_CHECKING:
    from discogs.sdk.client import AsyncDiscogsClient, DiscogsClient

T = TypeVar("T", bound=BaseModel)


def cursor_target(next_url: str) -> str:
    """Path and query of a cursor URL, query kept byte-for-byte."""
    try:
        url = httpx.URL(next_url)
    except httpx.InvalidURL as exc:
        raise MalformedTarget(next_url, str(exc)) from exc
    return url.raw_path.decode("ascii")


class Pager(Generic[T]):
    """Sequential pager for :class:`DiscogsClient`. Not safe for concurrent use."""

    def __init__(
        self,
        client: DiscogsClient,
        model: type[T],
        page_info: PageInfo,
    ) -> None:
        if client is None:
            raise NilClient()
        self._client = client
        self._model = model
        self._page_info = page_info
        self._busy = threading.Lock()

    @classmethod
    def create(
        cls,
        envelope: ResponseEnvelope,
        client: DiscogsClient | None,
        model: type[T],
    ) -> tuple[T, Pager[T]]:
        """Decode the first page and return it with a pager positioned after it."""
        if client is None:
            raise NilClient()
        first = envelope.decode(model)
        return first, cls(client, model, envelope.pagination)

    @property
    def page_info(self) -> PageInfo:
        return self._page_info

    @property
    def has_next(self) -> bool:
        return self._page_info.has_next

    def next(self, cancel: threading.Event | None = None) -> T:
        """Fetch the page named by the cursor; raise :class:`PageDone` at the end."""
        if not self._busy.acquire(blocking=False):
            raise ConcurrentPagerUse()
        try:
            next_url = self._page_info.urls.next
            if not next_url:
                raise PageDone()
            request = self._client.new_request("GET", cursor_target(next_url))
            envelope = self._client.do(request, cancel=cancel).expect(200)
            page = envelope.decode(self._model)
            self._page_info = envelope.pagination
            return page
        finally:
            self._busy.release()

    def prev(self, cancel: threading.Event | None = None) -> T:
        raise NotImplementedError("backward pagination is not supported")

    def iter_pages(self, cancel: threading.Event | None = None) -> Iterator[T]:
        """Yield each remaining page in cursor order."""
        while True:
            try:
                yield self.next(cancel)
            except PageDone:
                return

    def __iter__(self) -> Iterator[T]:
        return self.iter_pages()


class AsyncPager(Generic[T]):
    """Sequential pager for :class:`AsyncDiscogsClient`. Not safe for concurrent use."""

    def __init__(
        self,
        client: AsyncDiscogsClient,
        model: type[T],
        page_info: PageInfo,
    ) -> None:
        if client is None:
            raise NilClient()
        self._client = client
        self._model = model
        self._page_info = page_info
        self._busy = False

    @classmethod
    def create(
        cls,
        envelope: ResponseEnvelope,
        client: AsyncDiscogsClient | None,
        model: type[T],
    ) -> tuple[T, AsyncPager[T]]:
        if client is None:
            raise NilClient()
        first = envelope.decode(model)
        return first, cls(client, model, envelope.pagination)

    @property
    def page_info(self) -> PageInfo:
        return self._page_info

    @property
    def has_next(self) -> bool:
        return self._page_info.has_next

    async def next(self, cancel: asyncio.Event | None = None) -> T:
        if self._busy:
            raise ConcurrentPagerUse()
        self._busy = True
        try:
            next_url = self._page_info.urls.next
            if not next_url:
                raise PageDone()
            request = self._client.new_request("GET", cursor_target(next_url))
            envelope = (await self._client.do(request, cancel=cancel)).expect(200)
            page = envelope.decode(self._model)
            self._page_info = envelope.pagination
            return page
        finally:
            self._busy = False

    async def prev(self, cancel: asyncio.Event | None = None) -> T:
        raise NotImplementedError("backward pagination is not supported")

    async def iter_pages(self, cancel: asyncio.Event | None = None) -> AsyncIterator[T]:
        while True:
            try:
                yield await self.next(cancel)
            except PageDone:
                return

    def __aiter__(self) -> AsyncIterator[T]:
        return self.iter_pages()


def drain_pages(
    envelope: ResponseEnvelope,
    client: DiscogsClient,
    model: type[T],
    cancel: threading.Event | None = None,
) -> list[T]:
    """Every page of a list response, first page included.

    A failure part-way through raises and the pages fetched so far are
    dropped.
    """
    first, pager = Pager.create(envelope, client, model)
    return [first, *pager.iter_pages(cancel)]


async def adrain_pages(
    envelope: ResponseEnvelope,
    client: AsyncDiscogsClient,
    model: type[T],
    cancel: asyncio.Event | None = None,
) -> list[T]:
    first, pager = AsyncPager.create(envelope, client, model)
    pages = [first]
    async for page in pager.iter_pages(cancel):
        pages.append(page)
    return pages
