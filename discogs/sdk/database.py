"""Database (catalog) endpoints."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING

from discogs.sdk.request import segment
from discogs.sdk.schemas import Release

if TYPE_CHECKING:
    from discogs.sdk.client import AsyncDiscogsClient, DiscogsClient


class DatabaseService:
    def __init__(self, client: DiscogsClient) -> None:
        self._client = client

    def get_release(
        self, release_id: int, *, cancel: threading.Event | None = None,
    ) -> Release:
        envelope = self._client.request(
            "GET", f"/releases/{segment(release_id)}", cancel=cancel,
        ).expect(200)
        return envelope.decode(Release)


class AsyncDatabaseService:
    def __init__(self, client: AsyncDiscogsClient) -> None:
        self._client = client

    async def get_release(
        self, release_id: int, *, cancel: asyncio.Event | None = None,
    ) -> Release:
        envelope = await self._client.request(
            "GET", f"/releases/{segment(release_id)}", cancel=cancel,
        )
        return envelope.expect(200).decode(Release)
