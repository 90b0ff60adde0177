"""Identity and user profile endpoints."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING

import httpx

from discogs.sdk.pagination import adrain_pages, drain_pages
from discogs.sdk.request import segment
from discogs.sdk.schemas import (
    ContributionsPage,
    Identity,
    Profile,
    ProfileUpdate,
    Release,
    Submissions,
    SubmissionsPage,
)

if TYPE_CHECKING:
    from discogs.sdk.client import AsyncDiscogsClient, DiscogsClient

IDENTITY_PATH = "oauth/identity"


def _user(username: str, *parts: str) -> str:
    return "/".join(["users", segment(username), *parts])


def _contributions_path(
    username: str, sort: str | None, sort_order: str | None,
) -> str:
    params: dict[str, str] = {}
    if sort is not None:
        params["sort"] = sort
    if sort_order is not None:
        params["sort_order"] = sort_order
    path = _user(username, "contributions")
    if params:
        path += "?" + str(httpx.QueryParams(params))
    return path


def _merge_submissions(pages: list[SubmissionsPage]) -> Submissions:
    merged = Submissions()
    for page in pages:
        merged.extend(page.submissions)
    return merged


class IdentityService:
    def __init__(self, client: DiscogsClient) -> None:
        self._client = client

    def get(self, *, cancel: threading.Event | None = None) -> Identity:
        """The user the configured token belongs to."""
        envelope = self._client.request("GET", IDENTITY_PATH, cancel=cancel).expect(200)
        return envelope.decode(Identity)

    def get_profile(
        self, username: str, *, cancel: threading.Event | None = None,
    ) -> Profile:
        envelope = self._client.request("GET", _user(username), cancel=cancel).expect(200)
        return envelope.decode(Profile)

    def edit_profile(
        self,
        username: str,
        update: ProfileUpdate,
        *,
        cancel: threading.Event | None = None,
    ) -> Profile:
        body = {"username": username, **update.model_dump(exclude_none=True)}
        envelope = self._client.request(
            "POST", _user(username), body, cancel=cancel,
        ).expect(200)
        return envelope.decode(Profile)

    def get_contributions(
        self,
        username: str,
        *,
        sort: str | None = None,
        sort_order: str | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Release]:
        envelope = self._client.request(
            "GET", _contributions_path(username, sort, sort_order), cancel=cancel,
        ).expect(200)
        pages = drain_pages(envelope, self._client, ContributionsPage, cancel)
        return [item for page in pages for item in page.contributions]

    def get_submissions(
        self, username: str, *, cancel: threading.Event | None = None,
    ) -> Submissions:
        envelope = self._client.request(
            "GET", _user(username, "submissions"), cancel=cancel,
        ).expect(200)
        return _merge_submissions(
            drain_pages(envelope, self._client, SubmissionsPage, cancel)
        )


class AsyncIdentityService:
    def __init__(self, client: AsyncDiscogsClient) -> None:
        self._client = client

    async def get(self, *, cancel: asyncio.Event | None = None) -> Identity:
        envelope = await self._client.request("GET", IDENTITY_PATH, cancel=cancel)
        return envelope.expect(200).decode(Identity)

    async def get_profile(
        self, username: str, *, cancel: asyncio.Event | None = None,
    ) -> Profile:
        envelope = await self._client.request("GET", _user(username), cancel=cancel)
        return envelope.expect(200).decode(Profile)

    async def edit_profile(
        self,
        username: str,
        update: ProfileUpdate,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Profile:
        body = {"username": username, **update.model_dump(exclude_none=True)}
        envelope = await self._client.request(
            "POST", _user(username), body, cancel=cancel,
        )
        return envelope.expect(200).decode(Profile)

    async def get_contributions(
        self,
        username: str,
        *,
        sort: str | None = None,
        sort_order: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> list[Release]:
        envelope = await self._client.request(
            "GET", _contributions_path(username, sort, sort_order), cancel=cancel,
        )
        pages = await adrain_pages(
            envelope.expect(200), self._client, ContributionsPage, cancel,
        )
        return [item for page in pages for item in page.contributions]

    async def get_submissions(
        self, username: str, *, cancel: asyncio.Event | None = None,
    ) -> Submissions:
        envelope = await self._client.request(
            "GET", _user(username, "submissions"), cancel=cancel,
        )
        return _merge_submissions(
            await adrain_pages(
                envelope.expect(200), self._client, SubmissionsPage, cancel,
            )
        )
