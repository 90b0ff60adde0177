"""User collection endpoints: folders, release instances, custom fields, value."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING

from discogs.sdk.pagination import adrain_pages, drain_pages
from discogs.sdk.request import segment
from discogs.sdk.schemas import (
    CollectionValue,
    CustomField,
    CustomFieldsResponse,
    Folder,
    FoldersResponse,
    Instance,
    ReleaseInstance,
    ReleasesPage,
)

if TYPE_CHECKING:
    from discogs.sdk.client import AsyncDiscogsClient, DiscogsClient


def _collection(username: str, *parts: object) -> str:
    path = f"users/{segment(username)}/collection"
    for part in parts:
        path += f"/{segment(part)}"
    return path


def _instance(
    username: str, folder_id: int, release_id: int, instance_id: int, *parts: object,
) -> str:
    return _collection(
        username, "folders", folder_id, "releases", release_id,
        "instances", instance_id, *parts,
    )


class CollectionService:
    def __init__(self, client: DiscogsClient) -> None:
        self._client = client

    # -- folders -------------------------------------------------------------

    def list_folders(
        self, username: str, *, cancel: threading.Event | None = None,
    ) -> list[Folder]:
        envelope = self._client.request(
            "GET", _collection(username, "folders"), cancel=cancel,
        ).expect(200)
        return envelope.decode(FoldersResponse).folders

    def create_folder(
        self, username: str, name: str, *, cancel: threading.Event | None = None,
    ) -> Folder:
        body = {"username": username, "name": name}
        envelope = self._client.request(
            "POST", _collection(username, "folders"), body, cancel=cancel,
        ).expect(201)
        return envelope.decode(Folder)

    def get_folder(
        self, username: str, folder_id: int, *, cancel: threading.Event | None = None,
    ) -> Folder:
        envelope = self._client.request(
            "GET", _collection(username, "folders", folder_id), cancel=cancel,
        ).expect(200)
        return envelope.decode(Folder)

    def edit_folder(
        self,
        username: str,
        folder_id: int,
        name: str,
        *,
        cancel: threading.Event | None = None,
    ) -> Folder:
        envelope = self._client.request(
            "POST",
            _collection(username, "folders", folder_id),
            {"name": name},
            cancel=cancel,
        ).expect(200)
        return envelope.decode(Folder)

    def delete_folder(
        self, username: str, folder_id: int, *, cancel: threading.Event | None = None,
    ) -> None:
        self._client.request(
            "DELETE", _collection(username, "folders", folder_id), cancel=cancel,
        ).expect(204)

    # -- releases ------------------------------------------------------------

    def get_release_instances(
        self, username: str, release_id: int, *, cancel: threading.Event | None = None,
    ) -> list[ReleaseInstance]:
        """Every instance of *release_id* in the collection, across all folders."""
        envelope = self._client.request(
            "GET", _collection(username, "releases", release_id), cancel=cancel,
        ).expect(200)
        pages = drain_pages(envelope, self._client, ReleasesPage, cancel)
        return [item for page in pages for item in page.releases]

    def get_releases_by_folder(
        self, username: str, folder_id: int, *, cancel: threading.Event | None = None,
    ) -> list[ReleaseInstance]:
        envelope = self._client.request(
            "GET", _collection(username, "folders", folder_id, "releases"), cancel=cancel,
        ).expect(200)
        pages = drain_pages(envelope, self._client, ReleasesPage, cancel)
        return [item for page in pages for item in page.releases]

    def add_release_to_folder(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        *,
        cancel: threading.Event | None = None,
    ) -> Instance:
        envelope = self._client.request(
            "POST",
            _collection(username, "folders", folder_id, "releases", release_id),
            cancel=cancel,
        ).expect(201)
        return envelope.decode(Instance)

    def change_rating(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        rating: int,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        self._client.request(
            "POST",
            _instance(username, folder_id, release_id, instance_id),
            {"rating": rating},
            cancel=cancel,
        ).expect(204)

    def remove_release_from_folder(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        self._client.request(
            "DELETE",
            _instance(username, folder_id, release_id, instance_id),
            cancel=cancel,
        ).expect(204)

    # -- custom fields and value ---------------------------------------------

    def list_custom_fields(
        self, username: str, *, cancel: threading.Event | None = None,
    ) -> list[CustomField]:
        envelope = self._client.request(
            "GET", _collection(username, "fields"), cancel=cancel,
        ).expect(200)
        return envelope.decode(CustomFieldsResponse).fields

    def edit_custom_field(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        field_id: int,
        value: str,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        self._client.request(
            "POST",
            _instance(username, folder_id, release_id, instance_id, "fields", field_id),
            {"value": value},
            cancel=cancel,
        ).expect(204)

    def get_collection_value(
        self, username: str, *, cancel: threading.Event | None = None,
    ) -> CollectionValue:
        envelope = self._client.request(
            "GET", _collection(username, "value"), cancel=cancel,
        ).expect(200)
        return envelope.decode(CollectionValue)


class AsyncCollectionService:
    def __init__(self, client: AsyncDiscogsClient) -> None:
        self._client = client

    # -- folders -------------------------------------------------------------

    async def list_folders(
        self, username: str, *, cancel: asyncio.Event | None = None,
    ) -> list[Folder]:
        envelope = await self._client.request(
            "GET", _collection(username, "folders"), cancel=cancel,
        )
        return envelope.expect(200).decode(FoldersResponse).folders

    async def create_folder(
        self, username: str, name: str, *, cancel: asyncio.Event | None = None,
    ) -> Folder:
        body = {"username": username, "name": name}
        envelope = await self._client.request(
            "POST", _collection(username, "folders"), body, cancel=cancel,
        )
        return envelope.expect(201).decode(Folder)

    async def get_folder(
        self, username: str, folder_id: int, *, cancel: asyncio.Event | None = None,
    ) -> Folder:
        envelope = await self._client.request(
            "GET", _collection(username, "folders", folder_id), cancel=cancel,
        )
        return envelope.expect(200).decode(Folder)

    async def edit_folder(
        self,
        username: str,
        folder_id: int,
        name: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Folder:
        envelope = await self._client.request(
            "POST",
            _collection(username, "folders", folder_id),
            {"name": name},
            cancel=cancel,
        )
        return envelope.expect(200).decode(Folder)

    async def delete_folder(
        self, username: str, folder_id: int, *, cancel: asyncio.Event | None = None,
    ) -> None:
        envelope = await self._client.request(
            "DELETE", _collection(username, "folders", folder_id), cancel=cancel,
        )
        envelope.expect(204)

    # -- releases ------------------------------------------------------------

    async def get_release_instances(
        self, username: str, release_id: int, *, cancel: asyncio.Event | None = None,
    ) -> list[ReleaseInstance]:
        envelope = await self._client.request(
            "GET", _collection(username, "releases", release_id), cancel=cancel,
        )
        pages = await adrain_pages(
            envelope.expect(200), self._client, ReleasesPage, cancel,
        )
        return [item for page in pages for item in page.releases]

    async def get_releases_by_folder(
        self, username: str, folder_id: int, *, cancel: asyncio.Event | None = None,
    ) -> list[ReleaseInstance]:
        envelope = await self._client.request(
            "GET", _collection(username, "folders", folder_id, "releases"), cancel=cancel,
        )
        pages = await adrain_pages(
            envelope.expect(200), self._client, ReleasesPage, cancel,
        )
        return [item for page in pages for item in page.releases]

    async def add_release_to_folder(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Instance:
        envelope = await self._client.request(
            "POST",
            _collection(username, "folders", folder_id, "releases", release_id),
            cancel=cancel,
        )
        return envelope.expect(201).decode(Instance)

    async def change_rating(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        rating: int,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        envelope = await self._client.request(
            "POST",
            _instance(username, folder_id, release_id, instance_id),
            {"rating": rating},
            cancel=cancel,
        )
        envelope.expect(204)

    async def remove_release_from_folder(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        envelope = await self._client.request(
            "DELETE",
            _instance(username, folder_id, release_id, instance_id),
            cancel=cancel,
        )
        envelope.expect(204)

    # -- custom fields and value ---------------------------------------------

    async def list_custom_fields(
        self, username: str, *, cancel: asyncio.Event | None = None,
    ) -> list[CustomField]:
        envelope = await self._client.request(
            "GET", _collection(username, "fields"), cancel=cancel,
        )
        return envelope.expect(200).decode(CustomFieldsResponse).fields

    async def edit_custom_field(
        self,
        username: str,
        folder_id: int,
        release_id: int,
        instance_id: int,
        field_id: int,
        value: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        envelope = await self._client.request(
            "POST",
            _instance(username, folder_id, release_id, instance_id, "fields", field_id),
            {"value": value},
            cancel=cancel,
        )
        envelope.expect(204)

    async def get_collection_value(
        self, username: str, *, cancel: asyncio.Event | None = None,
    ) -> CollectionValue:
        envelope = await self._client.request(
            "GET", _collection(username, "value"), cancel=cancel,
        )
        return envelope.expect(200).decode(CollectionValue)
