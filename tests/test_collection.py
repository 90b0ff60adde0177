"""Tests for the collection endpoints, using httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from discogs.config import ClientSettings
from discogs.sdk import (
    AsyncDiscogsClient,
    DiscogsClient,
    NotFoundError,
    UnexpectedStatus,
)

_FOLDERS = {
    "folders": [
        {"id": 0, "name": "All", "count": 23,
         "resource_url": "https://api.discogs.com/users/rick/collection/folders/0"},
        {"id": 1, "name": "Uncategorized", "count": 20,
         "resource_url": "https://api.discogs.com/users/rick/collection/folders/1"},
    ]
}

_FOLDER = {"id": 3, "name": "Prog", "count": 0,
           "resource_url": "https://api.discogs.com/users/rick/collection/folders/3"}

_VALUE = {"maximum": "$19.24", "median": "$13.45", "minimum": "$10.25"}

_FIELDS = {
    "fields": [
        {"id": 1, "name": "Media", "type": "dropdown", "position": 1, "public": True,
         "options": ["Mint (M)", "Near Mint (NM or M-)"]},
        {"id": 3, "name": "Notes", "type": "textarea", "position": 3, "public": False,
         "lines": 3},
    ]
}


class _Router:
    """Maps (method, path) to canned responses and records every request."""

    def __init__(self, routes: dict[tuple[str, str], tuple[int, object]]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(
            (request.method, request.url.path), (404, {"message": "The requested resource was not found."}),
        )
        if body is None:
            return httpx.Response(status)
        if callable(body):
            body = body(request)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(router: _Router) -> DiscogsClient:
    return DiscogsClient(ClientSettings(_env_file=None), transport=httpx.MockTransport(router))


def _releases_page(page: int, pages: int, path: str) -> dict:
    urls = {}
    if page < pages:
        urls["next"] = f"https://api.discogs.com{path}?page={page + 1}&per_page=2"
    return {
        "pagination": {"page": page, "pages": pages, "items": pages * 2, "per_page": 2, "urls": urls},
        "releases": [
            {
                "id": 1000 + page * 10 + i,
                "instance_id": page * 10 + i,
                "folder_id": 1,
                "rating": i,
                "basic_information": {"title": f"Record {page}-{i}", "year": 1970 + i},
            }
            for i in range(2)
        ],
    }


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


class TestFolders:
    def test_list_folders(self):
        router = _Router({("GET", "/users/rick/collection/folders"): (200, _FOLDERS)})
        with _client(router) as c:
            folders = c.collection.list_folders("rick")
        assert [f.name for f in folders] == ["All", "Uncategorized"]
        assert folders[0].count == 23

    def test_create_folder(self):
        router = _Router({("POST", "/users/rick/collection/folders"): (201, _FOLDER)})
        with _client(router) as c:
            folder = c.collection.create_folder("rick", "Prog")
        assert folder.id == 3
        assert json.loads(router.last.content) == {"username": "rick", "name": "Prog"}
        assert router.last.headers["content-type"] == "application/json"

    def test_create_folder_wrong_status_raises(self):
        router = _Router({("POST", "/users/rick/collection/folders"): (200, _FOLDER)})
        with _client(router) as c:
            with pytest.raises(UnexpectedStatus) as exc_info:
                c.collection.create_folder("rick", "Prog")
        assert exc_info.value.expected == (201,)

    def test_get_folder(self):
        router = _Router({("GET", "/users/rick/collection/folders/3"): (200, _FOLDER)})
        with _client(router) as c:
            assert c.collection.get_folder("rick", 3).name == "Prog"

    def test_get_missing_folder(self):
        router = _Router({})
        with _client(router) as c:
            with pytest.raises(NotFoundError) as exc_info:
                c.collection.get_folder("rick", 99)
        assert exc_info.value.detail == "The requested resource was not found."

    def test_edit_folder(self):
        renamed = dict(_FOLDER, name="Krautrock")
        router = _Router({("POST", "/users/rick/collection/folders/3"): (200, renamed)})
        with _client(router) as c:
            folder = c.collection.edit_folder("rick", 3, "Krautrock")
        assert folder.name == "Krautrock"
        assert json.loads(router.last.content) == {"name": "Krautrock"}

    def test_delete_folder(self):
        router = _Router({("DELETE", "/users/rick/collection/folders/3"): (204, None)})
        with _client(router) as c:
            assert c.collection.delete_folder("rick", 3) is None
        assert router.last.method == "DELETE"

    def test_username_is_quoted(self):
        router = _Router({})
        with _client(router) as c:
            with pytest.raises(NotFoundError):
                c.collection.list_folders("dj/shadow")
        assert router.last.url.raw_path == b"/users/dj%2Fshadow/collection/folders"


# ---------------------------------------------------------------------------
# Releases
# ---------------------------------------------------------------------------


class TestReleases:
    def test_releases_by_folder_follows_every_page(self):
        path = "/users/rick/collection/folders/1/releases"

        def page(request: httpx.Request) -> dict:
            return _releases_page(int(request.url.params.get("page", "1")), 3, path)

        router = _Router({("GET", path): (200, page)})
        with _client(router) as c:
            releases = c.collection.get_releases_by_folder("rick", 1)

        assert len(router.requests) == 3
        assert [r.instance_id for r in releases] == [10, 11, 20, 21, 30, 31]
        assert releases[0].basic_information.title == "Record 1-0"

    def test_release_instances_single_page(self):
        path = "/users/rick/collection/releases/1010"
        router = _Router({("GET", path): (200, _releases_page(1, 1, path))})
        with _client(router) as c:
            instances = c.collection.get_release_instances("rick", 1010)
        assert len(instances) == 2
        assert len(router.requests) == 1

    def test_failure_mid_pagination_discards_partial_results(self):
        path = "/users/rick/collection/folders/1/releases"

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(500, json={"message": "Internal Server Error"})
            return httpx.Response(200, json=_releases_page(1, 3, path))

        with DiscogsClient(
            ClientSettings(_env_file=None), transport=httpx.MockTransport(handler)
        ) as c:
            with pytest.raises(UnexpectedStatus) as exc_info:
                c.collection.get_releases_by_folder("rick", 1)
        assert exc_info.value.status_code == 500

    def test_add_release_to_folder(self):
        router = _Router({
            ("POST", "/users/rick/collection/folders/1/releases/1010"): (
                201,
                {"instance_id": 3, "resource_url": "https://api.discogs.com/users/rick/collection/folders/1/release/1010/instance/3"},
            ),
        })
        with _client(router) as c:
            instance = c.collection.add_release_to_folder("rick", 1, 1010)
        assert instance.instance_id == 3
        assert router.last.content == b""

    def test_change_rating(self):
        path = "/users/rick/collection/folders/1/releases/1010/instances/3"
        router = _Router({("POST", path): (204, None)})
        with _client(router) as c:
            c.collection.change_rating("rick", 1, 1010, 3, 5)
        assert json.loads(router.last.content) == {"rating": 5}

    def test_remove_release_uses_delete(self):
        path = "/users/rick/collection/folders/1/releases/1010/instances/3"
        router = _Router({("DELETE", path): (204, None)})
        with _client(router) as c:
            c.collection.remove_release_from_folder("rick", 1, 1010, 3)
        assert router.last.method == "DELETE"


# ---------------------------------------------------------------------------
# Custom fields and value
# ---------------------------------------------------------------------------


class TestFieldsAndValue:
    def test_list_custom_fields(self):
        router = _Router({("GET", "/users/rick/collection/fields"): (200, _FIELDS)})
        with _client(router) as c:
            fields = c.collection.list_custom_fields("rick")
        assert fields[0].options == ["Mint (M)", "Near Mint (NM or M-)"]
        assert fields[1].lines == 3

    def test_edit_custom_field(self):
        path = "/users/rick/collection/folders/1/releases/1010/instances/3/fields/8"
        router = _Router({("POST", path): (204, None)})
        with _client(router) as c:
            c.collection.edit_custom_field("rick", 1, 1010, 3, 8, "Near Mint")
        assert json.loads(router.last.content) == {"value": "Near Mint"}

    def test_collection_value(self):
        router = _Router({("GET", "/users/rick/collection/value"): (200, _VALUE)})
        with _client(router) as c:
            value = c.collection.get_collection_value("rick")
        assert value.median == "$13.45"


# ---------------------------------------------------------------------------
# Async service
# ---------------------------------------------------------------------------


def _async_client(router: _Router) -> AsyncDiscogsClient:
    return AsyncDiscogsClient(
        ClientSettings(_env_file=None), transport=httpx.MockTransport(router),
    )


class TestAsyncCollection:
    async def test_list_folders(self):
        router = _Router({("GET", "/users/rick/collection/folders"): (200, _FOLDERS)})
        async with _async_client(router) as c:
            folders = await c.collection.list_folders("rick")
        assert len(folders) == 2

    async def test_releases_by_folder_follows_every_page(self):
        path = "/users/rick/collection/folders/0/releases"

        def page(request: httpx.Request) -> dict:
            return _releases_page(int(request.url.params.get("page", "1")), 2, path)

        router = _Router({("GET", path): (200, page)})
        async with _async_client(router) as c:
            releases = await c.collection.get_releases_by_folder("rick", 0)
        assert [r.instance_id for r in releases] == [10, 11, 20, 21]

    async def test_delete_folder_unexpected_status(self):
        router = _Router({("DELETE", "/users/rick/collection/folders/1"): (400, {"message": "Folder not empty"})})
        async with _async_client(router) as c:
            with pytest.raises(UnexpectedStatus) as exc_info:
                await c.collection.delete_folder("rick", 1)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Folder not empty"

    async def test_remove_release_uses_delete(self):
        path = "/users/rick/collection/folders/1/releases/1010/instances/3"
        router = _Router({("DELETE", path): (204, None)})
        async with _async_client(router) as c:
            await c.collection.remove_release_from_folder("rick", 1, 1010, 3)
        assert router.last.method == "DELETE"
