"""Outbound request construction: URL resolution, JSON body and headers."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from discogs.sdk.exceptions import MalformedTarget, RequestOptionFailed

AUTH_SCHEME = "Discogs"

RequestHook = Callable[[httpx.Request], None]

# A '%' that does not start a two-hex-digit escape.
_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode_body(body: Any) -> bytes:
    """Serialize *body* as compact UTF-8 JSON.

    ``<``, ``>`` and ``&`` and non-ASCII text are emitted as-is so payloads
    stay byte-stable.
    """
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True)
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def authorization_value(token: str) -> str:
    return f"{AUTH_SCHEME} token={token}"


class RequestBuilder:
    """Builds ``httpx.Request`` objects against one base URL and credential."""

    def __init__(
        self,
        base_url: str | httpx.URL,
        user_agent: str = "",
        token: str | None = None,
    ) -> None:
        self.base_url = httpx.URL(base_url)
        self.user_agent = user_agent
        self._authorization = authorization_value(token) if token else None

    @property
    def authenticated(self) -> bool:
        return self._authorization is not None

    def resolve(self, target: str) -> httpx.URL:
        """Resolve an absolute URL or a path relative to the base URL."""
        if _BAD_PERCENT.search(target):
            raise MalformedTarget(target, "invalid percent-encoding")
        try:
            return self.base_url.join(target)
        except httpx.InvalidURL as exc:
            raise MalformedTarget(target, str(exc)) from exc

    def build(
        self,
        method: str,
        target: str,
        body: Any = None,
        hooks: Sequence[RequestHook] = (),
    ) -> httpx.Request:
        url = self.resolve(target)

        headers: dict[str, str] = {}
        content: bytes | None = None
        if self._authorization is not None:
            headers["Authorization"] = self._authorization
        if body is not None:
            content = encode_body(body)
            headers["Content-Type"] = "application/json"
        if self.user_agent:
            headers["User-Agent"] = self.user_agent

        request = httpx.Request(method.upper(), url, headers=headers, content=content)

        for idx, hook in enumerate(hooks):
            try:
                hook(request)
            except Exception as exc:
                raise RequestOptionFailed(idx, exc) from exc

        return request


def segment(value: object) -> str:
    """Percent-quote *value* into a single path segment."""
    return quote(str(value), safe="")
