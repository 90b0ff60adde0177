"""Response envelope: a read response plus its rate and pagination metadata."""

from __future__ import annotations

import io
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from discogs.sdk.exceptions import DecodeFailure, build_status_error
from discogs.sdk.models import PageBody, PageInfo, RateInfo

M = TypeVar("M", bound=BaseModel)


def peek_page_info(content: bytes) -> PageInfo:
    """Pull ``pagination`` out of a JSON body; anything unparseable gives a zero PageInfo."""
    if not content:
        return PageInfo()
    try:
        return PageBody.model_validate_json(content).pagination
    except PydanticValidationError:
        return PageInfo()


def _parse_detail(envelope: ResponseEnvelope) -> str:
    """Extract the ``message`` field from a Discogs error body."""
    try:
        body = envelope.json()
    except ValueError:
        return envelope.text
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or envelope.text)
    return envelope.text


class ResponseEnvelope:
    """Wraps one ``httpx.Response`` whose body has already been read.

    The body is buffered once; :attr:`content`, :meth:`read` and
    :meth:`stream` all hand back the same bytes the server sent, however many
    times they are called.
    """

    __slots__ = ("_response", "_content", "_rate", "_pagination")

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._content = response.content
        self._rate = RateInfo.from_headers(response.headers)
        self._pagination = peek_page_info(self._content)

    def __repr__(self) -> str:
        return f"<ResponseEnvelope [{self.status_code}] {self.url}>"

    # -- metadata ------------------------------------------------------------

    @property
    def rate(self) -> RateInfo:
        return self._rate

    @property
    def pagination(self) -> PageInfo:
        return self._pagination

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def url(self) -> httpx.URL:
        return self._response.request.url

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def is_success(self) -> bool:
        return self._response.is_success

    # -- body ----------------------------------------------------------------

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def text(self) -> str:
        return self._response.text

    def read(self) -> bytes:
        return self._content

    def stream(self) -> io.BytesIO:
        """A fresh reader over the body, positioned at the start."""
        return io.BytesIO(self._content)

    def json(self) -> Any:
        return self._response.json()

    def decode(self, model: type[M]) -> M:
        try:
            return model.model_validate_json(self._content)
        except PydanticValidationError as exc:
            raise DecodeFailure(model.__name__, exc) from exc

    # -- caller-side status check --------------------------------------------

    def expect(self, *codes: int) -> ResponseEnvelope:
        """Raise the mapped :class:`UnexpectedStatus` unless the status is in *codes*."""
        if self.status_code in codes:
            return self
        raise build_status_error(
            self.status_code, _parse_detail(self), codes, self._rate,
        )
