"""Correlation ID for each outbound dispatch, carried in a contextvar."""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("discogs_request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> str:
    """Read the ID of the dispatch currently in progress ("" outside one)."""
    return request_id_var.get()


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of one dispatch.

    Log records emitted inside the block pick the ID up through the
    formatters in :mod:`discogs.logging_config`. The previous value is
    restored on exit, so nested and concurrent scopes do not leak.
    """
    rid = request_id or new_request_id()
    token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(token)
