"""Response metadata: rate-limit counters and pagination descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

RATELIMIT_HEADER = "x-discogs-ratelimit"
RATELIMIT_USED_HEADER = "x-discogs-ratelimit-used"
RATELIMIT_REMAINING_HEADER = "x-discogs-ratelimit-remaining"


def _header_int(headers: Mapping[str, str], name: str) -> int:
    try:
        return int(headers.get(name, 0))
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RateInfo:
    """Server-reported quota counters. Observational only."""

    limit: int = 0
    used: int = 0
    remaining: int = 0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateInfo:
        """Parse ``X-Discogs-Ratelimit*`` headers; absent or junk values read as 0."""
        return cls(
            limit=_header_int(headers, RATELIMIT_HEADER),
            used=_header_int(headers, RATELIMIT_USED_HEADER),
            remaining=_header_int(headers, RATELIMIT_REMAINING_HEADER),
        )


class _NullAsDefault(BaseModel):
    """A JSON null leaves the field at its default instead of failing."""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].get_default(
                call_default_factory=True
            )
        return value


class PageURLs(_NullAsDefault):
    model_config = ConfigDict(frozen=True)

    first: str = ""
    prev: str = ""
    next: str = ""
    last: str = ""


class PageInfo(_NullAsDefault):
    """The ``pagination`` object Discogs attaches to list responses."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = 0
    total_pages: int = Field(0, alias="pages")
    item_count: int = Field(0, alias="items")
    per_page: int = 0
    urls: PageURLs = Field(default_factory=PageURLs)

    @property
    def has_next(self) -> bool:
        return bool(self.urls.next)


class PageBody(_NullAsDefault):
    """Base for list payloads: a list field next to an optional ``pagination``."""

    pagination: PageInfo = Field(default_factory=PageInfo)
