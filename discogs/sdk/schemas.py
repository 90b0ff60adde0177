"""Pydantic models for Discogs collection, identity and database payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from discogs.sdk.models import PageBody


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


class Artist(BaseModel):
    id: int = 0
    resource_url: str = ""
    name: str = ""
    anv: str = ""
    join: str = ""
    role: str = ""
    tracks: str = ""


class Label(BaseModel):
    id: int = 0
    resource_url: str = ""
    name: str = ""
    catno: str = ""
    # Discogs sends this number as a string; lax mode coerces it.
    entity_type: int = 0
    entity_type_name: str = ""


class Company(Label):
    pass


class User(BaseModel):
    resource_url: str = ""
    username: str = ""


class Track(BaseModel):
    duration: str = ""
    position: str = ""
    title: str = ""
    type_: str = ""


class Format(BaseModel):
    descriptions: list[str] = Field(default_factory=list)
    name: str = ""
    qty: str = ""


class Community(BaseModel):
    contributors: list[User] = Field(default_factory=list)


class Identifier(BaseModel):
    type: str = ""
    value: str = ""


class Image(BaseModel):
    height: int = 0
    width: int = 0
    resource_url: str = ""
    type: str = ""
    uri: str = ""
    uri150: str = ""


class Video(BaseModel):
    description: str = ""
    duration: int = 0
    embed: bool = False
    title: str = ""
    uri: str = ""


class Release(BaseModel):
    """Full release record from ``GET /releases/{id}``."""

    id: int = 0
    title: str = ""
    artists: list[Artist] = Field(default_factory=list)
    data_quality: str = ""
    thumb: str = ""
    community: Community = Field(default_factory=Community)
    companies: list[Company] = Field(default_factory=list)
    country: str = ""
    date_added: str = ""
    date_changed: str = ""
    estimated_weight: int = 0
    extraartists: list[Artist] = Field(default_factory=list)
    format_quantity: int = 0
    formats: list[Format] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    identifiers: list[Identifier] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    labels: list[Label] = Field(default_factory=list)
    lowest_price: float | None = None
    master_id: int = 0
    master_url: str = ""
    notes: str = ""
    num_for_sale: int = 0
    released: str = ""
    released_formatted: str = ""
    resource_url: str = ""
    series: list[Any] = Field(default_factory=list)
    status: str = ""
    styles: list[str] = Field(default_factory=list)
    tracklist: list[Track] = Field(default_factory=list)
    uri: str = ""
    videos: list[Video] = Field(default_factory=list)
    year: int = 0


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


class Folder(BaseModel):
    id: int = 0
    resource_url: str = ""
    count: int = 0
    name: str = ""


class BasicInformation(BaseModel):
    id: int = 0
    resource_url: str = ""
    master_id: int = 0
    master_url: str | None = None
    thumb: str = ""
    cover_image: str = ""
    title: str = ""
    year: int = 0
    genres: list[str] = Field(default_factory=list)
    styles: list[str] = Field(default_factory=list)
    artists: list[Artist] = Field(default_factory=list)
    labels: list[Label] = Field(default_factory=list)
    formats: list[Format] = Field(default_factory=list)


class ReleaseInstance(BaseModel):
    """One copy of a release in a user's collection."""

    id: int = 0
    instance_id: int = 0
    date_added: str = ""
    folder_id: int = 0
    rating: int = 0
    basic_information: BasicInformation = Field(default_factory=BasicInformation)


class CustomField(BaseModel):
    id: int = 0
    name: str = ""
    options: list[str] = Field(default_factory=list)
    position: int = 0
    type: str = ""
    public: bool = False
    lines: int = 0


class CollectionValue(BaseModel):
    maximum: str = ""
    median: str = ""
    minimum: str = ""


class Instance(BaseModel):
    instance_id: int = 0
    resource_url: str = ""


class FoldersResponse(BaseModel):
    folders: list[Folder] = Field(default_factory=list)


class CustomFieldsResponse(BaseModel):
    fields: list[CustomField] = Field(default_factory=list)


class ReleasesPage(PageBody):
    releases: list[ReleaseInstance] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Identity(BaseModel):
    id: int = 0
    resource_url: str = ""
    username: str = ""
    consumer_name: str = ""


class Profile(BaseModel):
    id: int = 0
    resource_url: str = ""
    profile: str = ""
    wantlist_url: str = ""
    rank: float = 0
    num_pending: int = 0
    num_for_sale: int = 0
    home_page: str = ""
    location: str = ""
    collection_folders_url: str = ""
    username: str = ""
    collection_fields_url: str = ""
    releases_contributed: int = 0
    registered: str = ""
    rating_avg: float = 0
    num_collection: int = 0
    releases_rated: int = 0
    num_lists: int = 0
    name: str = ""
    num_wantlist: int = 0
    inventory_url: str = ""
    avatar_url: str = ""
    banner_url: str = ""
    uri: str = ""
    buyer_rating: float = 0
    buyer_rating_stars: float = 0
    buyer_num_ratings: int = 0
    seller_rating: float = 0
    seller_rating_stars: float = 0
    seller_num_ratings: int = 0
    curr_abbr: str = ""


class ProfileUpdate(BaseModel):
    """Editable profile fields; unset fields are left out of the request."""

    name: str | None = None
    home_page: str | None = None
    location: str | None = None
    profile: str | None = None
    curr_abbr: str | None = None


class ContributionsPage(PageBody):
    contributions: list[Release] = Field(default_factory=list)


class Submissions(BaseModel):
    artists: list[dict[str, Any]] = Field(default_factory=list)
    labels: list[dict[str, Any]] = Field(default_factory=list)
    releases: list[Release] = Field(default_factory=list)

    def extend(self, other: Submissions) -> None:
        self.artists.extend(other.artists)
        self.labels.extend(other.labels)
        self.releases.extend(other.releases)


class SubmissionsPage(PageBody):
    submissions: Submissions = Field(default_factory=Submissions)
