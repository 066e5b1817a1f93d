from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from constants.media import MediaType, WatchStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class _Document(BaseModel):
    # camelCase on the wire and in the stored JSON, snake_case in Python
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Progress(_Document):
    current: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class WatchlistItem(_Document):
    id: str = Field(default_factory=new_id)
    title: str = Field(min_length=1)
    media_type: MediaType = Field(alias="type")
    status: WatchStatus
    rating: float = Field(default=0, ge=0, le=10)
    progress: Progress = Field(default_factory=Progress)
    folders: list[str] = Field(default_factory=list, max_length=1)
    genre: list[str] = Field(default_factory=list)
    poster: str = ""
    description: str = ""
    release_date: str = ""
    notes: str = ""
    added_date: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)

    @property
    def custom_folder(self) -> str | None:
        return self.folders[0] if self.folders else None


class CustomFolder(_Document):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    is_shared: bool = False
    share_url: str = ""
    shared_date: datetime | None = None
    created_date: datetime = Field(default_factory=utcnow)


class WatchlistDocument(_Document):
    user_id: str
    items: list[WatchlistItem] = Field(default_factory=list)
    custom_folders: list[CustomFolder] = Field(default_factory=list)

    def find_item(self, item_id: str) -> WatchlistItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    def find_folder(self, folder_id: str) -> CustomFolder | None:
        return next((f for f in self.custom_folders if f.id == folder_id), None)

    def find_folder_by_name(self, name: str) -> CustomFolder | None:
        return next((f for f in self.custom_folders if f.name == name), None)

    def folder_names(self) -> list[str]:
        return [f.name for f in self.custom_folders]
