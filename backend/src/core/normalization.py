"""Status and progress normalization.

Metadata providers hand us loosely-typed statuses ("Finished Airing",
"Returning Series", ...) and progress values ("12/24", "Completed").
Everything stored on a watchlist item goes through these functions first.
"""

import re
from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from constants.media import (
    EXTERNAL_STATUS_MAP,
    GAME_EQUIVALENTS,
    GAME_STATUSES,
    STATUS_ALIASES,
    WATCH_EQUIVALENTS,
    WATCH_STATUSES,
    MediaType,
    WatchStatus,
)
from core.types import Progress

_PROGRESS_PATTERN = re.compile(r"(\d+)\s*/\s*(\d+)")

COMPLETED_PROGRESS = Progress(current=1, total=1)


def default_status(media_type: MediaType) -> WatchStatus:
    if media_type == MediaType.GAMES:
        return WatchStatus.PLAN_TO_PLAY
    return WatchStatus.PLAN_TO_WATCH


def valid_statuses(media_type: MediaType) -> tuple[WatchStatus, ...]:
    if media_type == MediaType.GAMES:
        return GAME_STATUSES
    return WATCH_STATUSES


def is_valid_status(status, media_type: MediaType) -> bool:
    """True when ``status`` is an exact watchlist status for this media type."""
    return any(status == s.value for s in valid_statuses(media_type))


def _for_media_type(status: WatchStatus, media_type: MediaType) -> WatchStatus:
    if media_type == MediaType.GAMES:
        return GAME_EQUIVALENTS.get(status, status)
    return WATCH_EQUIVALENTS.get(status, status)


def map_to_watchlist_status(raw, media_type: MediaType) -> WatchStatus:
    fallback = default_status(media_type)
    if isinstance(raw, WatchStatus):
        raw = raw.value
    if not isinstance(raw, str) or not raw.strip():
        return fallback

    if is_valid_status(raw, media_type):
        return WatchStatus(raw)

    key = raw.strip().lower()
    if key in STATUS_ALIASES:
        return _for_media_type(STATUS_ALIASES[key], media_type)

    if key in EXTERNAL_STATUS_MAP:
        mapped = EXTERNAL_STATUS_MAP[key]
        return _for_media_type(mapped, media_type) if mapped else fallback

    return fallback


def parse_progress(value) -> Progress:
    if isinstance(value, Progress):
        return value.model_copy()

    if isinstance(value, Mapping):
        if "current" in value and "total" in value:
            try:
                return Progress(current=value["current"], total=value["total"])
            except ValidationError:
                return Progress()
        return Progress()

    if isinstance(value, str):
        if value.strip().lower() == "completed":
            return COMPLETED_PROGRESS.model_copy()
        match = _PROGRESS_PATTERN.search(value)
        if match:
            return Progress(current=int(match.group(1)), total=int(match.group(2)))

    return Progress()


def format_progress(progress: Progress) -> str:
    return f"{progress.current}/{progress.total}"


def normalize_genre(value) -> list[str]:
    """Accept "Action, Drama", ["Action"] or [{"name": "Action"}]."""
    if not value:
        return []
    if isinstance(value, str):
        return [g.strip() for g in value.split(",") if g.strip()]
    if isinstance(value, Mapping):
        value = [value]
    elif not isinstance(value, Iterable):
        return []
    genres = []
    for g in value:
        name = g.get("name") if isinstance(g, Mapping) else g
        if isinstance(name, str) and name.strip() and name.strip() not in genres:
            genres.append(name.strip())
    return genres
