from enum import Enum


class MediaType(str, Enum):
    MOVIES = "Movies"
    TV_SHOWS = "TV Shows"
    WEB_SERIES = "Web Series"
    ANIME = "Anime"
    GAMES = "Games"


class WatchStatus(str, Enum):
    PLAN_TO_WATCH = "Plan to Watch"
    PLAN_TO_PLAY = "Plan to Play"
    WATCHING = "Watching"
    PLAYING = "Playing"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    DROPPED = "Dropped"


# Fixed tab order; also the reserved folder names.
DEFAULT_CATEGORIES: tuple[str, ...] = tuple(m.value for m in MediaType)

WATCH_STATUSES = (
    WatchStatus.PLAN_TO_WATCH,
    WatchStatus.WATCHING,
    WatchStatus.ON_HOLD,
    WatchStatus.COMPLETED,
    WatchStatus.DROPPED,
)

GAME_STATUSES = (
    WatchStatus.PLAN_TO_PLAY,
    WatchStatus.PLAYING,
    WatchStatus.ON_HOLD,
    WatchStatus.COMPLETED,
    WatchStatus.DROPPED,
)

# Watchlist statuses by lower-cased name, used for loose matching.
# "watching"/"playing" style pairs are resolved per media type afterwards.
STATUS_ALIASES = {
    "plan to watch": WatchStatus.PLAN_TO_WATCH,
    "plan to play": WatchStatus.PLAN_TO_PLAY,
    "watching": WatchStatus.WATCHING,
    "playing": WatchStatus.PLAYING,
    "on hold": WatchStatus.ON_HOLD,
    "completed": WatchStatus.COMPLETED,
    "dropped": WatchStatus.DROPPED,
}

# Statuses reported by metadata providers (Jikan, TMDB, RAWG...).
# None means "use the media type's default status".
EXTERNAL_STATUS_MAP: dict[str, WatchStatus | None] = {
    # finished
    "finished airing": WatchStatus.COMPLETED,
    "finished": WatchStatus.COMPLETED,
    "complete": WatchStatus.COMPLETED,
    "released": WatchStatus.COMPLETED,
    "ended": WatchStatus.COMPLETED,
    # running
    "airing": WatchStatus.WATCHING,
    "currently airing": WatchStatus.WATCHING,
    "ongoing": WatchStatus.WATCHING,
    "returning series": WatchStatus.WATCHING,
    # stopped
    "canceled": WatchStatus.DROPPED,
    "cancelled": WatchStatus.DROPPED,
    # not out yet
    "not yet aired": None,
    "upcoming": None,
    "in production": None,
    "post production": None,
    "planned": None,
    "rumored": None,
}

# Counterparts when a status from one vocabulary lands on the other.
GAME_EQUIVALENTS = {
    WatchStatus.PLAN_TO_WATCH: WatchStatus.PLAN_TO_PLAY,
    WatchStatus.WATCHING: WatchStatus.PLAYING,
}
WATCH_EQUIVALENTS = {v: k for k, v in GAME_EQUIVALENTS.items()}
