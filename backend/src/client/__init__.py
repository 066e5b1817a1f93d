from client.api import WatchlistClient
from client.cache import WatchlistCache

__all__ = ["WatchlistCache", "WatchlistClient"]
