from models.base import Base
from models.activity import Activity
from models.user import User
from models.watchlist import Watchlist

__all__ = ["Base", "Activity", "User", "Watchlist"]
