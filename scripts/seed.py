"""Seed script to populate the database with a demo watchlist for testing."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend" / "src"))

from core.database import get_db  # noqa: E402
from core.store import WatchlistStore  # noqa: E402
from core.types import WatchlistDocument  # noqa: E402
from models.user import User  # noqa: E402
from models.watchlist import Watchlist  # noqa: E402


async def seed():
    async with get_db() as db:
        user = User(email="demo@example.com", display_name="Demo")
        db.add(user)
        await db.flush()

        store = WatchlistStore(WatchlistDocument(user_id=str(user.id)))
        store.create_folder("Epics")

        items_data = [
            ("Dune", "Movies", {"status": "Completed", "rating": 9, "genre": "Sci-Fi, Adventure", "folders": ["Epics"]}),
            ("Arrival", "Movies", {}),
            ("Severance", "TV Shows", {"status": "Watching", "progress": "5/9"}),
            ("Frieren", "Anime", {"status": "Completed", "progress": "28/28", "rating": 10}),
            ("Hades", "Games", {"status": "Playing", "genre": ["Roguelike"]}),
        ]
        for title, media_type, attrs in items_data:
            result = store.add_item(title, media_type, attrs)
            if "error" in result:
                print(f"  skipped {title}: {result['error']}")

        store.share_folder("Epics", str(user.id), "http://localhost:3000")

        watchlist = Watchlist(user_id=user.id)
        watchlist.apply_document(store.document)
        db.add(watchlist)
        await db.flush()

        print("Database seeded with sample data!")
        print(f"  user {user.email} ({user.id})")
        print(f"  {len(store.document.items)} items")
        print(f"  {len(store.document.custom_folders)} custom folders")


if __name__ == "__main__":
    asyncio.run(seed())
