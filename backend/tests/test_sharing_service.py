import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.errors import ErrorCode
from core.store import WatchlistStore
from core.types import WatchlistDocument
from models.user import User
from models.watchlist import Watchlist
from services.sharing import SharingService

OWNER_ID = "7f1c6f5e-2a53-4c55-9d7c-6a2b8b1f0c11"


@pytest.fixture
def owner_row():
    store = WatchlistStore(WatchlistDocument(user_id=OWNER_ID))
    store.create_folder("Favorites")
    store.create_folder("Private")
    store.add_item("Dune", "Movies", {"notes": "secret thoughts", "folders": ["Favorites"]})
    store.add_item("Arrival", "Movies", {"folders": ["Private"]})
    store.add_item("Hades", "Games", {"folders": ["Favorites"]})
    store.share_folder("Favorites", OWNER_ID, "http://app.test")

    row = Watchlist(user_id=uuid.UUID(OWNER_ID))
    row.apply_document(store.document)
    return row


@pytest.fixture
def mock_db(owner_row):
    db = AsyncMock()
    db.scalar = AsyncMock(return_value=owner_row)
    db.get = AsyncMock(return_value=User(email="ana@example.com", display_name="Ana"))
    scalars_result = MagicMock()
    scalars_result.all.return_value = [owner_row]
    db.scalars = AsyncMock(return_value=scalars_result)
    return db


@pytest.fixture
def service(mock_db):
    return SharingService(mock_db)


def _favorites_id(row):
    return next(f["id"] for f in row.custom_folders if f["name"] == "Favorites")


async def test_default_category_requires_owner(service):
    result = await service.get_shared_view("Movies")
    assert result["code"] == ErrorCode.OWNER_REQUIRED


async def test_default_category_unknown_owner(mock_db, service):
    mock_db.scalar.return_value = None
    result = await service.get_shared_view("Movies", str(uuid.uuid4()))
    assert result["code"] == ErrorCode.OWNER_NOT_FOUND


async def test_default_category_invalid_owner_id(service):
    result = await service.get_shared_view("Movies", "not-a-uuid")
    assert result["code"] == ErrorCode.OWNER_NOT_FOUND


async def test_default_category_lists_items_of_type(service):
    result = await service.get_shared_view("Movies", OWNER_ID)
    assert result["success"]
    assert result["folder"] == {"name": "Movies", "isShared": True, "type": "default"}
    assert sorted(i["title"] for i in result["items"]) == ["Arrival", "Dune"]
    assert result["owner"] == {"id": OWNER_ID, "name": "Ana"}
    assert "sharedDate" in result


async def test_default_category_with_no_items_is_empty(service):
    result = await service.get_shared_view("Anime", OWNER_ID)
    assert result["success"]
    assert result["items"] == []


async def test_custom_folder_by_name_with_owner(service):
    result = await service.get_shared_view("Favorites", OWNER_ID)
    assert result["success"]
    assert result["folder"]["type"] == "custom"
    assert sorted(i["title"] for i in result["items"]) == ["Dune", "Hades"]


async def test_custom_folder_by_id_without_owner(owner_row, service):
    result = await service.get_shared_view(_favorites_id(owner_row))
    assert result["success"]
    assert result["folder"]["name"] == "Favorites"


async def test_custom_folder_by_name_needs_owner(service):
    result = await service.get_shared_view("Favorites")
    assert result["code"] == ErrorCode.NOT_SHARED_OR_MISSING


async def test_unshared_folder_is_hidden(service):
    result = await service.get_shared_view("Private", OWNER_ID)
    assert result["code"] == ErrorCode.NOT_SHARED_OR_MISSING


async def test_missing_folder(service):
    result = await service.get_shared_view("Nope", OWNER_ID)
    assert result["code"] == ErrorCode.NOT_SHARED_OR_MISSING


async def test_projection_hides_private_fields(service):
    result = await service.get_shared_view("Favorites", OWNER_ID)
    for item in result["items"]:
        assert "notes" not in item
        assert "folders" not in item
    assert "email" not in result["owner"]


async def test_owner_without_profile_is_anonymous(mock_db, service):
    mock_db.get.return_value = None
    result = await service.get_shared_view("Movies", OWNER_ID)
    assert result["owner"]["name"] == "Anonymous User"
