import logging
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from constants.media import MediaType
from core.errors import ErrorCode, failure
from core.folders import is_default_category, retag_items, tag_item, untag_items
from core.normalization import (
    default_status,
    is_valid_status,
    map_to_watchlist_status,
    normalize_genre,
    parse_progress,
)
from core.types import CustomFolder, WatchlistDocument, WatchlistItem, utcnow

logger = logging.getLogger(__name__)

# Wire name or python name -> field name
_ITEM_FIELDS = {
    **{name: name for name in WatchlistItem.model_fields},
    **{f.alias: name for name, f in WatchlistItem.model_fields.items() if f.alias},
}
_SERVER_MANAGED = {"added_date", "last_updated"}
_READ_ONLY = {"id", "media_type", *_SERVER_MANAGED}


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _unchanged(item: WatchlistItem, name: str, value) -> bool:
    """True when a patch value for a read-only field equals what is stored."""
    annotation = WatchlistItem.model_fields[name].annotation
    try:
        return TypeAdapter(annotation).validate_python(value) == getattr(item, name)
    except ValidationError:
        return False


def _custom_tags(folders: list[str]) -> list[str]:
    return [f for f in folders if not is_default_category(f)]


class WatchlistStore:
    """Invariant-enforcing operations over one user's watchlist document.

    Methods return ``{"success": True, ...}`` or a ``failure`` dict; they only
    mutate the document when the whole operation is valid.
    """

    def __init__(self, document: WatchlistDocument):
        self.document = document

    # -- items -------------------------------------------------------------

    def add_item(self, title: str, media_type: str, attrs: dict | None = None) -> dict:
        title = (title or "").strip()
        if not title:
            return failure(ErrorCode.VALIDATION_FAILED, "Title is required")
        try:
            media_type = MediaType(media_type)
        except ValueError:
            return failure(ErrorCode.VALIDATION_FAILED, f"Unknown media type: {media_type!r}")

        if self._find_duplicate(title, media_type):
            return failure(
                ErrorCode.DUPLICATE_ITEM,
                f"'{title}' is already in the {media_type.value} watchlist",
            )

        fields = {}
        for key, value in (attrs or {}).items():
            name = _ITEM_FIELDS.get(key)
            if name and value is not None and name not in ("id", "title", "media_type", *_SERVER_MANAGED):
                fields[name] = value

        status = fields.pop("status", None)
        fields["status"] = status if is_valid_status(status, media_type) else default_status(media_type)
        fields["progress"] = parse_progress(fields.get("progress"))
        fields["genre"] = normalize_genre(fields.get("genre"))

        folders = fields.pop("folders", None) or []
        error = self._check_folder_tags(folders)
        if error:
            return error

        try:
            item = WatchlistItem(
                title=title, media_type=media_type, folders=_custom_tags(folders), **fields
            )
        except ValidationError as e:
            return failure(ErrorCode.VALIDATION_FAILED, _describe(e))

        self.document.items.append(item)
        logger.info("Added %s '%s' with status %s", media_type.value, title, item.status.value)
        return {"success": True, "item": item}

    def update_item(self, item_id: str, patch: dict) -> dict:
        item = self.document.find_item(item_id)
        if not item:
            return failure(ErrorCode.NOT_FOUND, "Item not found")

        previous = {
            "status": item.status,
            "rating": item.rating,
            "folder": item.custom_folder,
        }
        candidate = item.model_copy(deep=True)

        try:
            for key, value in patch.items():
                name = _ITEM_FIELDS.get(key)
                if name is None or value is None:
                    continue
                if name in _READ_ONLY:
                    if not _unchanged(item, name, value):
                        return failure(ErrorCode.VALIDATION_FAILED, f"'{key}' cannot be changed")
                    continue

                if name == "status":
                    candidate.status = map_to_watchlist_status(value, item.media_type)
                elif name == "progress":
                    candidate.progress = parse_progress(value)
                elif name == "genre":
                    candidate.genre = normalize_genre(value)
                elif name == "title":
                    title = (value or "").strip()
                    if not title:
                        return failure(ErrorCode.VALIDATION_FAILED, "Title is required")
                    duplicate = self._find_duplicate(title, item.media_type)
                    if duplicate and duplicate.id != item.id:
                        return failure(
                            ErrorCode.DUPLICATE_ITEM,
                            f"'{title}' is already in the {item.media_type.value} watchlist",
                        )
                    candidate.title = title
                elif name == "folders":
                    error = self._check_folder_tags(value)
                    if error:
                        return error
                    candidate.folders = _custom_tags(value)
                else:
                    setattr(candidate, name, value)
        except ValidationError as e:
            return failure(ErrorCode.VALIDATION_FAILED, _describe(e))

        candidate.last_updated = utcnow()
        self._replace_item(candidate)
        return {"success": True, "item": candidate, "previous": previous}

    def remove_item(self, item_id: str) -> dict:
        item = self.document.find_item(item_id)
        if not item:
            return failure(ErrorCode.NOT_FOUND, "Item not found")
        self.document.items = [i for i in self.document.items if i.id != item_id]
        return {"success": True, "item": item}

    def assign_item_to_folder(self, item_id: str, folder_name: str) -> dict:
        item = self.document.find_item(item_id)
        if not item:
            return failure(ErrorCode.NOT_FOUND, "Item not found")
        if not is_default_category(folder_name) and not self.document.find_folder_by_name(folder_name):
            return failure(ErrorCode.NOT_FOUND, f"Folder '{folder_name}' not found")

        previous_folder = item.custom_folder
        tag_item(item, folder_name)
        item.last_updated = utcnow()
        return {"success": True, "item": item, "previous_folder": previous_folder}

    # -- folders -----------------------------------------------------------

    def create_folder(self, name: str) -> dict:
        name = (name or "").strip()
        error = self._check_new_folder_name(name)
        if error:
            return error
        folder = CustomFolder(name=name)
        self.document.custom_folders.append(folder)
        return {"success": True, "folder": folder}

    def rename_folder(self, folder_id: str, new_name: str) -> dict:
        folder = self.document.find_folder(folder_id)
        if not folder:
            return failure(ErrorCode.NOT_FOUND, "Folder not found")
        new_name = (new_name or "").strip()
        if new_name == folder.name:
            return {"success": True, "folder": folder, "previous_name": folder.name}
        error = self._check_new_folder_name(new_name)
        if error:
            return error

        old_name = folder.name
        folder.name = new_name
        for item in retag_items(self.document.items, old_name, new_name):
            item.last_updated = utcnow()
        return {"success": True, "folder": folder, "previous_name": old_name}

    def delete_folder(self, folder_id: str) -> dict:
        folder = self.document.find_folder(folder_id)
        if not folder:
            return failure(ErrorCode.NOT_FOUND, "Folder not found")
        untagged = untag_items(self.document.items, folder.name)
        self.document.custom_folders = [f for f in self.document.custom_folders if f.id != folder_id]
        return {"success": True, "folder": folder, "untagged": len(untagged)}

    def share_folder(self, name_or_id: str, user_id: str, origin: str) -> dict:
        origin = origin.rstrip("/")
        if is_default_category(name_or_id):
            share_url = f"{origin}/shared/{quote(name_or_id, safe='')}/{user_id}"
            return {
                "success": True,
                "share_url": share_url,
                "folder": {"name": name_or_id, "type": "default"},
            }

        folder = self._resolve_folder(name_or_id)
        if not folder:
            return failure(ErrorCode.NOT_FOUND, "Folder not found")

        share_url = f"{origin}/shared/{folder.id}/{user_id}"
        folder.is_shared = True
        folder.share_url = share_url
        if folder.shared_date is None:
            folder.shared_date = utcnow()
        return {"success": True, "share_url": share_url, "folder": folder}

    def unshare_folder(self, name_or_id: str) -> dict:
        if is_default_category(name_or_id):
            return failure(
                ErrorCode.VALIDATION_FAILED,
                "Default categories are shared by link only and cannot be unshared",
            )
        folder = self._resolve_folder(name_or_id)
        if not folder:
            return failure(ErrorCode.NOT_FOUND, "Folder not found")
        folder.is_shared = False
        folder.share_url = ""
        folder.shared_date = None
        return {"success": True, "folder": folder}

    # -- reads -------------------------------------------------------------

    def stats(self) -> dict:
        items = self.document.items
        by_status: dict[str, int] = {}
        by_type: dict[str, int] = {}
        for item in items:
            by_status[item.status.value] = by_status.get(item.status.value, 0) + 1
            by_type[item.media_type.value] = by_type.get(item.media_type.value, 0) + 1

        rated = [i.rating for i in items if i.rating > 0]
        return {
            "total": len(items),
            "byStatus": by_status,
            "byType": by_type,
            "averageRating": round(sum(rated) / len(rated), 1) if rated else 0.0,
            "customFolders": len(self.document.custom_folders),
            "sharedFolders": sum(1 for f in self.document.custom_folders if f.is_shared),
        }

    def search(self, query: str) -> list[WatchlistItem]:
        term = (query or "").strip().lower()
        if not term:
            return list(self.document.items)
        return [
            item
            for item in self.document.items
            if term in item.title.lower()
            or term in item.media_type.value.lower()
            or any(term in g.lower() for g in item.genre)
            or term in item.notes.lower()
        ]

    # -- helpers -----------------------------------------------------------

    def _find_duplicate(self, title: str, media_type: MediaType) -> WatchlistItem | None:
        return next(
            (i for i in self.document.items if i.title == title and i.media_type == media_type),
            None,
        )

    def _replace_item(self, item: WatchlistItem) -> None:
        self.document.items = [item if i.id == item.id else i for i in self.document.items]

    def _resolve_folder(self, name_or_id: str) -> CustomFolder | None:
        return self.document.find_folder(name_or_id) or self.document.find_folder_by_name(name_or_id)

    def _check_new_folder_name(self, name: str) -> dict | None:
        if not name:
            return failure(ErrorCode.VALIDATION_FAILED, "Folder name is required")
        if is_default_category(name):
            return failure(ErrorCode.RESERVED_NAME, f"'{name}' is a default category")
        if self.document.find_folder_by_name(name):
            return failure(ErrorCode.DUPLICATE_FOLDER, f"Folder '{name}' already exists")
        return None

    def _check_folder_tags(self, folders) -> dict | None:
        if not isinstance(folders, list) or not all(isinstance(f, str) for f in folders):
            return failure(ErrorCode.VALIDATION_FAILED, "folders must be a list of folder names")
        if len(folders) > 1:
            return failure(ErrorCode.VALIDATION_FAILED, "An item can be in at most one custom folder")
        for name in folders:
            if is_default_category(name):
                # assigning a default category clears the tag
                continue
            if not self.document.find_folder_by_name(name):
                return failure(ErrorCode.NOT_FOUND, f"Folder '{name}' not found")
        return None
