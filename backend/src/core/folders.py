"""Folder membership rules and the grouped view derived from them.

Every item is shown under its media-type category. An item may also carry a
tag for at most one custom folder, in which case it is shown there too.
"""

from collections.abc import Iterable, Sequence

from constants.media import DEFAULT_CATEGORIES
from core.types import CustomFolder, WatchlistItem


def is_default_category(name: str) -> bool:
    return name in DEFAULT_CATEGORIES


def _name(folder: CustomFolder | str) -> str:
    return folder if isinstance(folder, str) else folder.name


def tag_item(item: WatchlistItem, folder_name: str) -> None:
    if is_default_category(folder_name):
        item.folders = []
    else:
        item.folders = [folder_name]


def untag_items(items: Iterable[WatchlistItem], folder_name: str) -> list[WatchlistItem]:
    """Drop ``folder_name`` from every item. Returns the items that changed."""
    changed = []
    for item in items:
        if folder_name in item.folders:
            item.folders = [f for f in item.folders if f != folder_name]
            changed.append(item)
    return changed


def retag_items(items: Iterable[WatchlistItem], old_name: str, new_name: str) -> list[WatchlistItem]:
    changed = []
    for item in items:
        if old_name in item.folders:
            item.folders = [new_name if f == old_name else f for f in item.folders]
            changed.append(item)
    return changed


def group_by_folder(
    items: Sequence[WatchlistItem],
    custom_folders: Sequence[CustomFolder | str],
    status_filter: str | None = None,
) -> dict[str, list[WatchlistItem]]:
    folder_names = [_name(f) for f in custom_folders]
    if status_filter and status_filter != "All":
        items = [i for i in items if i.status == status_filter]

    grouped: dict[str, list[WatchlistItem]] = {}
    for category in DEFAULT_CATEGORIES:
        members = [i for i in items if i.media_type == category]
        if members:
            grouped[category] = members

    # Custom folders stay visible as tabs even when empty
    for name in folder_names:
        grouped[name] = [i for i in items if i.custom_folder == name]

    return grouped


def select_active_tab(
    current: str | None,
    grouped: dict[str, list],
    custom_folders: Sequence[CustomFolder | str],
) -> str | None:
    if current is not None and current in grouped:
        return current
    ordered = [*DEFAULT_CATEGORIES, *(_name(f) for f in custom_folders)]
    return next((tab for tab in ordered if tab in grouped), None)
