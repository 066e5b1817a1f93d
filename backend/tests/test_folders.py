from constants.media import MediaType, WatchStatus
from core.folders import group_by_folder, select_active_tab
from core.types import CustomFolder, WatchlistItem


def _item(title, media_type=MediaType.MOVIES, status=WatchStatus.PLAN_TO_WATCH, folder=None):
    return WatchlistItem(
        title=title,
        media_type=media_type,
        status=status,
        folders=[folder] if folder else [],
    )


def test_item_appears_in_default_and_custom_group():
    dune = _item("Dune", folder="Epics")
    grouped = group_by_folder([dune], [CustomFolder(name="Epics")])
    assert grouped["Movies"] == [dune]
    assert grouped["Epics"] == [dune]


def test_empty_custom_folders_are_kept():
    grouped = group_by_folder([], [CustomFolder(name="Later"), "Favorites"])
    assert grouped == {"Later": [], "Favorites": []}


def test_empty_default_categories_are_omitted():
    grouped = group_by_folder([_item("Hades", MediaType.GAMES, WatchStatus.PLAN_TO_PLAY)], [])
    assert list(grouped) == ["Games"]


def test_tag_for_unknown_folder_is_ignored():
    stray = _item("Dune", folder="Deleted")
    grouped = group_by_folder([stray], [])
    assert grouped == {"Movies": [stray]}


def test_status_filter_applies_before_grouping():
    done = _item("Dune", status=WatchStatus.COMPLETED, folder="Epics")
    todo = _item("Arrival", folder="Epics")
    grouped = group_by_folder([done, todo], ["Epics"], status_filter="Completed")
    assert grouped["Movies"] == [done]
    assert grouped["Epics"] == [done]


def test_status_filter_all_means_no_filter():
    items = [_item("Dune"), _item("Arrival", status=WatchStatus.DROPPED)]
    assert len(group_by_folder(items, [], status_filter="All")["Movies"]) == 2


def test_group_order_is_defaults_then_folders_in_creation_order():
    items = [
        _item("Hades", MediaType.GAMES, WatchStatus.PLAN_TO_PLAY),
        _item("Frieren", MediaType.ANIME),
        _item("Dune"),
    ]
    grouped = group_by_folder(items, ["Zeta", "Alpha"])
    assert list(grouped) == ["Movies", "Anime", "Games", "Zeta", "Alpha"]


def test_active_tab_kept_when_present():
    grouped = {"Movies": [], "Anime": [], "Epics": []}
    assert select_active_tab("Anime", grouped, ["Epics"]) == "Anime"


def test_active_tab_falls_back_after_folder_deleted():
    grouped = group_by_folder([_item("Frieren", MediaType.ANIME)], ["Later"])
    assert select_active_tab("Epics", grouped, ["Later"]) == "Anime"


def test_active_tab_falls_back_to_first_custom_folder():
    grouped = group_by_folder([], ["Later", "Favorites"])
    assert select_active_tab(None, grouped, ["Later", "Favorites"]) == "Later"


def test_active_tab_none_when_nothing_to_show():
    assert select_active_tab("Movies", {}, []) is None
