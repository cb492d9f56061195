from datetime import datetime

from app.flow.menus import (
    build_location_menu,
    build_date_menu,
    build_category_menu,
    build_item_menu,
    items_for_category,
)
from utils.constants import (
    LOCATIONS,
    CATEGORY_EVENTS,
    CATEGORY_PRACTICE,
    EVENT_ITEMS,
    PRACTICE_ITEMS,
    COLOR_BRAND,
)
from utils.line_utils import parse_postback_data


def body(message):
    return message["contents"]["body"]["contents"]


def buttons(message):
    return [c for c in body(message) if c["type"] == "button"]


def test_location_menu_lists_every_location():
    menu = build_location_menu()

    assert menu["type"] == "flex"
    assert [b["action"]["label"] for b in buttons(menu)] == LOCATIONS
    for location, button in zip(LOCATIONS, buttons(menu)):
        assert parse_postback_data(button["action"]["data"]) == {"action": "select_loc", "val": location}


def test_date_menu_today_uses_given_date():
    menu = build_date_menu("台灣本部", datetime(2024, 12, 31, 23, 0))
    today, picker = buttons(menu)

    assert today["action"]["label"] == "今天 (12/31)"
    assert parse_postback_data(today["action"]["data"])["val"] == "20241231"
    assert picker["action"]["mode"] == "date"
    assert parse_postback_data(picker["action"]["data"]) == {"action": "set_date", "loc": "台灣本部"}


def test_category_menu_carries_location_and_date():
    menu = build_category_menu("其他", "20240101")

    data = [parse_postback_data(b["action"]["data"]) for b in buttons(menu)]
    assert [d["val"] for d in data] == [CATEGORY_EVENTS, CATEGORY_PRACTICE]
    assert {(d["loc"], d["date"]) for d in data} == {("其他", "20240101")}


def test_items_for_category():
    assert items_for_category(CATEGORY_EVENTS) == EVENT_ITEMS
    assert items_for_category(CATEGORY_PRACTICE) == PRACTICE_ITEMS
    assert items_for_category("anything else") == PRACTICE_ITEMS


def test_item_menu_layout():
    menu = build_item_menu(CATEGORY_PRACTICE, [])
    contents = body(menu)

    # one button per item, a separator, the confirm button
    assert len(contents) == len(PRACTICE_ITEMS) + 2
    assert contents[-2]["type"] == "separator"
    assert contents[-1]["action"]["label"] == "確認送出 (0項)"
    assert parse_postback_data(contents[-1]["action"]["data"]) == {"action": "confirm_items"}


def test_item_menu_highlights_selection():
    menu = build_item_menu(CATEGORY_PRACTICE, ["歡喜", "度眾"])
    by_item = {
        parse_postback_data(b["action"]["data"]).get("val"): b
        for b in buttons(menu)
    }

    assert by_item["度眾"]["style"] == "primary"
    assert by_item["度眾"]["color"] == COLOR_BRAND
    assert by_item["度眾"]["action"]["label"] == "✅ 度眾"
    assert by_item["奉侍"]["style"] == "secondary"
    assert by_item["奉侍"]["action"]["label"] == "奉侍"
    assert buttons(menu)[-1]["action"]["label"] == "確認送出 (2項)"


def test_item_menu_header_shows_category():
    menu = build_item_menu(CATEGORY_EVENTS, [])
    header = menu["contents"]["header"]["contents"]

    assert header[0]["text"] == "步驟 4/5：實踐項目 (可複選)"
    assert header[1]["text"] == CATEGORY_EVENTS
