from utils.line_utils import (
    build_postback_data,
    parse_postback_data,
    create_flex_message,
    create_postback_button,
    MAX_ALT_TEXT_LENGTH,
    MAX_BUTTON_LABEL_LENGTH,
)
from utils.time_utils import local_now, normalize_picker_date
from utils.validation_utils import parse_registration_text, is_compact_date, sanitize_text
from datetime import datetime


def test_parse_postback_data():
    assert parse_postback_data("action=select_loc&val=台灣本部") == {
        "action": "select_loc",
        "val": "台灣本部",
    }


def test_parse_drops_pairs_without_equals():
    assert parse_postback_data("action=confirm_items&garbage") == {"action": "confirm_items"}


def test_parse_last_duplicate_wins():
    assert parse_postback_data("val=a&val=b") == {"val": "b"}


def test_parse_keeps_equals_in_value():
    assert parse_postback_data("val=a=b") == {"val": "a=b"}


def test_parse_empty():
    assert parse_postback_data("") == {}
    assert parse_postback_data(None) == {}


def test_build_encodes_reserved_characters():
    data = build_postback_data("toggle_item", val="6/9 祈念 & 未來")

    assert "&val=" in data
    assert data.count("&") == 1
    assert parse_postback_data(data) == {"action": "toggle_item", "val": "6/9 祈念 & 未來"}


def test_build_skips_none_values():
    assert build_postback_data("set_date", val=None, loc="其他") == "action=set_date&loc=%E5%85%B6%E4%BB%96"


def test_button_label_is_truncated():
    button = create_postback_button("x" * 60, "action=confirm_items")
    assert len(button["action"]["label"]) == MAX_BUTTON_LABEL_LENGTH


def test_alt_text_is_truncated():
    message = create_flex_message("a" * 500, {"type": "bubble"})
    assert len(message["altText"]) == MAX_ALT_TEXT_LENGTH


def test_local_now_applies_offset():
    assert local_now(8, datetime(2024, 1, 1, 20, 0)) == datetime(2024, 1, 2, 4, 0)


def test_normalize_picker_date():
    assert normalize_picker_date("2024-01-01") == "20240101"
    assert normalize_picker_date("2024/01/01") == "20240101"
    assert normalize_picker_date(None) == ""


def test_parse_registration_text():
    assert parse_registration_text("青年部 經親 王小明") == ("青年部", "經親", "王小明")
    assert parse_registration_text("  青年部  經親\n王小明 ") == ("青年部", "經親", "王小明")
    assert parse_registration_text("青年部 經親") is None
    assert parse_registration_text("a b c d") is None
    assert parse_registration_text("") is None


def test_is_compact_date():
    assert is_compact_date("20240101")
    assert not is_compact_date("2024-01-01")
    assert not is_compact_date("")
    assert not is_compact_date(None)


def test_sanitize_text():
    assert sanitize_text("  實績回報 \n") == "實績回報"
    assert sanitize_text(None) == ""
