from app.flow.handlers.items import toggle_item, join_items, display_items


def test_toggle_appends_missing_item():
    assert toggle_item([], "度眾") == ["度眾"]
    assert toggle_item(["度眾"], "歡喜") == ["度眾", "歡喜"]


def test_toggle_removes_present_item_keeping_order():
    assert toggle_item(["度眾", "歡喜", "奉侍"], "歡喜") == ["度眾", "奉侍"]


def test_toggle_twice_restores_selection():
    selected = ["度眾", "奉侍"]
    assert toggle_item(toggle_item(selected, "歡喜"), "歡喜") == selected


def test_toggle_removes_only_first_duplicate():
    assert toggle_item(["其他", "度眾", "其他"], "其他") == ["度眾", "其他"]


def test_toggle_does_not_mutate_input():
    selected = ["度眾"]
    toggle_item(selected, "歡喜")
    assert selected == ["度眾"]


def test_join_items():
    assert join_items(["度眾", "歡喜"]) == "度眾,歡喜"
    assert join_items([]) == "none"


def test_display_items():
    assert display_items("none") == "無"
    assert display_items("度眾,歡喜") == "度眾,歡喜"
