"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages
- Trigger phrases typed from the rich menu
- Wizard options (locations, categories, items)

(Prevents hardcoding across the codebase)
"""

# ============================================================
# TRIGGER PHRASES (sent by the rich menu buttons)
# ============================================================

REGISTER_TRIGGER = "青年會資訊註冊"
REPORT_TRIGGER = "實績回報"

# ============================================================
# POSTBACK ACTIONS
# ============================================================

ACTION_SELECT_LOCATION = "select_loc"
ACTION_SET_DATE = "set_date"
ACTION_SELECT_CATEGORY = "select_cat"
ACTION_TOGGLE_ITEM = "toggle_item"
ACTION_CONFIRM_ITEMS = "confirm_items"

# ============================================================
# WIZARD OPTIONS
# ============================================================

LOCATIONS = [
    "台灣本部",
    "中壢佈教所",
    "台中佈教所",
    "高雄佈教所",
    "雲林集會所",
    "花蓮集會所",
    "線上參加(直播)",
    "線上參加(VTR)",
    "其他",
]

CATEGORY_EVENTS = "青年會行事/活動(含VTR)"
CATEGORY_PRACTICE = "個人實踐項目 (可複選)"

CATEGORIES = [CATEGORY_EVENTS, CATEGORY_PRACTICE]

EVENT_ITEMS = [
    "回歸聖地親苑",
    "6/9靈尊教導院祈念未來",
    "7/2靈尊真導院祈念未來",
    "8/6真如靈祖祈念未來",
    "7/19真如開祖祈念未來",
    "夏期鍊成第一天(8-9月)",
    "夏期鍊成第二天(9-10月)",
    "演講大會(9-10月)",
    "蛇瀧研修說明會(11-12月)",
    "青年經親說明會(12-1月)",
    "幹部委員說明會(12-1月)",
    "蛇瀧研修實績確認者說明會",
    "親子一體運動會",
    "其他",
]

PRACTICE_ITEMS = [
    "度眾",
    "歡喜",
    "奉侍",
    "舉辦青年家庭集會",
    "參加集會",
    "接心",
    "參加法會",
    "參加青年會合",
    "參加會座(初座/菩提會/本會座)",
    "參加幹部委員研修",
    "參加青年經親研修",
    "參加幹部會合",
    "參加部門會合",
    "參加信仰心向上會合",
    "拜讀一如之道究道篇(全)",
    "拜讀真如苑歷史",
    "參加總部會",
    "參加總部會會後會",
    "回歸聖地親苑",
    "其他",
]

# Stored in final_items when nothing was selected
NO_ITEMS_SENTINEL = "none"
NO_ITEMS_DISPLAY = "無"

UNKNOWN_LOCATION = "未知"
UNKNOWN_DATE = "未知"
# Placeholder carried by the date page when the location tap lost its value
UNKNOWN_LOCATION_ON_DATE = "未知地點"

# ============================================================
# CARD STYLING
# ============================================================

COLOR_BRAND = "#1DB446"
COLOR_MUTED = "#aaaaaa"
SELECTED_PREFIX = "✅ "

TODAY_LABEL = "今天 ({display})"
PICK_OTHER_DATE_LABEL = "選擇其他日期"
CONFIRM_ITEMS_LABEL = "確認送出 ({count}項)"

# ============================================================
# REGISTRATION
# ============================================================

MESSAGE_ALREADY_REGISTERED = """您已經註冊過了，無需重複註冊。
請直接點擊「實績回報」。"""

MESSAGE_REGISTRATION_INSTRUCTIONS = """【歡迎新朋友】
請直接輸入：
部會 經名 姓名

(例如：青年部 經親 王小明)"""

MESSAGE_REGISTRATION_SUCCESS = """歡迎 {name}！註冊成功。🎉

現在您可以點擊選單右側的「實績回報」開始使用。"""

MESSAGE_REGISTRATION_FORMAT_ERROR = """⚠️ 格式不對。
請輸入三個詞，中間空格：
部會 經名 姓名"""

REGISTRATION_FIELD_COUNT = 3

# ============================================================
# REPORT WIZARD
# ============================================================

MESSAGE_NOT_REGISTERED = """⚠️ 您尚未註冊。
請先點選左側「青年會資訊註冊」完成資料登錄。"""

MESSAGE_DATE_CAPTURE_FAILED = "❌ 日期抓取失敗"

MESSAGE_SESSION_TIMEOUT = "⚠️ 頁面逾時，請重新輸入「實績回報」。"

MESSAGE_INVALID_SELECTION = "⚠️ 選項資料有誤，請重新輸入「實績回報」。"

MESSAGE_ITEMS_RECORDED = """已記錄項目：{items}

最後一步，請輸入實踐說明 (若無請輸入「無」)："""

MESSAGE_REPORT_COMPLETED = "🎉 實績回報完成！資料已儲存。"
