"""
utils/line_utils.py

Purpose: LINE message builders

- Constructs text and flex (bubble) payloads
- Postback and date-picker buttons
- Encodes/decodes the action query string carried by postbacks
"""

from typing import List, Dict, Optional, Any
from urllib.parse import quote, unquote


# LINE platform limits
MAX_ALT_TEXT_LENGTH = 400
MAX_BUTTON_LABEL_LENGTH = 40
MAX_MESSAGES_PER_REPLY = 5


def build_postback_data(action: str, **params: Optional[str]) -> str:
    """
    Builds the query string a postback button sends back.

    Values are percent-encoded so option labels containing '/', '&',
    spaces or parentheses survive the round trip. None values are skipped.

    Example:
        build_postback_data("set_date", loc="台灣本部", val="20240101")
        -> "action=set_date&loc=%E5%8F%B0...&val=20240101"
    """
    parts = [f"action={quote(action, safe='')}"]
    for key, value in params.items():
        if value is None:
            continue
        parts.append(f"{key}={quote(str(value), safe='')}")

    return "&".join(parts)


def parse_postback_data(data: Optional[str]) -> Dict[str, str]:
    """
    Parses an ampersand-delimited key=value string into a flat dict.

    - Values are URL-decoded
    - Pairs without '=' are dropped
    - A repeated key keeps its last value
    """
    if not data:
        return {}

    result: Dict[str, str] = {}
    for pair in data.split("&"):
        parts = pair.split("=", 1)
        if len(parts) < 2:
            continue
        key, value = parts
        if not key:
            continue
        result[unquote(key)] = unquote(value)
    return result


def create_text_message(text: str) -> Dict[str, Any]:
    """
    Creates a simple text message.

    Args:
        text: Message text

    Returns:
        Message payload dict
    """
    return {
        "type": "text",
        "text": text
    }


def _truncate_label(label: str) -> str:
    if len(label) > MAX_BUTTON_LABEL_LENGTH:
        return label[:MAX_BUTTON_LABEL_LENGTH]
    return label


def create_postback_button(
    label: str,
    data: str,
    style: str = "secondary",
    color: Optional[str] = None,
    height: Optional[str] = None
) -> Dict[str, Any]:
    """
    Creates a flex button that sends a postback when tapped.

    Args:
        label: Button text (max 40 chars, truncated)
        data: Postback data, see build_postback_data
        style: "primary", "secondary" or "link"
        color: Optional button color
        height: Optional "sm" / "md"
    """
    button = {
        "type": "button",
        "style": style,
        "action": {
            "type": "postback",
            "label": _truncate_label(label),
            "data": data
        }
    }

    if color:
        button["color"] = color

    if height:
        button["height"] = height

    return button


def create_datetimepicker_button(
    label: str,
    data: str,
    mode: str = "date",
    style: str = "secondary"
) -> Dict[str, Any]:
    """
    Creates a flex button that opens the native date picker.

    The chosen value comes back in the postback params (e.g. params.date).
    """
    return {
        "type": "button",
        "style": style,
        "action": {
            "type": "datetimepicker",
            "label": _truncate_label(label),
            "data": data,
            "mode": mode
        }
    }


def create_separator(margin: str = "md") -> Dict[str, Any]:
    return {"type": "separator", "margin": margin}


def create_header_text(text: str, color: str, bold: bool = True, small: bool = False) -> Dict[str, Any]:
    component = {
        "type": "text",
        "text": text,
        "color": color
    }
    if bold:
        component["weight"] = "bold"
    if small:
        component["size"] = "xs"
        component["wrap"] = True
    return component


def create_bubble(
    header: List[Dict[str, Any]],
    body: List[Dict[str, Any]],
    spacing: str = "sm"
) -> Dict[str, Any]:
    """
    Creates a bubble container with a header box and a vertical body box.

    Args:
        header: Header components (usually text)
        body: Body components (buttons, separators)
        spacing: Spacing between body components
    """
    return {
        "type": "bubble",
        "header": {
            "type": "box",
            "layout": "vertical",
            "contents": header
        },
        "body": {
            "type": "box",
            "layout": "vertical",
            "spacing": spacing,
            "contents": body
        }
    }


def create_flex_message(alt_text: str, contents: Dict[str, Any]) -> Dict[str, Any]:
    """
    Wraps a flex container into a message.

    Args:
        alt_text: Text shown in notifications (max 400 chars)
        contents: Bubble or carousel container
    """
    if len(alt_text) > MAX_ALT_TEXT_LENGTH:
        alt_text = alt_text[:MAX_ALT_TEXT_LENGTH]

    return {
        "type": "flex",
        "altText": alt_text,
        "contents": contents
    }
