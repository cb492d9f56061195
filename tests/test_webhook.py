import pytest
from fastapi.testclient import TestClient

from conftest import USER_ID
from app.core.exceptions import ReplyError
from app.api.webhook import get_dispatcher
from app.flow.dispatcher import EventDispatcher
from app.main import app
from utils.constants import REGISTER_TRIGGER, MESSAGE_REGISTRATION_INSTRUCTIONS

client = TestClient(app)

WEBHOOK_URL = "/api/webhook"


@pytest.fixture
def dispatcher(engine):
    dispatcher = EventDispatcher(engine)
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield dispatcher
    app.dependency_overrides.pop(get_dispatcher, None)


def text_payload(text, user_id=USER_ID, reply_token="reply-token"):
    return {
        "type": "message",
        "replyToken": reply_token,
        "source": {"type": "user", "userId": user_id},
        "timestamp": 1704074400000,
        "message": {"type": "text", "id": "1", "text": text},
    }


def postback_payload(data, user_id=USER_ID, reply_token="reply-token", params=None):
    postback = {"data": data}
    if params:
        postback["params"] = params
    return {
        "type": "postback",
        "replyToken": reply_token,
        "source": {"type": "user", "userId": user_id},
        "postback": postback,
    }


def test_webhook_verification():
    response = client.get(WEBHOOK_URL)
    assert response.status_code == 200
    assert response.text == "OK"


def test_webhook_processes_text_event(dispatcher, state_store, replier):
    response = client.post(WEBHOOK_URL, json={"destination": "Ubot", "events": [text_payload(f"  {REGISTER_TRIGGER} ")]})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "processed": 1}
    assert replier.replies == [("reply-token", [{"type": "text", "text": MESSAGE_REGISTRATION_INSTRUCTIONS}])]
    assert state_store.documents[USER_ID]["step"] == "registering"


def test_webhook_processes_postback_event(dispatcher, replier):
    data = "action=select_loc&val=%E5%8F%B0%E7%81%A3%E6%9C%AC%E9%83%A8"

    response = client.post(WEBHOOK_URL, json={"events": [postback_payload(data)]})

    assert response.status_code == 200
    assert replier.last_messages[0]["type"] == "flex"


def test_webhook_skips_unsupported_events(dispatcher, replier):
    events = [
        {"type": "follow", "replyToken": "t", "source": {"type": "user", "userId": USER_ID}},
        {"type": "message", "replyToken": "t", "source": {"type": "user", "userId": USER_ID},
         "message": {"type": "sticker", "id": "2"}},
        postback_payload("action=unknown"),
        text_payload("hello", reply_token=None),
    ]

    response = client.post(WEBHOOK_URL, json={"events": events})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "processed": 0}
    assert replier.replies == []


def test_webhook_empty_batch(dispatcher):
    response = client.post(WEBHOOK_URL, json={"destination": "Ubot", "events": []})

    assert response.status_code == 200
    assert response.json()["processed"] == 0


def test_webhook_reports_failed_events(dispatcher, engine, replier, monkeypatch):
    calls = []

    async def flaky_reply(reply_token, messages):
        calls.append(reply_token)
        if reply_token == "bad":
            raise ReplyError("LINE API error: 400")

    monkeypatch.setattr(replier, "reply", flaky_reply)

    events = [
        text_payload(REGISTER_TRIGGER, user_id="Ua", reply_token="bad"),
        text_payload(REGISTER_TRIGGER, user_id="Ub", reply_token="good"),
    ]
    response = client.post(WEBHOOK_URL, json={"events": events})

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "EVENT_PROCESSING_FAILED"
    assert body["details"] == {"processed": 1, "failed": 1}
    assert sorted(calls) == ["bad", "good"]


def test_webhook_rejects_invalid_payload(dispatcher):
    response = client.post(WEBHOOK_URL, json={"events": "not-a-list"})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_webhook_rejects_non_json_body(dispatcher):
    response = client.post(WEBHOOK_URL, content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 422
