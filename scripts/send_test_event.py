"""
Manual check that a running bot accepts LINE webhook bodies.

Usage:
    python scripts/send_test_event.py                  # sends "實績回報"
    python scripts/send_test_event.py "青年會資訊註冊"
    python scripts/send_test_event.py --postback "action=select_loc&val=%E5%85%B6%E4%BB%96"

The reply token is fake, so the bot's reply to LINE fails and the webhook
answers 500 EVENT_PROCESSING_FAILED; state and profile writes still happen.
"""
import argparse
import asyncio
import json
import time

import httpx

DEFAULT_URL = "http://localhost:8000/api/webhook"
TEST_USER_ID = "Utest0000000000000000000000000000"


def build_event(text=None, postback=None):
    event = {
        "replyToken": "00000000000000000000000000000000",
        "source": {"type": "user", "userId": TEST_USER_ID},
        "timestamp": int(time.time() * 1000),
        "mode": "active",
    }
    if postback is not None:
        event["type"] = "postback"
        event["postback"] = {"data": postback}
    else:
        event["type"] = "message"
        event["message"] = {"type": "text", "id": "1", "text": text}
    return event


async def send(url, event):
    body = {"destination": "Utestbot", "events": [event]}

    print(f"🧪 Testing webhook: {url}")
    print(f"📤 Sending: {json.dumps(body, ensure_ascii=False)}\n")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, json=body, timeout=10.0)

            print(f"✅ Status: {response.status_code}")
            print(f"📥 Response: {response.text[:200]}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


def main():
    parser = argparse.ArgumentParser(description="Send a fake LINE event to the webhook")
    parser.add_argument("text", nargs="?", default="實績回報")
    parser.add_argument("--postback", help="Postback data instead of a text message")
    parser.add_argument("--url", default=DEFAULT_URL)
    args = parser.parse_args()

    asyncio.run(send(args.url, build_event(args.text, args.postback)))


if __name__ == "__main__":
    main()
