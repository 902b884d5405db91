#!/usr/bin/env python3
"""Smoke test against a running server: health, one chat message, assignment listing."""

import sys

import httpx


BASE_URL = "http://127.0.0.1:8001"


def check_health() -> bool:
    print("=" * 60)
    print("Testing GET /health")
    print("=" * 60)
    try:
        response = httpx.get(f"{BASE_URL}/health", timeout=5.0)
        response.raise_for_status()
        print(f"✅ {response.json()}")
        return True
    except Exception as e:
        print(f"❌ Server is not running: {e}")
        print("   Please start it with: uvicorn aptshift.main:app --reload --port 8001")
        return False


def send_message(text: str, user_id: str) -> None:
    print("\n" + "=" * 60)
    print(f"Testing POST /messages as {user_id}: {text!r}")
    print("=" * 60)
    try:
        response = httpx.post(
            f"{BASE_URL}/messages",
            json={"text": text, "userId": user_id, "chatId": user_id},
            timeout=30.0,
        )
        response.raise_for_status()
        data = response.json()
        print(f"✅ outcome: {data['outcome']}")
        for reply in data["replies"]:
            print(f"  {reply}")
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")


def show_assignments(user_id: str, admin_id: str) -> None:
    print("\n" + "=" * 60)
    print(f"Testing GET /assignments/{user_id}")
    print("=" * 60)
    try:
        response = httpx.get(f"{BASE_URL}/assignments/{user_id}", headers={"X-User-Id": admin_id}, timeout=10.0)
        response.raise_for_status()
        print(f"✅ {response.json()['message']}")
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")


def main() -> None:
    print("\n🚀 Smoke testing the time-change API (seed with scripts/seed_store.py first)\n")
    if not check_health():
        sys.exit(1)

    send_message("виїзд 562 на 10:00", "admin_local")
    send_message("заїзд 598 на 13:00", "cleaner_local")
    send_message("виїзд 432 на 11:00", "cleaner_local")
    show_assignments("cleaner_local", "admin_local")

    print("\n" + "=" * 60)
    print("✅ Smoke test complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
