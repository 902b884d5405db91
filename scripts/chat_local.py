#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no chat transport).

Usage:
  python3 scripts/chat_local.py [--user USER_ID]

What it does:
- Sends your typed messages through the same HandleIncomingMessageUseCase as the API
- Uses the store configured in .env (STORE_PROVIDER / STORE_DATA_DIR); seed it first
  with scripts/seed_store.py
- Prints the outcome, the reply texts and the conversation context after each turn
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aptshift.domain.entities.message import Message
from aptshift.wiring.dependencies import get_conversation_store, get_handle_incoming_message_use_case


def _print_header(user_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /user <id> (switch user), /reset, /context, /quit, /help")
    print("-" * 60)


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the time-change pipeline locally")
    parser.add_argument("--user", default="admin_local", help="Acting user id (see scripts/seed_store.py)")
    args = parser.parse_args()

    user_id = args.user
    use_case = get_handle_incoming_message_use_case()
    conversations = get_conversation_store()
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /user <id> -> act as another user")
            print("  /reset     -> forget the conversation state of the current user")
            print("  /context   -> show the stored conversation context")
            print("  /quit      -> exit")
            continue
        if cmd.startswith("/user "):
            user_id = user_text.split(maxsplit=1)[1].strip()
            print(f"Now acting as: {user_id}")
            continue
        if cmd == "/reset":
            conversations.reset(user_id)
            print("Conversation state cleared.")
            continue
        if cmd == "/context":
            state = conversations.load(user_id)
            print(json.dumps(state.last_context, ensure_ascii=False, indent=2))
            continue

        reply = use_case.handle(Message(user_id=user_id, chat_id=user_id, text=user_text))

        print("\n--- Decision ---")
        print(f"outcome: {reply.outcome}")
        if reply.meta:
            print(f"meta: {reply.meta}")

        print("\n--- Reply ---")
        if not reply.texts:
            print("(no reply: message ignored)")
        for text in reply.texts:
            print(text)

        print("-" * 60)


if __name__ == "__main__":
    main()
