#!/usr/bin/env python3
"""
Store a message between two existing users directly in the database.

Usage:
  python scripts/add_message.py --from alice --to bob --body "hi"
  python scripts/add_message.py --mark-read <message id>
"""
from __future__ import annotations

import argparse
import sys

from messagely.domain.errors import MessagelyError
from messagely.services.message_service import MessageDirectory


def main() -> None:
    ap = argparse.ArgumentParser(description="Insert a message or mark one as read")
    ap.add_argument("--from", dest="sender", help="username of the sender")
    ap.add_argument("--to", dest="recipient", help="username of the recipient")
    ap.add_argument("--body", help="message text")
    ap.add_argument("--mark-read", dest="mark_read", help="id of a message to mark as read")
    args = ap.parse_args()

    directory = MessageDirectory()
    if args.mark_read:
        message = directory.mark_read(args.mark_read.strip())
        print(f"OK: message {message.id} read at {message.read_at.isoformat()}")
        return

    sender = (args.sender or "").strip()
    recipient = (args.recipient or "").strip()
    if not sender or not recipient:
        raise SystemExit("--from and --to are required")
    message = directory.send(sender, recipient, args.body or "")
    print("OK: message stored")
    print(f"  ID: {message.id}")
    print(f"  From: {message.from_username}")
    print(f"  To: {message.to_username}")


if __name__ == "__main__":
    try:
        main()
    except MessagelyError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc.message}\n")
        raise SystemExit(1)
