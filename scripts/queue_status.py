#!/usr/bin/env python3
"""
Claim queue inspection script.

Shows the products a user created that no widget has claimed yet, and
optionally the assignment of a given widget.

Usage:
    python scripts/queue_status.py 42
    python scripts/queue_status.py 42 --json
    python scripts/queue_status.py 42 --container 1187 --widget 3fa2c1d

Environment Variables:
    DJANGO_SETTINGS_MODULE: settings module (default: config.settings.development)
    REDIS_URL: cache holding the queues
"""

import argparse
import json
import os
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent / "backend"


def setup_django() -> None:
    sys.path.insert(0, str(BACKEND_DIR))
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

    import django
    django.setup()


def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect a user's product claim queue")
    parser.add_argument("user_id", type=int, help="User whose queue to show")
    parser.add_argument("--container", help="Container (page) id of a widget to look up")
    parser.add_argument("--widget", help="Widget id to look up")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args()

    if bool(args.container) != bool(args.widget):
        parser.error("--container and --widget must be given together")

    setup_django()

    from infrastructure.bootstrap import get_container
    from services.queries import GetPendingProductsQuery, GetWidgetAssignmentQuery

    container = get_container()
    pending = container.get(GetPendingProductsQuery).execute(user_id=args.user_id)

    report = {
        "user_id": args.user_id,
        "pending": pending.product_ids,
    }

    if args.container:
        assignment = container.get(GetWidgetAssignmentQuery).execute(
            container_id=args.container,
            widget_id=args.widget,
        )
        report["assignment"] = assignment.product_id

    if args.json:
        print(json.dumps(report))
        return 0

    print(f"User {args.user_id}: {len(pending.product_ids)} pending product(s)")
    for position, product_id in enumerate(pending.product_ids, start=1):
        print(f"  {position}. product {product_id}")

    if args.container:
        owner = report["assignment"]
        label = f"product {owner}" if owner is not None else "unassigned"
        print(f"Widget {args.container}/{args.widget}: {label}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
