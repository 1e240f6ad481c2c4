#!/usr/bin/env python3
"""Demo: submit one notification per type through the dispatch API.

Requires the API to be running:
    python -m notification_dispatch

Usage:
    python scripts/demo.py [--api-url URL]
"""

import argparse
import sys

import httpx

REQUESTS = [
    {
        "to": "user@example.com",
        "channel": "email",
        "type": "otp",
        "language": "en",
        "variables": {"code": "482910", "expiry": "10"},
    },
    {
        "to": "+34600111222",
        "channel": "sms",
        "type": "marketing",
        "language": "es",
        "variables": {"firstName": "Ana", "promoCode": "VERANO25", "discount": "25"},
    },
    {
        "to": "fcm-device-token-0123456789abcdef",
        "channel": "push",
        "type": "alert",
        "variables": {
            "severity": "HIGH",
            "title": "Disk almost full",
            "message": "Volume /data is at 95%",
        },
    },
    {
        "to": "billing@example.com",
        "channel": "email",
        "type": "receipt",
        "variables": {
            "orderId": "A-1042",
            "date": "2026-10-17",
            "items": "1x Notebook",
            "amount": "$12.50",
        },
        "metadata": {"source": "demo"},
    },
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Submit demo notifications")
    parser.add_argument(
        "--api-url",
        default="http://localhost:8000",
        help="Notification API base URL (default: http://localhost:8000)",
    )
    args = parser.parse_args()

    with httpx.Client(base_url=args.api_url, timeout=30.0) as client:
        try:
            resp = client.get("/health")
        except httpx.ConnectError:
            print(f"Cannot connect to {args.api_url}")
            print("Make sure the API is running: python -m notification_dispatch")
            sys.exit(1)

        if resp.status_code != 200:
            print(f"API unhealthy: {resp.text}")
            sys.exit(1)

        print(f"API healthy at {args.api_url}\n")

        for payload in REQUESTS:
            resp = client.post("/notifications", json=payload)
            body = resp.json()
            label = f"{payload['channel']}/{payload['type']}"

            if resp.status_code in (201, 502):
                n = body["notification"]
                print(
                    f"  {label:16s}  -> {n['status']:7s} attempts={n['attempts']}"
                    f"  id={n['id']}"
                )
            else:
                print(f"  {label:16s}  -> ERROR {resp.status_code}: {body}")

        resp = client.get("/notifications", params={"status": "failed"})
        print(f"\nFailed notifications on record: {resp.json()['total']}")


if __name__ == "__main__":
    main()
