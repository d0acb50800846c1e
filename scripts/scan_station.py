#!/usr/bin/env python3
"""
Dock check-in station.

Reads QR codes from a line-based scanner (a keyboard-wedge reader types the
decoded text followed by Enter), shows the verdict and boards the guest on
confirmation.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/scan_station.py --token <JWT>
    python scripts/scan_station.py --token-file .token --once
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx

from seascape.core.exceptions import CaptureSessionError
from seascape.services.capture_service import QRCaptureController, StreamCaptureDevice

BASE_URL = "http://localhost:8000"
TOKEN_FILE = Path(__file__).parent.parent / ".token"


def get_token(token: str | None, token_file: Path) -> str:
    """Resolve the staff access token."""
    if token:
        return token
    if not token_file.exists():
        print(f"ERROR: No token given and {token_file} does not exist.")
        sys.exit(1)
    return token_file.read_text().strip()


def print_verdict(verdict: dict) -> None:
    print()
    print("=" * 50)
    print(f"  {verdict['title']}")
    print(f"  {verdict['subtitle']}")
    info = verdict.get("booking_info") or {}
    if info:
        print("-" * 50)
        print(f"  Reference: {info.get('booking_reference')}")
        print(f"  Guest:     {info.get('guest_name')} ({info.get('guest_phone') or 'no phone'})")
        print(f"  Yacht:     {info.get('yacht_name')}")
        print(f"  Trip:      {info.get('date')} {info.get('time_slot')} - {info.get('seats')} seats")
    print("=" * 50)


async def run_station(base_url: str, token: str, once: bool) -> None:
    headers = {"Authorization": f"Bearer {token}"}

    async with httpx.AsyncClient(base_url=base_url, headers=headers, timeout=10.0) as client:

        async def on_decoded(qr_data: str) -> None:
            response = await client.post("/api/v1/check-in/scan", json={"qr_data": qr_data})
            if response.status_code != 200:
                print(f"ERROR: Scan failed ({response.status_code}): {response.text}")
                return

            verdict = response.json()
            print_verdict(verdict)
            if not verdict["can_board"]:
                return

            answer = await asyncio.to_thread(input, "Board guest? [y/N] ")
            if answer.strip().lower() != "y":
                print("Skipped.")
                return

            response = await client.post("/api/v1/check-in/board", json={"qr_data": qr_data})
            body = response.json()
            if response.status_code == 200:
                print(f"OK: {body['message']}")
            else:
                print(f"ERROR: {json.dumps(body)}")

        device = StreamCaptureDevice(sys.stdin)
        while True:
            print("\nReady. Scan a QR code (Ctrl-D to quit).")
            try:
                async with QRCaptureController(device, on_decoded) as capture:
                    await capture.capture()
            except EOFError:
                break
            except CaptureSessionError as e:
                print(f"ERROR: {e.detail}")
                break
            if once:
                break


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="QR check-in station")
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--token", help="Staff access token")
    parser.add_argument("--token-file", type=Path, default=TOKEN_FILE)
    parser.add_argument("--once", action="store_true", help="Exit after one scan")
    args = parser.parse_args()

    asyncio.run(run_station(args.base_url, get_token(args.token, args.token_file), args.once))
