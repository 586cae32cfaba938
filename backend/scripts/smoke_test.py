#!/usr/bin/env python3
"""
Smoke test against a running themes API (upload → status → listing).

Usage:
  cd backend
  python scripts/smoke_test.py
  python scripts/smoke_test.py --token "my-secret"   # override THEMES_API_SECRET

Requires: .env with THEMES_API_SECRET (or --token).
Backend must be running: uvicorn themebot.main:app --reload (default http://127.0.0.1:8000).
"""
import io
import os
import sys
import time
import zipfile
from pathlib import Path

import httpx

# Load backend .env
backend_dir = Path(__file__).resolve().parent.parent
env_path = backend_dir / ".env"
if env_path.exists():
    from dotenv import load_dotenv
    load_dotenv(env_path)

BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")


def build_zip() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("theme.json", '{"name": "Smoke Test"}')
    return buffer.getvalue()


def main():
    token = os.getenv("THEMES_API_SECRET", "")
    if len(sys.argv) >= 3 and sys.argv[1] == "--token":
        token = sys.argv[2]
    if not token:
        print("ERROR: set THEMES_API_SECRET in .env or pass --token <secret>")
        sys.exit(1)

    headers = {"Authorization": f"Bearer {token}"}

    # 1) Rejected without token
    print(f"\n1) GET {BASE_URL}/themes without token")
    r = httpx.get(f"{BASE_URL}/themes", timeout=10)
    if r.status_code != 403:
        print(f"   FAIL: expected 403, got {r.status_code}")
        sys.exit(1)
    print("   OK: 403")

    # 2) Upload a tiny theme archive
    print(f"\n2) POST {BASE_URL}/themes/upload")
    r = httpx.post(
        f"{BASE_URL}/themes/upload",
        headers=headers,
        files={"file": ("smoke-test.zip", build_zip(), "application/zip")},
        timeout=30,
    )
    if r.status_code != 200:
        print(f"   FAIL: {r.status_code} - {r.text}")
        sys.exit(1)
    print(f"   OK: {r.json()}")

    # 3) Listing (accepted themes only; the new upload is still pending)
    time.sleep(0.5)
    print(f"\n3) GET {BASE_URL}/themes")
    r = httpx.get(f"{BASE_URL}/themes", headers=headers, params={"limit": 5}, timeout=10)
    if r.status_code != 200:
        print(f"   FAIL: {r.status_code} - {r.text}")
        sys.exit(1)
    themes = r.json()
    print(f"   OK: {len(themes)} accepted theme(s)")

    # 4) Status of a theme that does not exist
    print(f"\n4) GET {BASE_URL}/themes/status/does-not-exist")
    r = httpx.get(f"{BASE_URL}/themes/status/does-not-exist", headers=headers, timeout=10)
    if r.status_code != 404:
        print(f"   FAIL: expected 404, got {r.status_code}")
        sys.exit(1)
    print("   OK: 404")

    print("\n✅ Themes API is working.")


if __name__ == "__main__":
    main()
