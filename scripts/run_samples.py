#!/usr/bin/env python3
"""Run the sample dashboard inputs (or your own) against a running service.

Prints the option prices, the four climate risk scores and the composite
verdict so the full geocode → weather → score pipeline can be checked from
a terminal.

Usage:
    # With the service running (uvicorn app.main:app):
    python scripts/run_samples.py

    # A different place:
    python scripts/run_samples.py "Reykjavik, IS"

    # Custom service URL:
    CLIMATE_OPTIONS_URL=http://localhost:9000 python scripts/run_samples.py
"""

import os
import sys

import httpx

SERVICE_URL = os.getenv("CLIMATE_OPTIONS_URL", "http://localhost:8000")


def main() -> int:
    with httpx.Client(base_url=SERVICE_URL, timeout=30.0) as client:
        try:
            payload = client.get("/v1/samples").json()
        except httpx.ConnectError:
            print(f"Cannot reach {SERVICE_URL}; is the service running?", file=sys.stderr)
            return 1

        if len(sys.argv) > 1:
            payload["location"] = sys.argv[1]

        resp = client.post("/v1/dashboard", json=payload)

    if resp.status_code != 200:
        print(f"Request failed ({resp.status_code}): {resp.json()['error']['message']}", file=sys.stderr)
        return 1

    data = resp.json()
    prices = data["prices"]
    print(
        f"S={payload['stock']} K={payload['strike']} T={payload['time']} "
        f"r={payload['rate']} σ={payload['vol']}"
    )
    print(f"  Call {prices['call_display']:>10}   Put {prices['put_display']:>10}")

    if data["error"]:
        print(f"  {data['error']}")
        return 1

    climate = data["climate"]
    print(f"\n{climate['location']['display']}  ({climate['updated']})")
    for score in climate["scores"]:
        print(f"  {score['label']:<22} {score['score']:>3}  {score['level']}")
    composite = climate["composite"]
    print(f"  {'Composite':<22} {composite['score']:>3}  {composite['label']}")
    print(f"  {composite['description']}")

    print("\nReadings:")
    for reading in climate["readings"]:
        marker = {"hi": " ▲", "lo": " ▼"}.get(reading["flag"], "")
        print(f"  {reading['name']:<9} {reading['text']}{marker}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
