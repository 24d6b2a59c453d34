"""Lightweight REST client for the fantasyxi API."""

from __future__ import annotations

import argparse
import json

import httpx


def build_composition(entries: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in entries:
        if "=" not in entry:
            raise SystemExit(f"Invalid composition entry '{entry}', expected ROLE=count")
        role, value = entry.split("=", 1)
        counts[role.strip()] = int(value)
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the fantasyxi REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("match_id", nargs="?", help="Match id served by the API's player provider")
    parser.add_argument("--teams", type=int, default=5, help="Number of lineups to request")
    parser.add_argument("--preset", default=None, help="Strategy preset id")
    parser.add_argument("--composition", action="append", default=[], help="Role count, e.g. BAT=4")
    parser.add_argument("--list-presets", action="store_true", help="List strategy presets and exit")
    parser.add_argument("--export", action="store_true", help="Print lineups as CSV instead of JSON")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_presets:
            resp = client.get("/presets")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.match_id is None:
            raise SystemExit("match_id is required unless using --list-presets")

        request: dict[str, object] = {"match_id": args.match_id, "team_count": args.teams}
        if args.preset:
            request["preset_id"] = args.preset
        if args.composition:
            request["composition"] = build_composition(args.composition)

        path = "/lineups/export.csv" if args.export else "/lineups"
        resp = client.post(path, json=request)
        if resp.status_code in (400, 404, 422):
            raise SystemExit(f"{resp.status_code}: {resp.json().get('detail')}")
        resp.raise_for_status()
        if args.export:
            print(resp.text)
            return

        payload = resp.json()
        print(f"Received {len(payload['lineups'])}/{payload['requested']} lineups")
        if payload.get("message"):
            print(payload["message"])
        if payload["lineups"]:
            print(json.dumps(payload["lineups"][0], indent=2))


if __name__ == "__main__":
    main()
