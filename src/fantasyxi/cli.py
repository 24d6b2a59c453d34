"""Command-line interface for generating lineups from a player pool CSV."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from fantasyxi.config import CompositionTarget, LineupRules, StatRange, get_preset, iter_presets
from fantasyxi.config_loader import MappingProfile
from fantasyxi.exceptions import ConfigurationError, EmptyPoolError
from fantasyxi.ingest import load_records_from_csv
from fantasyxi.optimizer import DiversityOptions, core_variation, default_rules, generate_batch
from fantasyxi.pool import FilterCriteria, export_lineups_to_csv


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate diversified fantasy cricket lineups")
    parser.add_argument("players", type=Path, nargs="?", help="Path to player pool CSV")
    parser.add_argument(
        "--players-column",
        action="append",
        default=[],
        help="Mapping for player CSV columns (e.g., credits=Credits, dream_team_percentage=DT%%)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument("--teams", type=int, default=5, help="Number of lineups to build")
    parser.add_argument("--output", type=Path, default=Path("lineups.csv"), help="Output CSV path")
    parser.add_argument("--preset", default=None, help="Strategy preset id (see --list-presets)")
    parser.add_argument("--list-presets", action="store_true", help="Print the preset catalogue and exit")
    parser.add_argument(
        "--composition",
        action="append",
        default=[],
        help="Role count (e.g., WK=1 BAT=4 AR=2 BWL=4); overrides the preset composition",
    )
    parser.add_argument(
        "--pad-composition",
        action="store_true",
        help="Adjust the batsman count so the composition adds up to 11",
    )
    parser.add_argument("--credit-cap", type=float, default=100.0, help="Credit cap per lineup")
    parser.add_argument("--max-team", type=int, default=7, help="Maximum players from one side")
    parser.add_argument(
        "--min-diversity",
        type=float,
        default=None,
        help="Minimum fraction of players that must differ between any two lineups (0-1)",
    )
    parser.add_argument("--max-retries", type=int, default=None, help="Diversity retries per lineup")
    parser.add_argument(
        "--reserve-budget",
        action="store_true",
        help="Only admit players that leave enough credits to complete the lineup",
    )
    parser.add_argument(
        "--stat-range",
        action="append",
        default=[],
        help="Inclusive metric bounds (e.g., dream_team_percentage=30:100)",
    )
    parser.add_argument("--exclude", nargs="*", type=int, default=None, help="Player IDs to remove from consideration")
    parser.add_argument("--report", type=Path, default=None, help="Optional path to write batch summary JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _parse_composition(entries: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for key, value in _parse_mapping(entries).items():
        try:
            counts[key] = int(value)
        except ValueError:
            raise ConfigurationError(f"Role count for {key} must be an integer, got '{value}'") from None
    return counts


def _parse_stat_ranges(entries: list[str]) -> dict[str, StatRange]:
    ranges: dict[str, StatRange] = {}
    for metric, bounds in _parse_mapping(entries).items():
        low, sep, high = bounds.partition(":")
        if not sep:
            raise ConfigurationError(f"Stat range for {metric} must look like min:max, got '{bounds}'")
        try:
            ranges[metric] = StatRange(float(low), float(high))
        except ValueError:
            raise ConfigurationError(f"Stat range for {metric} is not numeric: '{bounds}'") from None
    return ranges


def _print_presets() -> None:
    for preset in iter_presets():
        print(f"{preset.preset_id:<20} {preset.risk_level:<7} {preset.composition.describe():<24} {preset.name}")


def _resolve_composition(args: argparse.Namespace) -> tuple[CompositionTarget, dict[str, StatRange]]:
    stat_ranges: dict[str, StatRange] = {}
    composition = None
    if args.preset:
        try:
            preset = get_preset(args.preset)
        except KeyError as exc:
            raise ConfigurationError(str(exc.args[0])) from exc
        composition = preset.composition
        stat_ranges.update(preset.stat_ranges)
    if args.composition:
        composition = CompositionTarget.from_mapping(_parse_composition(args.composition), pad=args.pad_composition)
    elif composition is not None:
        composition = (composition.padded() if args.pad_composition else composition).validate()
    else:
        raise ConfigurationError("Provide --preset or --composition")
    stat_ranges.update(_parse_stat_ranges(args.stat_range))
    return composition, stat_ranges


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        _print_presets()
        return 0
    if args.players is None:
        print("error: a player pool CSV is required", file=sys.stderr)
        return 2

    try:
        players_mapping = _parse_mapping(args.players_column)
        if args.load_profile:
            profile = MappingProfile.load(args.load_profile)
            players_mapping = profile.players_mapping | players_mapping
        if args.save_profile:
            MappingProfile(players_mapping).save(args.save_profile)
            print(f"Saved mapping profile to {args.save_profile}")

        composition, stat_ranges = _resolve_composition(args)
        base_rules = default_rules()
        rules = LineupRules(
            credit_cap=args.credit_cap,
            max_per_team=args.max_team,
            min_diversity=base_rules.min_diversity if args.min_diversity is None else args.min_diversity,
            reserve_budget=args.reserve_budget,
        )
        options = DiversityOptions() if args.max_retries is None else DiversityOptions(max_retries=args.max_retries)
        criteria = FilterCriteria(stat_ranges=stat_ranges, exclude_player_ids=tuple(args.exclude or ()))

        records = load_records_from_csv(args.players, mapping=players_mapping or None)
        batch = generate_batch(
            records,
            composition,
            rules,
            team_count=args.teams,
            options=options,
            criteria=criteria,
        )
    except (ConfigurationError, EmptyPoolError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    args.output.write_text(export_lineups_to_csv(batch), encoding="utf-8")
    print(f"Wrote {len(batch.lineups)}/{batch.requested} lineups to {args.output}")

    for failure in batch.failures:
        print(f"Lineup {failure.team_index + 1} not generated: {failure.reason}")
    for prior, index in batch.shortfall_pairs:
        print(f"Lineups {prior + 1} and {index + 1} overlap beyond the diversity target")

    if args.report:
        split = core_variation(batch) if batch.lineups else None
        payload = dict(batch.summary)
        if split is not None:
            payload["core_players"] = [item.player.name for item in split.core]
        args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote batch summary to {args.report}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
