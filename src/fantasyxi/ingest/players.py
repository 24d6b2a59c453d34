"""Helpers to load player pool CSVs and emit canonical records."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from fantasyxi.models import PlayerRecord
from fantasyxi.pool.filtering import (
    AVERAGE_POINTS,
    CAPTAIN_POTENTIAL,
    DREAM_TEAM_PERCENTAGE,
    FORM_RATING,
    SELECTION_PERCENTAGE,
)


logger = logging.getLogger(__name__)

# Mapping keys that are not stat metrics; every other key names a metric.
_CORE_FIELDS = ("player_id", "name", "team", "role", "credits", "is_active")

DEFAULT_PLAYERS_MAPPING: Dict[str, str] = {
    "player_id": "id",
    "name": "name",
    "team": "team",
    "role": "role",
    "credits": "credits",
    "is_active": "is_active",
    DREAM_TEAM_PERCENTAGE: "dream_team_percentage",
    SELECTION_PERCENTAGE: "selection_percentage",
    AVERAGE_POINTS: "points",
    FORM_RATING: "form_rating",
    CAPTAIN_POTENTIAL: "captain_potential",
}


class PlayerRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_team: str
    raw_role: str
    raw_credits: str
    raw_active: Optional[str] = None
    raw_stats: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "PlayerRow":
        def extract(spec: Optional[str | Sequence[str]], *, default: Optional[str] = None) -> Optional[str]:
            if spec is None:
                return default
            if isinstance(spec, str):
                value = row.get(spec)
                return value.strip() if value is not None else default
            parts = [row.get(col, "").strip() for col in spec if row.get(col)]
            return " ".join(parts) if parts else default

        def parse_spec(key: str, default_key: Optional[str] = None) -> Optional[str | Sequence[str]]:
            spec = mapping.get(key)
            if spec is None and default_key:
                spec = default_key
            if spec is None:
                return None
            if isinstance(spec, str) and "|" in spec:
                return tuple(part.strip() for part in spec.split("|"))
            return spec

        stats: Dict[str, str] = {}
        for metric, column in mapping.items():
            if metric in _CORE_FIELDS:
                continue
            value = extract(parse_spec(metric))
            if value:
                stats[metric] = value

        data = {
            "raw_id": extract(parse_spec("player_id")),
            "raw_name": extract(parse_spec("name", "name"), default=""),
            "raw_team": extract(parse_spec("team", "team"), default=""),
            "raw_role": extract(parse_spec("role", "role"), default=""),
            "raw_credits": extract(parse_spec("credits", "credits"), default="0"),
            "raw_active": extract(parse_spec("is_active")),
            "raw_stats": stats,
        }
        return cls(**data)


def load_player_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerRow]:
    mapping = {**DEFAULT_PLAYERS_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [PlayerRow.from_mapping(row, mapping) for row in reader]
    return rows


def _parse_number(raw: str, *, field: str) -> float:
    text = raw.strip().rstrip("%").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"{field} '{raw}' is not numeric") from None


def _has_numeric_ids(rows: Sequence[PlayerRow]) -> bool:
    return all(not row.raw_id or row.raw_id.isdigit() for row in rows)


def _parse_player_id(raw: Optional[str], index: int) -> int:
    return int(raw) if raw else index + 1


def _parse_flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    text = value.strip().lower()
    if not text:
        return None
    if text in {"1", "true", "t", "yes", "y", "active", "playing"}:
        return True
    if text in {"0", "false", "f", "no", "n", "inactive", "out"}:
        return False
    return None


def rows_to_records(rows: Sequence[PlayerRow], *, strict: bool = False) -> List[PlayerRecord]:
    """Convert parsed rows into records.

    Fully numeric source ids are kept as player ids. When any row carries a
    non-numeric id (``IND-01``), every row is numbered by file position and
    the source id is kept in ``metadata["raw_id"]``. Rows that fail
    validation, including duplicate ids, are logged and skipped unless
    ``strict`` is set, in which case the first failure propagates as
    ValueError.
    """

    numeric_ids = _has_numeric_ids(rows)
    if not numeric_ids:
        logger.info("Player ids are not all numeric; numbering %s rows by position", len(rows))

    records: List[PlayerRecord] = []
    seen: Dict[int, str] = {}
    for index, row in enumerate(rows):
        try:
            player_id = _parse_player_id(row.raw_id, index) if numeric_ids else index + 1
            if player_id in seen:
                raise ValueError(f"duplicate player id {player_id} (already used by {seen[player_id]})")
            stats = {
                metric: _parse_number(value, field=metric) for metric, value in row.raw_stats.items()
            }
            active = _parse_flag(row.raw_active)
            metadata = {"raw_role": row.raw_role}
            if row.raw_id:
                metadata["raw_id"] = row.raw_id
            record = PlayerRecord(
                player_id=player_id,
                name=row.raw_name,
                team=row.raw_team.upper(),
                role=row.raw_role,
                credits=_parse_number(row.raw_credits, field="credits"),
                stats=stats,
                is_active=True if active is None else active,
                metadata=metadata,
            )
        except (ValidationError, ValueError) as exc:
            if strict:
                raise ValueError(f"Row {index + 1} ({row.raw_name or 'unnamed'}): {exc}") from exc
            logger.warning("Skipping player row %s (%s): %s", index + 1, row.raw_name or "unnamed", exc)
            continue
        seen[player_id] = record.name
        records.append(record)
    return records


def load_records_from_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
    strict: bool = False,
) -> List[PlayerRecord]:
    records = rows_to_records(load_player_csv(path, mapping=mapping), strict=strict)
    logger.info("Loaded %s players from %s", len(records), path)
    return records


__all__ = [
    "DEFAULT_PLAYERS_MAPPING",
    "PlayerRow",
    "load_player_csv",
    "load_records_from_csv",
    "rows_to_records",
]
