"""CSV export helpers for generated lineups."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from fantasyxi.models import ROLE_ORDER, GenerationBatch, Lineup


class LineupExportError(RuntimeError):
    """Raised when a batch cannot be exported."""


_BASE_HEADERS = ("LineupId", "Captain", "ViceCaptain", "Credits", *(role.value for role in ROLE_ORDER))


def _player_columns(lineup: Lineup) -> list[str]:
    """Player cells in role order, then by selection order within a role."""

    ordered = sorted(
        enumerate(lineup.players),
        key=lambda item: (ROLE_ORDER.index(item[1].role), item[0]),
    )
    return [f"{player.name} ({player.player_id})" for _, player in ordered]


def export_lineups_to_csv(
    batch: GenerationBatch,
    *,
    entry_names: Sequence[str] | None = None,
) -> str:
    """Render a batch as CSV text, one row per lineup."""

    if entry_names is not None and len(entry_names) != len(batch.lineups):
        raise LineupExportError("entry_names length must match lineups length")

    size = max((len(lineup.players) for lineup in batch.lineups), default=0)
    headers = list(_BASE_HEADERS) + [f"P{slot + 1}" for slot in range(size)]

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)

    for idx, lineup in enumerate(batch.lineups):
        entry_name = entry_names[idx] if entry_names is not None else lineup.lineup_id
        role_counts = lineup.role_counts
        row = [
            entry_name,
            lineup.captain.name,
            lineup.vice_captain.name,
            f"{lineup.total_credits:.1f}",
            *(role_counts[role] for role in ROLE_ORDER),
        ]
        row.extend(_player_columns(lineup))
        writer.writerow(row)

    return buffer.getvalue()


__all__ = [
    "LineupExportError",
    "export_lineups_to_csv",
]
