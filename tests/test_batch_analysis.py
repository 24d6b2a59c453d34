import csv
from io import StringIO

import pytest

from fantasyxi.config import CompositionTarget, LineupRules
from fantasyxi.exceptions import ConfigurationError
from fantasyxi.models import GenerationBatch
from fantasyxi.optimizer import core_variation, generate_batch, player_usage
from fantasyxi.pool import export_lineups_to_csv
from fantasyxi.pool.export import LineupExportError

from tests.sample_pools import STANDARD_COMPOSITION, exact_xi, match_pool


COMPOSITION = CompositionTarget.from_mapping(STANDARD_COMPOSITION)


def test_player_usage_counts_every_appearance():
    batch = generate_batch(match_pool(), COMPOSITION, LineupRules(), team_count=4)

    usage = player_usage(batch)

    assert sum(item.count for item in usage) == 44
    assert usage == sorted(usage, key=lambda item: (-item.count, item.player.player_id))
    assert all(0 < item.exposure <= 1.0 for item in usage)
    assert sum(item.captain_count for item in usage) == 4


def test_core_variation_split():
    batch = generate_batch(exact_xi(), COMPOSITION, LineupRules(min_diversity=0.0), team_count=3)

    split = core_variation(batch, threshold=0.6)

    assert len(split.core) == 11
    assert split.variation == ()
    with pytest.raises(ConfigurationError):
        core_variation(batch, threshold=0.0)


def test_empty_batch_has_no_usage():
    assert player_usage(GenerationBatch(requested=2)) == []


def test_export_lineups_to_csv():
    batch = generate_batch(match_pool(), COMPOSITION, LineupRules(), team_count=2)

    rows = list(csv.reader(StringIO(export_lineups_to_csv(batch))))

    assert rows[0][:8] == ["LineupId", "Captain", "ViceCaptain", "Credits", "WK", "BAT", "AR", "BWL"]
    assert len(rows[0]) == 8 + 11
    assert [row[0] for row in rows[1:]] == ["T01", "T02"]
    assert rows[1][1] == batch.lineups[0].captain.name
    assert rows[1][4:8] == ["1", "4", "2", "4"]

    named = export_lineups_to_csv(batch, entry_names=["first", "second"])
    assert "second" in named
    with pytest.raises(LineupExportError):
        export_lineups_to_csv(batch, entry_names=["only-one"])
