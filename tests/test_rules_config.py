import pytest

from fantasyxi.config import (
    CompositionTarget,
    LineupRules,
    StatRange,
    get_preset,
    get_presets_by_risk,
    iter_presets,
)
from fantasyxi.exceptions import ConfigurationError
from fantasyxi.models import Role


def test_composition_accepts_labels_and_abbreviations():
    target = CompositionTarget.from_mapping({"wk": 1, "Batsman": 4, "AR": 2, Role.BOWLER: 4})
    assert target.total == 11
    assert target.count(Role.BATSMAN) == 4
    assert target.as_dict() == {"WK": 1, "BAT": 4, "AR": 2, "BWL": 4}


@pytest.mark.parametrize(
    "counts",
    [
        {"WK": 1, "BAT": 11},
        {"WK": 1, "BAT": 4, "AR": 2, "BWL": 3},
        {"WK": 0, "BAT": 5, "AR": 2, "BWL": 4},
        {"WK": 2, "BAT": 9},
        {"WK": 1, "BAT": 4, "AR": 2, "Umpire": 4},
    ],
)
def test_composition_rejects_invalid_counts(counts):
    with pytest.raises(ConfigurationError):
        CompositionTarget.from_mapping(counts)


def test_padding_is_opt_in():
    short = {"WK": 1, "BAT": 3, "AR": 2, "BWL": 4}
    with pytest.raises(ConfigurationError):
        CompositionTarget.from_mapping(short)

    padded = CompositionTarget.from_mapping(short, pad=True)
    assert padded.count(Role.BATSMAN) == 4
    assert padded.total == 11

    trimmed = CompositionTarget.from_mapping({"WK": 1, "BAT": 5, "AR": 2, "BWL": 4}, pad=True)
    assert trimmed.count(Role.BATSMAN) == 4


def test_padding_still_enforces_role_bounds():
    with pytest.raises(ConfigurationError):
        CompositionTarget.from_mapping({"WK": 1, "BAT": 1, "AR": 1, "BWL": 0}, pad=True)


def test_rules_validation():
    assert LineupRules().validate().lineup_size == 11
    assert LineupRules(min_diversity=0.25).max_overlap == pytest.approx(0.75)

    with pytest.raises(ConfigurationError):
        LineupRules(credit_cap=0).validate()
    with pytest.raises(ConfigurationError):
        LineupRules(max_per_team=5).validate()
    with pytest.raises(ConfigurationError):
        LineupRules(min_diversity=1.5).validate()


def test_stat_range_bounds():
    bounds = StatRange(30.0, 100.0)
    assert bounds.contains(30.0)
    assert bounds.contains(100.0)
    assert not bounds.contains(29.9)
    with pytest.raises(ConfigurationError):
        StatRange(50.0, 10.0)


def test_every_preset_composition_is_valid():
    presets = list(iter_presets())
    assert len(presets) == 8
    for preset in presets:
        assert preset.composition.validate().total == 11


def test_preset_lookup():
    preset = get_preset("High-Differential")
    assert preset.stat_ranges["selection_percentage"].maximum == 20.0
    assert all(p.risk_level == "medium" for p in get_presets_by_risk("MEDIUM"))

    with pytest.raises(KeyError):
        get_preset("moon-ball")
