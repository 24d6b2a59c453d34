import pytest
from pydantic import ValidationError

from fantasyxi.models import PlayerRecord, Role


def test_player_record_is_frozen():
    record = PlayerRecord(
        player_id=7,
        name="Test Player",
        team="IND",
        role="BAT",
        credits=9.5,
        stats={"dream_team_percentage": 64.0},
    )

    assert record.player_id == 7
    assert record.role is Role.BATSMAN

    with pytest.raises((TypeError, ValidationError)):
        record.player_id = 8  # type: ignore[attr-defined]


def test_missing_stat_reads_as_zero():
    record = PlayerRecord(player_id=1, name="A", team="IND", role="AR", credits=8.0)
    assert record.stat("form_rating") == 0.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("WK", Role.WICKETKEEPER),
        ("Wicket-Keeper", Role.WICKETKEEPER),
        ("WK-Batsman", Role.WICKETKEEPER),
        ("bat", Role.BATSMAN),
        ("Top-order Batter", Role.BATSMAN),
        ("Batting Allrounder", Role.ALLROUNDER),
        ("all-rounder", Role.ALLROUNDER),
        ("BWL", Role.BOWLER),
        ("Spinner", Role.BOWLER),
        ("Pace Bowler", Role.BOWLER),
        (Role.BOWLER, Role.BOWLER),
    ],
)
def test_role_from_any(raw, expected):
    assert Role.from_any(raw) is expected


@pytest.mark.parametrize("raw", ["Coach", "", "12", None])
def test_role_from_any_rejects_unknown(raw):
    with pytest.raises(ValueError):
        Role.from_any(raw)


def test_player_record_rejects_unknown_role_and_bad_credits():
    with pytest.raises(ValidationError):
        PlayerRecord(player_id=1, name="A", team="IND", role="Umpire", credits=8.0)
    with pytest.raises(ValidationError):
        PlayerRecord(player_id=1, name="A", team="IND", role="BAT", credits=0)
