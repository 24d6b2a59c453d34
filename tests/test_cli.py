import csv
import json
from pathlib import Path

from fantasyxi.cli import main

from tests.sample_pools import match_pool


def _write_pool(path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Player Id", "Player", "Side", "Skill", "Credits", "DT"])
        for p in match_pool():
            writer.writerow([p.player_id, p.name, p.team, p.role.label, p.credits, p.stat("dream_team_percentage")])


def _mapping_args() -> list[str]:
    return [
        "--players-column", "player_id=Player Id",
        "--players-column", "name=Player",
        "--players-column", "team=Side",
        "--players-column", "role=Skill",
        "--players-column", "credits=Credits",
        "--players-column", "dream_team_percentage=DT",
    ]


def test_cli_writes_lineups_and_profile(tmp_path: Path, capsys):
    players = tmp_path / "pool.csv"
    output = tmp_path / "out.csv"
    profile = tmp_path / "profile.json"
    report = tmp_path / "report.json"
    _write_pool(players)

    code = main([
        str(players),
        *_mapping_args(),
        "--save-profile", str(profile),
        "--preset", "balanced",
        "--teams", "4",
        "--output", str(output),
        "--report", str(report),
    ])

    assert code == 0
    rows = list(csv.reader(output.open(encoding="utf-8")))
    assert len(rows) == 5
    assert json.loads(profile.read_text())["players_mapping"]["team"] == "Side"
    assert json.loads(report.read_text())["generated"] == 4
    assert "Wrote 4/4 lineups" in capsys.readouterr().out

    code = main([
        str(players),
        "--load-profile", str(profile),
        "--composition", "WK=1", "--composition", "BAT=3",
        "--composition", "AR=3", "--composition", "BWL=4",
        "--output", str(output),
        "--teams", "2",
    ])
    assert code == 0


def test_cli_rejects_invalid_composition(tmp_path: Path, capsys):
    players = tmp_path / "pool.csv"
    _write_pool(players)

    code = main([
        str(players),
        *_mapping_args(),
        "--composition", "WK=1", "--composition", "BAT=11",
        "--output", str(tmp_path / "out.csv"),
    ])

    assert code == 2
    assert "Composition" in capsys.readouterr().err


def test_cli_lists_presets(capsys):
    assert main(["--list-presets"]) == 0
    assert "high-differential" in capsys.readouterr().out
