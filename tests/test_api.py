import pytest
from httpx import ASGITransport, AsyncClient

from fantasyxi.api import create_app
from fantasyxi.ingest import InMemoryPlayerProvider

from tests.sample_pools import STANDARD_COMPOSITION, match_pool


@pytest.fixture
async def client():
    provider = InMemoryPlayerProvider({"ind-aus": match_pool()})
    app = create_app(player_provider=provider)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def _players_payload() -> list[dict]:
    return [
        {
            "player_id": p.player_id,
            "name": p.name,
            "team": p.team,
            "role": p.role.value,
            "credits": p.credits,
            "stats": p.stats,
        }
        for p in match_pool()
    ]


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_presets_catalogue(client: AsyncClient):
    resp = await client.get("/presets")
    assert resp.status_code == 200
    presets = resp.json()
    assert len(presets) == 8
    assert all(sum(p["composition"].values()) == 11 for p in presets)

    resp = await client.get("/presets/balanced")
    assert resp.json()["composition"] == STANDARD_COMPOSITION

    resp = await client.get("/presets/unknown")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_lineups_with_inline_players(client: AsyncClient):
    resp = await client.post(
        "/lineups",
        json={"players": _players_payload(), "composition": STANDARD_COMPOSITION, "team_count": 5},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["requested"] == 5
    assert len(payload["lineups"]) == 5
    assert payload["failures"] == []
    assert payload["message"] is None
    for lineup in payload["lineups"]:
        assert len(lineup["players"]) == 11
        assert lineup["credits"] <= 100.0
        assert lineup["captain_id"] != lineup["vice_captain_id"]
        assert sum(1 for p in lineup["players"] if p["is_captain"]) == 1
    assert len({lineup["captain_id"] for lineup in payload["lineups"]}) >= 3
    assert sum(item["count"] for item in payload["player_usage"]) == 55


@pytest.mark.anyio
async def test_lineups_from_match_and_preset(client: AsyncClient):
    resp = await client.post("/lineups", json={"match_id": "ind-aus", "preset_id": "top-order-stack", "team_count": 3})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["composition"] == {"WK": 1, "BAT": 5, "AR": 2, "BWL": 3}
    assert payload["match_id"] == "ind-aus"
    assert len(payload["lineups"]) == 3


@pytest.mark.anyio
async def test_invalid_composition_is_bad_request(client: AsyncClient):
    resp = await client.post(
        "/lineups",
        json={"match_id": "ind-aus", "composition": {"WK": 1, "BAT": 11}, "team_count": 2},
    )
    assert resp.status_code == 400

    resp = await client.post("/lineups", json={"match_id": "ind-aus", "team_count": 2})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_unknown_preset_or_match_is_not_found(client: AsyncClient):
    resp = await client.post("/lineups", json={"match_id": "ind-aus", "preset_id": "moon-ball"})
    assert resp.status_code == 404

    resp = await client.post("/lineups", json={"match_id": "eng-nz", "preset_id": "balanced"})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_empty_pool_is_unprocessable(client: AsyncClient):
    resp = await client.post(
        "/lineups",
        json={
            "match_id": "ind-aus",
            "preset_id": "balanced",
            "stat_ranges": {"dream_team_percentage": {"minimum": 99, "maximum": 100}},
        },
    )
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_team_count_is_bounded(client: AsyncClient):
    resp = await client.post("/lineups", json={"match_id": "ind-aus", "preset_id": "balanced", "team_count": 51})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_partial_batch_reports_failures(client: AsyncClient):
    resp = await client.post(
        "/lineups",
        json={
            "match_id": "ind-aus",
            "preset_id": "balanced",
            "team_count": 2,
            "credit_cap": 50,
            "max_retries": 1,
        },
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["lineups"] == []
    assert [failure["team_index"] for failure in payload["failures"]] == [0, 1]
    assert "could not be filled" in payload["message"]


@pytest.mark.anyio
async def test_export_csv(client: AsyncClient):
    resp = await client.post("/lineups/export.csv", json={"match_id": "ind-aus", "preset_id": "balanced", "team_count": 2})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("LineupId,Captain,ViceCaptain")
    assert len(lines) == 3


@pytest.mark.anyio
async def test_request_without_player_source_is_rejected(client: AsyncClient):
    resp = await client.post("/lineups", json={"preset_id": "balanced", "team_count": 2})
    assert resp.status_code == 422
    assert "players or match_id" in resp.text
