"""Tests for the command line interface."""

import json

import httpx
import pytest
import respx

from justtcg.cli import main
from justtcg.state import BaselineTracker

from conftest import BASE_URL, envelope


@pytest.fixture
def run(tmp_path):
    """Run the CLI with a test key and a config path that does not exist."""

    def _run(*argv):
        main(["--api-key", "test-key", "-c", str(tmp_path / "missing.yaml"), *argv])

    return _run


@respx.mock(base_url=BASE_URL)
def test_games_command(respx_mock, run, capsys):
    respx_mock.get("/games").mock(return_value=httpx.Response(200, json=envelope([
        {"id": "pokemon", "name": "Pokemon", "sets_count": 150},
    ])))
    run("games")
    out = capsys.readouterr().out
    assert "pokemon" in out
    assert "API requests remaining: 996" in out


@respx.mock(base_url=BASE_URL)
def test_sets_all_command(respx_mock, run, capsys):
    route = respx_mock.get("/sets").mock(side_effect=[
        httpx.Response(200, json=envelope([{"id": "base", "name": "Base"}],
                                          meta={"total": 2, "limit": 100, "offset": 0, "hasMore": True})),
        httpx.Response(200, json=envelope([{"id": "jungle", "name": "Jungle"}],
                                          meta={"total": 2, "limit": 100, "offset": 100, "hasMore": False})),
    ])
    run("sets", "--game", "pokemon", "--all")
    out = capsys.readouterr().out
    assert "Jungle" in out
    assert "Found a total of 2 sets." in out
    assert "API requests remaining: 996/1000" in out
    assert route.call_count == 2


@respx.mock(base_url=BASE_URL)
def test_cards_command_passes_filters(respx_mock, run, capsys):
    route = respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope(
        [{"id": "eevee", "name": "Eevee", "set": "jungle",
          "variants": [{"id": "v1", "condition": "Near Mint", "price": 3.5}]}],
        meta={"total": 1, "limit": 20, "offset": 0, "hasMore": False},
    )))
    run("cards", "--query", "Eevee", "--game", "Pokemon", "--condition", "NM,LP")
    params = route.calls.last.request.url.params
    assert params["q"] == "Eevee"
    assert params["condition"] == "NM,LP"
    assert params["limit"] == "20"
    assert "Eevee" in capsys.readouterr().out


@respx.mock(base_url=BASE_URL)
def test_cards_command_api_error_exits(respx_mock, run, capsys):
    respx_mock.get("/cards").mock(return_value=httpx.Response(200, json={
        "data": [], "error": 'Required query parameter "game" is missing', "code": "INVALID_REQUEST",
    }))
    with pytest.raises(SystemExit) as excinfo:
        run("cards", "--set", "base")
    assert excinfo.value.code == 1
    assert "INVALID_REQUEST" in capsys.readouterr().out


@respx.mock(base_url=BASE_URL)
def test_lookup_command(respx_mock, run, capsys):
    route = respx_mock.post("/cards").mock(return_value=httpx.Response(200, json=envelope([
        {"id": "c1", "name": "Black Lotus", "variants": [{"id": "v1", "price": 1000.0}]},
    ])))
    run("lookup", "--tcgplayer-id", "89163", "--variant-id", "v1")
    assert json.loads(route.calls.last.request.content) == [
        {"tcgplayerId": "89163"},
        {"variantId": "v1"},
    ]
    assert "Black Lotus" in capsys.readouterr().out


def test_lookup_requires_identifiers(run, capsys):
    with pytest.raises(SystemExit):
        run("lookup")
    assert "at least one" in capsys.readouterr().out


def test_missing_api_key_exits(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["-c", str(tmp_path / "missing.yaml"), "games"])
    assert "API key is missing" in capsys.readouterr().out


@respx.mock(base_url=BASE_URL)
def test_watch_once(respx_mock, run, tmp_path, capsys):
    state_file = tmp_path / "baselines.json"
    respx_mock.get("/games").mock(return_value=httpx.Response(200, json=envelope([
        {"id": "pokemon", "name": "Pokemon", "last_updated": 1700000000},
    ])))
    respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope(
        [{"id": "mew", "name": "Mew", "variants": []}],
        meta={"total": 1, "limit": 100, "offset": 0, "hasMore": False},
    )))
    run("watch", "--game", "pokemon", "--once", "--state", str(state_file))
    out = capsys.readouterr().out
    assert "1 cards updated" in out
    assert "API requests remaining: 996" in out
    assert BaselineTracker(str(state_file)).get("pokemon") == 1700000000


def test_status_command(tmp_path, capsys):
    state_file = tmp_path / "baselines.json"
    tracker = BaselineTracker(str(state_file))
    tracker.set("pokemon", 1700000000)
    tracker.save()
    main(["status", "--state", str(state_file)])
    out = capsys.readouterr().out
    assert "pokemon" in out
    assert "Games tracked: 1" in out


def test_no_command_prints_help(capsys):
    main([])
    assert "usage: justtcg" in capsys.readouterr().out


@respx.mock(base_url=BASE_URL)
def test_watch_keeps_polling_after_failed_poll(respx_mock, run, tmp_path, capsys):
    state_file = tmp_path / "baselines.json"
    responses = [
        httpx.Response(503, json={"error": "Service unavailable"}),
        httpx.Response(200, json=envelope([
            {"id": "pokemon", "name": "Pokemon", "last_updated": 1700000000},
        ])),
    ]

    def games(request):
        if not responses:
            raise KeyboardInterrupt
        return responses.pop(0)

    games_route = respx_mock.get("/games").mock(side_effect=games)
    respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope(
        [{"id": "mew", "name": "Mew", "variants": []}],
        meta={"total": 1, "limit": 100, "offset": 0, "hasMore": False},
    )))

    run("watch", "--game", "pokemon", "--interval", "0", "--state", str(state_file))

    out = capsys.readouterr().out
    assert "1 consecutive errors" in out
    assert "1 cards updated" in out
    assert "Stopped." in out
    assert games_route.call_count == 3
    assert BaselineTracker(str(state_file)).get("pokemon") == 1700000000


@respx.mock(base_url=BASE_URL)
def test_watch_once_exits_on_failed_poll(respx_mock, run, tmp_path, capsys):
    respx_mock.get("/games").mock(return_value=httpx.Response(503, json={"error": "Service unavailable"}))
    with pytest.raises(SystemExit) as excinfo:
        run("watch", "--game", "pokemon", "--once", "--state", str(tmp_path / "baselines.json"))
    assert excinfo.value.code == 1
    assert "Service unavailable" in capsys.readouterr().out
