"""End-to-end tests for the games, sets and cards resources."""

import json

import httpx
import pytest
import respx

from justtcg.errors import ApiError
from justtcg.models import BatchLookupItem, Card, CardSet, Game

from conftest import BASE_URL, envelope

CHARIZARD = {
    "id": "pokemon-base-set-charizard-holo-rare",
    "name": "Charizard",
    "game": "Pokemon",
    "set": "base-set-pokemon",
    "set_name": "Base Set",
    "number": "4",
    "rarity": "Holo Rare",
    "tcgplayerId": "42382",
    "variants": [
        {
            "id": "pokemon-base-set-charizard-holo-rare_near-mint",
            "condition": "Near Mint",
            "printing": "Holofoil",
            "price": 420.5,
            "priceChange7d": 2.5,
        },
        {
            "id": "pokemon-base-set-charizard-holo-rare_lightly-played",
            "condition": "Lightly Played",
            "printing": "Holofoil",
            "price": 310.0,
        },
    ],
}


@respx.mock(base_url=BASE_URL)
async def test_games_list(respx_mock, client):
    route = respx_mock.get("/games").mock(return_value=httpx.Response(200, json=envelope([
        {"id": "pokemon", "name": "Pokemon", "cards_count": 20000, "last_updated": 1700000000},
        {"id": "disney-lorcana", "name": "Disney Lorcana"},
    ])))
    result = await client.v1.games.list()
    assert route.call_count == 1
    assert route.calls.last.request.url.query == b""
    assert len(result.data) == 2
    assert isinstance(result.data[0], Game)
    assert result.data[0].name == "Pokemon"
    assert result.data[0].last_updated == 1700000000
    assert result.usage.api_requests_remaining == 996
    assert result.pagination is None


@respx.mock(base_url=BASE_URL)
async def test_sets_list_with_params(respx_mock, client):
    route = respx_mock.get("/sets").mock(return_value=httpx.Response(200, json=envelope(
        [{"id": "set-pkm-1", "name": "Base Set", "gameId": "pkm", "releaseDate": "1999-01-09"}],
        meta={"total": 1, "limit": 25, "offset": 0, "hasMore": False},
    )))
    result = await client.v1.sets.list(game="Pokemon")
    params = route.calls.last.request.url.params
    assert dict(params) == {"game": "Pokemon"}
    assert isinstance(result.data[0], CardSet)
    assert result.data[0].name == "Base Set"
    assert result.data[0].game_id == "pkm"
    assert result.pagination.total == 1


@respx.mock(base_url=BASE_URL)
async def test_sets_fetch_all(respx_mock, client):
    page1 = httpx.Response(200, json=envelope(
        [{"id": "set-1", "name": "Set Page 1"}],
        meta={"total": 2, "limit": 1, "offset": 0, "hasMore": True},
    ))
    page2 = httpx.Response(200, json=envelope(
        [{"id": "set-2", "name": "Set Page 2"}],
        meta={"total": 2, "limit": 1, "offset": 1, "hasMore": False},
    ))
    route = respx_mock.get("/sets").mock(side_effect=[page1, page2])

    names = [s.name async for s in client.v1.sets.fetch_all(game="Pokemon", page_size=1)]

    assert names == ["Set Page 1", "Set Page 2"]
    assert route.call_count == 2
    first, second = (call.request.url.params for call in route.calls)
    assert dict(first) == {"game": "Pokemon", "limit": "1", "offset": "0"}
    assert dict(second) == {"game": "Pokemon", "limit": "1", "offset": "1"}


@respx.mock(base_url=BASE_URL)
async def test_sets_fetch_all_default_page_size(respx_mock, client):
    route = respx_mock.get("/sets").mock(side_effect=[
        httpx.Response(200, json=envelope([{"id": "a", "name": "A"}],
                                          meta={"total": 2, "limit": 100, "offset": 0, "hasMore": True})),
        httpx.Response(200, json=envelope([{"id": "b", "name": "B"}],
                                          meta={"total": 2, "limit": 100, "offset": 100, "hasMore": False})),
    ])
    sets = await client.v1.sets.fetch_all(game="Pokemon").collect()
    assert [s.id for s in sets] == ["a", "b"]
    assert route.calls[1].request.url.params["offset"] == "100"


@respx.mock(base_url=BASE_URL)
async def test_cards_get_serializes_filters(respx_mock, client):
    route = respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope(
        [CHARIZARD], meta={"total": 1, "limit": 10, "offset": 0, "hasMore": False},
    )))
    result = await client.v1.cards.get(
        query="Charizard",
        game="Pokemon",
        set=None,
        condition=["NM", "LP"],
        include_statistics=["7d", "30d"],
        include_price_history=False,
        order_by="price",
        limit=10,
    )
    params = route.calls.last.request.url.params
    assert params["q"] == "Charizard"
    assert "query" not in params
    assert "set" not in params
    assert params["condition"] == "NM,LP"
    assert params["include_statistics"] == "7d,30d"
    assert params["include_price_history"] == "false"
    assert params["orderBy"] == "price"
    assert params["limit"] == "10"

    card = result.data[0]
    assert isinstance(card, Card)
    assert card.name == "Charizard"
    assert card.tcgplayer_id == "42382"
    assert card.top_variant().price == 420.5
    assert result.pagination.limit == 10


@respx.mock(base_url=BASE_URL)
async def test_cards_search(respx_mock, client):
    route = respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope([CHARIZARD])))
    result = await client.v1.cards.search("Charizard", game="Pokemon", limit=20)
    params = route.calls.last.request.url.params
    assert dict(params) == {"q": "Charizard", "game": "Pokemon", "limit": "20"}
    assert result.data[0].id == CHARIZARD["id"]


@respx.mock(base_url=BASE_URL)
async def test_cards_get_by_batch(respx_mock, client):
    route = respx_mock.post("/cards").mock(return_value=httpx.Response(200, json=envelope([
        {"id": "card-123", "name": "Pikachu", "game": "pkm", "set": "base", "variants": []},
        {"id": "card-abc", "name": "Charizard", "game": "pkm", "set": "base", "variants": []},
    ])))
    items = [
        BatchLookupItem(tcgplayer_id="123"),
        BatchLookupItem(card_id="card-abc", printing=["Foil"], condition=["NM"]),
        {"variantId": "v-1"},
    ]
    result = await client.v1.cards.get_by_batch(items)

    body = json.loads(route.calls.last.request.content)
    assert body == [
        {"tcgplayerId": "123"},
        {"cardId": "card-abc", "printing": ["Foil"], "condition": ["NM"]},
        {"variantId": "v-1"},
    ]
    assert [c.name for c in result.data] == ["Pikachu", "Charizard"]
    assert result.pagination is None


async def test_cards_get_by_batch_requires_items(client):
    with pytest.raises(ValueError):
        await client.v1.cards.get_by_batch([])


@respx.mock(base_url=BASE_URL)
async def test_api_level_error_surfaces_as_data(respx_mock, client):
    respx_mock.get("/cards").mock(return_value=httpx.Response(200, json={
        "data": [],
        "error": 'Required query parameter "game" is missing',
        "code": "INVALID_REQUEST",
    }))
    result = await client.v1.cards.get(set="base-set")
    assert result.data == []
    assert result.pagination is None
    assert result.error == 'Required query parameter "game" is missing'
    assert result.code == "INVALID_REQUEST"


@respx.mock(base_url=BASE_URL)
async def test_cards_fetch_all_raises_on_api_error(respx_mock, client):
    respx_mock.get("/cards").mock(return_value=httpx.Response(200, json={
        "data": [], "error": "Plan limit reached", "code": "RATE_LIMIT",
    }))
    with pytest.raises(ApiError, match="Plan limit reached"):
        await client.v1.cards.fetch_all(game="pokemon").collect()


@respx.mock(base_url=BASE_URL)
async def test_cards_fetch_all_passes_updated_after(respx_mock, client):
    route = respx_mock.get("/cards").mock(return_value=httpx.Response(200, json=envelope(
        [CHARIZARD], meta={"total": 1, "limit": 50, "offset": 0, "hasMore": False},
    )))
    cards = await client.v1.cards.fetch_all(game="pokemon", updated_after=1700000000, page_size=50).collect()
    params = route.calls.last.request.url.params
    assert params["updated_after"] == "1700000000"
    assert params["limit"] == "50"
    assert params["offset"] == "0"
    assert len(cards) == 1


async def test_cards_fetch_all_rejects_limit(client):
    with pytest.raises(TypeError):
        client.v1.cards.fetch_all(game="pokemon", limit=5)


async def test_cards_unknown_filter(client):
    with pytest.raises(TypeError, match="Unknown card filter"):
        await client.v1.cards.get(colour="red")


async def test_cards_invalid_order(client):
    with pytest.raises(ValueError):
        await client.v1.cards.get(game="pokemon", order="sideways")


@respx.mock(base_url=BASE_URL)
async def test_unparseable_record_is_skipped(respx_mock, client):
    respx_mock.get("/games").mock(return_value=httpx.Response(200, json=envelope([
        {"name": "No id"},
        {"id": "pokemon", "name": "Pokemon"},
    ])))
    result = await client.v1.games.list()
    assert [g.id for g in result.data] == ["pokemon"]
