import pytest

from aiosteamtrade import AppContext, App, TagCategory, CS2_TAG_VALUES, SteamClient, resolve_trade_assets
from aiosteamtrade.exceptions import RateLimitedError, ForbiddenError, UnexpectedStatusError, ProtocolError
from aiosteamtrade.models import DescriptionList, DescriptionText, TradeOfferAsset

from data import STEAM_ID, USERNAME, PASSWORD, MOCK_TOTP_SECRET, INVENTORY_PAGE, EMPTY_INVENTORY, AK_DESCRIPTION

AK_KEY = (310776560, 302028390)
CASE_KEY = (3604678661, 0)


async def test_get_user_inventory(public_client, steam):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    request = steam.last("inventory")
    assert request["path"] == f"/inventory/{STEAM_ID}/730/2"
    assert request["query"] == {"l": "english"}
    assert request["headers"]["Accept"] == "application/json"
    assert "Cookie" not in request["headers"]

    assert snapshot.owner_id == STEAM_ID
    assert snapshot.app_context is AppContext.CS2
    assert snapshot.total_count == 3
    assert len(snapshot) == 3
    assert [a.asset_id for a in snapshot.assets] == [29366441212, 29366441213, 29366441214]
    assert [d.key for d in snapshot.descriptions] == [AK_KEY, CASE_KEY]


async def test_inventory_parsed_fields(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    ak = snapshot.get_description(*AK_KEY)
    assert ak.app is App.CS2
    assert ak.market_name == "AK-47 | Redline (Field-Tested)"
    assert ak.tradable and ak.marketable
    assert ak.market_tradable_restriction == 7
    assert len(ak.descriptions) == 1  # blank entry skipped
    assert isinstance(ak.owner_descriptions, DescriptionList)
    assert ak.owner_descriptions.entries[0].value == "Tradable After Oct 25, 2026"
    assert ak.actions[0].name == "Inspect in Game..."

    case = snapshot.get_description(*CASE_KEY)
    assert isinstance(case.owner_descriptions, DescriptionText)
    assert case.owner_descriptions.text == "Not tradable in your region"
    assert case.commodity

    asset = snapshot.assets[0]
    assert asset.description is ak
    assert asset.app_context is AppContext.CS2
    assert asset.id == "730:2:29366441212"
    assert snapshot.get_description(1, 1) is None


async def test_inventory_with_cookie(public_client, steam):
    await public_client.get_user_inventory(STEAM_ID, AppContext.CS2, cookie="steamLoginSecure=abc")

    assert steam.last("inventory")["headers"]["Cookie"] == "steamLoginSecure=abc"


async def test_empty_inventory(public_client, steam):
    steam.inventory = (200, EMPTY_INVENTORY)

    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert snapshot.assets == ()
    assert snapshot.descriptions == ()
    assert snapshot.find_by_name("AK") is None
    assert snapshot.resolve([]) == []


@pytest.mark.parametrize(
    "status,error",
    [(429, RateLimitedError), (403, ForbiddenError), (500, UnexpectedStatusError)],
)
async def test_inventory_status_classification(public_client, steam, status, error):
    steam.inventory = (status, "null")

    with pytest.raises(error) as exc_info:
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert exc_info.value.status == status
    assert exc_info.value.body == "null"


async def test_inventory_not_success(public_client, steam):
    steam.inventory = (200, {"success": False, "error": "EYldRefreshAppIfNecessary failed with EResult 55"})

    with pytest.raises(ProtocolError, match="EResult 55"):
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)


async def test_inventory_asset_without_description(public_client, steam):
    steam.inventory = (200, {**INVENTORY_PAGE, "descriptions": [AK_DESCRIPTION]})

    with pytest.raises(ProtocolError):
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)


async def test_inventory_unexpected_owner_descriptions(public_client, steam):
    steam.inventory = (200, {**INVENTORY_PAGE, "descriptions": [{**AK_DESCRIPTION, "owner_descriptions": 1}]})

    with pytest.raises(ProtocolError):
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)


async def test_user_inventory_pagination(public_client, steam):
    first_page = {
        **INVENTORY_PAGE,
        "assets": INVENTORY_PAGE["assets"][:1],
        "descriptions": [AK_DESCRIPTION],
        "more_items": 1,
        "last_assetid": "29366441212",
    }
    second_page = {**INVENTORY_PAGE, "assets": INVENTORY_PAGE["assets"][1:], "descriptions": INVENTORY_PAGE["descriptions"][1:]}
    steam.inventory_pages = [(200, first_page), (200, second_page)]

    pages = [page async for page in public_client.user_inventory(STEAM_ID, AppContext.CS2, count=1)]

    assert len(pages) == 2
    assert pages[0].more_items and pages[0].last_assetid == 29366441212
    assert [a.asset_id for p in pages for a in p.assets] == [29366441212, 29366441213, 29366441214]
    inventory_requests = [r for r in steam.requests if r["route"] == "inventory"]
    assert inventory_requests[0]["query"] == {"l": "english", "count": "1"}
    assert inventory_requests[1]["query"]["start_assetid"] == "29366441212"


async def test_get_legacy_inventory(public_client, steam):
    snapshot = await public_client.get_legacy_inventory(STEAM_ID, AppContext.CS2)

    assert steam.last("legacy_inventory")["path"] == f"/profiles/{STEAM_ID}/inventory/json/730/2/"
    assert [a.asset_id for a in snapshot.assets] == [29366441212]

    ak = snapshot.get_description(*AK_KEY)
    assert isinstance(ak.owner_descriptions, DescriptionText)
    assert ak.owner_descriptions.text == ""
    assert snapshot.filter_by_tag(TagCategory.RARITY, "Classified") == [ak]
    assert snapshot.resolve([ak]) == [TradeOfferAsset(730, 2, 1, 29366441212)]


async def test_find_by_name(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert snapshot.find_by_name("Redline").key == AK_KEY
    assert snapshot.find_by_name("Case").key == CASE_KEY
    assert snapshot.find_by_name("redline") is None  # case-sensitive
    assert snapshot.find_by_name("M4A4") is None
    assert snapshot.find_by_name("").key == AK_KEY  # first in snapshot order


async def test_filter_by_tag(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert [d.key for d in snapshot.filter_by_tag(TagCategory.QUALITY, "Normal")] == [AK_KEY, CASE_KEY]
    assert [d.key for d in snapshot.filter_by_tag(TagCategory.EXTERIOR, "Field-Tested")] == [AK_KEY]
    assert [d.key for d in snapshot.filter_by_tag(TagCategory.TYPE, "Container")] == [CASE_KEY]
    assert snapshot.filter_by_tag(TagCategory.RARITY, "Covert") == []
    # value of another category does not match
    assert snapshot.filter_by_tag(TagCategory.TYPE, "Classified") == []
    assert "Classified" in CS2_TAG_VALUES[TagCategory.RARITY]


async def test_resolve(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)
    case = snapshot.get_description(*CASE_KEY)
    ak = snapshot.get_description(*AK_KEY)

    assert snapshot.resolve([case]) == [
        TradeOfferAsset(730, 2, 1, 29366441213),
        TradeOfferAsset(730, 2, 1, 29366441214),
    ]
    # same description twice does not duplicate assets
    resolved = resolve_trade_assets(snapshot, [case, ak, case])
    assert [a.asset_id for a in resolved] == [29366441213, 29366441214, 29366441212]
    assert resolved[0].to_dict() == {"appid": 730, "contextid": "2", "amount": 1, "assetid": "29366441213"}


async def test_own_inventory(steam):
    client = SteamClient(USERNAME, PASSWORD, MOCK_TOTP_SECRET, community_url=steam.url)
    try:
        with pytest.raises(AttributeError):
            await client.get_inventory(AppContext.CS2)

        await client.login()
        snapshot = await client.get_inventory(AppContext.CS2)
    finally:
        await client.session.close()

    assert snapshot.owner_id == STEAM_ID
    assert steam.last("inventory")["headers"]["Cookie"] == client.cookie


async def test_inventory_error_status_with_undecodable_body(public_client, steam):
    steam.inventory = (403, b"\xff\xfe")

    with pytest.raises(ForbiddenError) as exc_info:
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert exc_info.value.status == 403
    assert exc_info.value.body == "\ufffd\ufffd"


async def test_inventory_undecodable_body(public_client, steam):
    steam.inventory = (200, b"\xff\xfe{}")

    with pytest.raises(ProtocolError) as exc_info:
        await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)

    assert exc_info.value.raw == b"\xff\xfe{}"


async def test_snapshot_assets_of_description(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)
    case = snapshot.get_description(*CASE_KEY)

    assert [a.asset_id for a in snapshot.get_assets(case)] == [29366441213, 29366441214]
    assert all(a.description is case for a in snapshot.get_assets(case))


async def test_description_icon_url(public_client):
    snapshot = await public_client.get_user_inventory(STEAM_ID, AppContext.CS2)
    ak = snapshot.get_description(*AK_KEY)

    assert str(ak.icon_url) == (
        f"https://community.akamai.steamstatic.com/economy/image/{AK_DESCRIPTION['icon_url']}/96fx96f"
    )
