import logging
from typing import AsyncIterator

from ..constants import App, AppContext, INVENTORY_PATH, LEGACY_INVENTORY_PATH, JSON_HEADERS, T_HEADERS
from ..exceptions import ProtocolError
from ..models import (
    ItemAction,
    ItemTag,
    ItemDescriptionEntry,
    DescriptionList,
    DescriptionText,
    OwnerDescriptions,
    ItemDescription,
    Asset,
    InventorySnapshot,
)
from .http import SteamHTTPTransportMixin

logger = logging.getLogger(__name__)

# steam limit rules
INV_COUNT = 2000


class InventoryMixin(SteamHTTPTransportMixin):
    """
    Inventory fetching and parsing.
    Depends on `SteamHTTPTransportMixin`.
    """

    __slots__ = ()

    # required instance attributes
    language: str

    def _inventory_headers(self, cookie: str | None) -> T_HEADERS:
        return {**JSON_HEADERS, "Cookie": cookie} if cookie else JSON_HEADERS

    async def get_user_inventory(
        self,
        steam_id: int,
        app_context: AppContext,
        *,
        cookie: str = None,
        count: int = None,
        start_assetid: int = None,
    ) -> InventorySnapshot:
        """
        Fetches inventory of user.

        .. note:: You can paginate by yourself passing `start_assetid` arg

        :param steam_id: steamid64 of user
        :param app_context: `Steam` app+context
        :param cookie: `Cookie` header value, private inventories require owner cookie
        :param count: page size
        :param start_assetid: start_assetid for partial inv fetch
        :return: snapshot of inventory (page)
        :raises ForbiddenError: if inventory is private or cookie is invalid
        :raises RateLimitedError: when you hit rate limit
        :raises UnexpectedStatusError: other non-success statuses
        :raises ProtocolError: malformed inventory data
        :raises NetworkError:
        """

        params = {"l": self.language}
        if count:
            params["count"] = count
        if start_assetid:
            params["start_assetid"] = start_assetid

        url = self.community_url / INVENTORY_PATH / str(steam_id) / str(app_context.app_id) / str(app_context.context)
        rj = await self._request_json(
            "GET",
            url,
            params=params,
            headers=self._inventory_headers(cookie),
            what="Get user inventory",
        )

        if not rj.get("success"):
            raise ProtocolError(rj.get("error") or "Failed to fetch inventory", rj)

        try:
            snapshot = self._parse_inventory(rj, steam_id, app_context)
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError(f"Malformed inventory data: {e!r}", rj) from e

        logger.debug("Parsed %d assets, %d descriptions", len(snapshot.assets), len(snapshot.descriptions))
        return snapshot

    async def user_inventory(
        self,
        steam_id: int,
        app_context: AppContext,
        *,
        cookie: str = None,
        count=INV_COUNT,
        start_assetid: int = None,
    ) -> AsyncIterator[InventorySnapshot]:
        """
        Fetches inventory of user. Return async iterator to paginate over inventory pages.

        :return: `AsyncIterator` that yields snapshot of each page
        """

        more_items = True
        while more_items:
            snapshot = await self.get_user_inventory(
                steam_id,
                app_context,
                cookie=cookie,
                count=count,
                start_assetid=start_assetid,
            )
            start_assetid = snapshot.last_assetid
            more_items = snapshot.more_items and bool(start_assetid)

            yield snapshot

    async def get_legacy_inventory(
        self,
        steam_id: int,
        app_context: AppContext,
        *,
        cookie: str = None,
    ) -> InventorySnapshot:
        """
        Fetches inventory of user from old `json` endpoint.
        Result is the same snapshot type as `get_user_inventory` returns.

        .. note:: Steam can deprecate this endpoint at any time
        """

        url = (
            self.community_url
            / LEGACY_INVENTORY_PATH
            / str(steam_id)
            / f"inventory/json/{app_context.app_id}/{app_context.context}/"
        )
        rj = await self._request_json(
            "GET",
            url,
            params={"l": self.language},
            headers=self._inventory_headers(cookie),
            what="Get legacy inventory",
        )

        if not rj.get("success"):
            raise ProtocolError(rj.get("Error") or "Failed to fetch inventory", rj)

        try:
            snapshot = self._parse_legacy_inventory(rj, steam_id, app_context)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProtocolError(f"Malformed inventory data: {e!r}", rj) from e

        logger.debug("Parsed %d assets, %d descriptions", len(snapshot.assets), len(snapshot.descriptions))
        return snapshot

    @classmethod
    def _parse_inventory(cls, data: dict, steam_id: int, app_context: AppContext) -> InventorySnapshot:
        # empty inventory comes without assets and descriptions
        descriptions = tuple(cls._create_item_descr(d_data) for d_data in data.get("descriptions") or ())
        descrs_map = {d.key: d for d in descriptions}

        assets = []
        for a_data in data.get("assets") or ():
            key = (int(a_data["classid"]), int(a_data["instanceid"]))
            if key not in descrs_map:
                raise ProtocolError(f"Asset {a_data['assetid']} has no description", data)

            assets.append(
                Asset(
                    asset_id=int(a_data["assetid"]),
                    owner_id=steam_id,
                    app_context=AppContext((App(int(a_data["appid"])), int(a_data["contextid"]))),
                    class_id=key[0],
                    instance_id=key[1],
                    amount=int(a_data["amount"]),
                    description=descrs_map[key],
                )
            )

        return InventorySnapshot(
            owner_id=steam_id,
            app_context=app_context,
            assets=tuple(assets),
            descriptions=descriptions,
            total_count=int(data.get("total_inventory_count", len(assets))),
            last_assetid=int(data["last_assetid"]) if data.get("last_assetid") else None,
            more_items=bool(data.get("more_items")),
        )

    @classmethod
    def _parse_legacy_inventory(cls, data: dict, steam_id: int, app_context: AppContext) -> InventorySnapshot:
        descriptions = []
        for d_data in (data.get("rgDescriptions") or {}).values():
            # legacy tags has `name` and `category_name` instead of localized ones
            tags = [
                {
                    "category": t["category"],
                    "internal_name": t["internal_name"],
                    "localized_category_name": t.get("category_name", t["category"]),
                    "localized_tag_name": t.get("name", t["internal_name"]),
                    "color": t.get("color"),
                }
                for t in d_data.get("tags") or ()
            ]
            descriptions.append(cls._create_item_descr({"appid": app_context.app_id, **d_data, "tags": tags}))

        descrs_map = {d.key: d for d in descriptions}

        assets = []
        for a_data in (data.get("rgInventory") or {}).values():
            key = (int(a_data["classid"]), int(a_data["instanceid"]))
            if key not in descrs_map:
                raise ProtocolError(f"Asset {a_data['id']} has no description", data)

            assets.append(
                Asset(
                    asset_id=int(a_data["id"]),
                    owner_id=steam_id,
                    app_context=app_context,
                    class_id=key[0],
                    instance_id=key[1],
                    amount=int(a_data.get("amount", 1)),
                    description=descrs_map[key],
                )
            )

        return InventorySnapshot(
            owner_id=steam_id,
            app_context=app_context,
            assets=tuple(assets),
            descriptions=tuple(descriptions),
            total_count=len(assets),
            more_items=bool(data.get("more")),
        )

    @staticmethod
    def _create_item_actions(actions: list[dict]) -> tuple[ItemAction, ...]:
        return tuple(ItemAction(a_data["link"], a_data["name"]) for a_data in actions)

    @staticmethod
    def _create_item_tags(tags: list[dict]) -> tuple[ItemTag, ...]:
        return tuple(
            ItemTag(
                t_data["category"],
                t_data["internal_name"],
                t_data["localized_category_name"],
                t_data["localized_tag_name"],
                t_data.get("color"),
            )
            for t_data in tags
        )

    @staticmethod
    def _create_item_descr_entries(descriptions: list[dict]) -> tuple[ItemDescriptionEntry, ...]:
        return tuple(
            ItemDescriptionEntry(de_data["value"], de_data.get("color"))
            for de_data in descriptions
            if de_data["value"] != " "  # ha, surprise!
        )

    @classmethod
    def _create_owner_descriptions(cls, data) -> OwnerDescriptions:
        if data is None:
            return DescriptionList()
        elif isinstance(data, list):
            return DescriptionList(cls._create_item_descr_entries(data))
        elif isinstance(data, str):
            return DescriptionText(data)

        raise ProtocolError(f"Unexpected owner descriptions shape: {type(data).__name__}", data)

    @classmethod
    def _create_item_descr(cls, data: dict) -> ItemDescription:
        return ItemDescription(
            class_id=int(data["classid"]),
            instance_id=int(data["instanceid"]),
            app=App(int(data["appid"])),
            name=data["name"],
            market_name=data["market_name"],
            market_hash_name=data["market_hash_name"],
            name_color=data.get("name_color") or None,
            background_color=data.get("background_color") or None,
            type=data.get("type") or None,
            icon=data.get("icon_url"),
            icon_large=data.get("icon_url_large"),
            commodity=bool(data.get("commodity")),
            tradable=bool(data["tradable"]),
            marketable=bool(data.get("marketable")),
            market_tradable_restriction=data.get("market_tradable_restriction"),
            market_marketable_restriction=data.get("market_marketable_restriction"),
            actions=cls._create_item_actions(data.get("actions") or ()),
            market_actions=cls._create_item_actions(data.get("market_actions") or ()),
            tags=cls._create_item_tags(data.get("tags") or ()),
            descriptions=cls._create_item_descr_entries(data.get("descriptions") or ()),
            owner_descriptions=cls._create_owner_descriptions(data.get("owner_descriptions")),
            fraud_warnings=tuple(data.get("fraudwarnings", ())),
        )
