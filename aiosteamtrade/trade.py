"""Locally built trade offer: sides, message, readiness and submission lifecycle."""

from json import dumps as jdumps
from typing import Iterable

from yarl import URL

from .constants import STEAM_URL, NEW_TRADE_OFFER_PATH, TradeOfferState
from .exceptions import MalformedUrlError, DuplicateAssetError
from .models import Asset, TradeOfferAsset, SubmissionResult
from .typed import JsonTradeOffer, TradeOfferCreateParams
from .utils import account_id_to_steam_id, steam_id_to_account_id, to_steam_id64

__all__ = ("TradeOffer", "TradeOfferAsset")


def _to_offer_asset(item: TradeOfferAsset | Asset) -> TradeOfferAsset:
    return item if isinstance(item, TradeOfferAsset) else TradeOfferAsset.from_asset(item, item.amount)


class TradeOffer:
    """
    Trade offer in progress of being composed and submitted.
    Mutable only in `DRAFT` state, submission moves it to `SUBMITTED` or `FAILED` once and for all.
    """

    __slots__ = (
        "partner_id",
        "token",
        "trade_url",
        "message",
        "self_assets",
        "partner_assets",
        "self_ready",
        "partner_ready",
        "state",
        "result",
        "error",
    )

    def __init__(self, partner: int, token: str = None, *, trade_url: str = None):
        """
        :param partner: partner account id (id32) or steam id64
        :param token: trade token, required when partner is not in friends list
        :param trade_url: originating trade url, used as `Referer`
        :raises ValueError: if partner is negative
        """

        if partner < 0:
            raise ValueError(f"Partner id must be non-negative, got {partner}")

        self.partner_id: int = to_steam_id64(partner)
        self.token = token or None
        self.trade_url = trade_url
        self.message = ""

        self.self_assets: list[TradeOfferAsset] = []
        self.partner_assets: list[TradeOfferAsset] = []
        self.self_ready = False
        self.partner_ready = False

        self.state = TradeOfferState.DRAFT
        self.result: SubmissionResult | None = None
        self.error: BaseException | None = None

    @classmethod
    def from_trade_url(cls, url: str) -> "TradeOffer":
        """
        Create offer from partner trade url like
        `https://steamcommunity.com/tradeoffer/new/?partner=87048484&token=gn-X8Nub`

        :raises MalformedUrlError: if `partner` or `token` param is missing or invalid
        """

        try:
            parsed = URL(url)
        except (ValueError, TypeError) as e:
            raise MalformedUrlError(f"Can't parse trade url: {url!r}") from e

        partner = parsed.query.get("partner")
        token = parsed.query.get("token")
        if not partner:
            raise MalformedUrlError(f"Trade url has no `partner` param: {url!r}")
        if not token:
            raise MalformedUrlError(f"Trade url has no `token` param: {url!r}")

        try:
            partner_id = account_id_to_steam_id(int(partner))
        except ValueError as e:
            raise MalformedUrlError(f"Invalid `partner` param of trade url: {partner!r}") from e

        return cls(partner_id, token, trade_url=url)

    @classmethod
    def create(cls, obj: str | int, token: str = None) -> "TradeOffer":
        """
        Create offer from trade url or partner id (id32 or id64).

        :raises ValueError: if `token` is passed along with trade url, which carries its own token
        """

        if isinstance(obj, str):
            if token is not None:
                raise ValueError("Trade url already contains token")
            return cls.from_trade_url(obj)
        return cls(obj, token)

    def __repr__(self):
        return (
            f"{type(self).__name__}(partner_id={self.partner_id}, state={self.state.name}, "
            f"give={len(self.self_assets)}, receive={len(self.partner_assets)})"
        )

    @property
    def partner_account_id(self) -> int:
        return steam_id_to_account_id(self.partner_id)

    @property
    def is_empty(self) -> bool:
        return not self.self_assets and not self.partner_assets

    def _ensure_draft(self):
        if self.state is not TradeOfferState.DRAFT:
            raise ValueError(f"Trade offer can't be changed in {self.state.name} state")

    @staticmethod
    def _add(side: list[TradeOfferAsset], items: Iterable[TradeOfferAsset | Asset]):
        new = [_to_offer_asset(i) for i in items]
        present = {a.asset_id for a in side}
        for asset in new:
            if asset.asset_id in present:
                raise DuplicateAssetError(asset.asset_id)
            present.add(asset.asset_id)

        side.extend(new)

    @staticmethod
    def _remove(side: list[TradeOfferAsset], asset_ids: Iterable[int]):
        to_remove = set(asset_ids)
        side[:] = [a for a in side if a.asset_id not in to_remove]

    def set_message(self, message: str):
        self._ensure_draft()
        self.message = message

    def add_self_item(self, item: TradeOfferAsset | Asset):
        """:raises DuplicateAssetError: asset is already in offer"""
        self.add_self_items((item,))

    def add_self_items(self, items: Iterable[TradeOfferAsset | Asset]):
        """Add items to give. Nothing added if any of items is already in offer."""

        self._ensure_draft()
        self._add(self.self_assets, items)

    def add_partner_item(self, item: TradeOfferAsset | Asset):
        self.add_partner_items((item,))

    def add_partner_items(self, items: Iterable[TradeOfferAsset | Asset]):
        """Add items to receive. Nothing added if any of items is already in offer."""

        self._ensure_draft()
        self._add(self.partner_assets, items)

    def remove_self_item(self, asset_id: int):
        self.remove_self_items((asset_id,))

    def remove_self_items(self, asset_ids: Iterable[int]):
        """Remove items to give by asset id. Absent ids are ignored."""

        self._ensure_draft()
        self._remove(self.self_assets, asset_ids)

    def remove_partner_item(self, asset_id: int):
        self.remove_partner_items((asset_id,))

    def remove_partner_items(self, asset_ids: Iterable[int]):
        self._ensure_draft()
        self._remove(self.partner_assets, asset_ids)

    def toggle_self_ready(self) -> bool:
        self._ensure_draft()
        self.self_ready = not self.self_ready
        return self.self_ready

    def toggle_partner_ready(self) -> bool:
        self._ensure_draft()
        self.partner_ready = not self.partner_ready
        return self.partner_ready

    def to_json_tradeoffer(self) -> JsonTradeOffer:
        return {
            "newversion": True,
            "version": len(self.self_assets) + len(self.partner_assets) + 1,
            "me": {"assets": [a.to_dict() for a in self.self_assets], "currency": [], "ready": self.self_ready},
            "them": {"assets": [a.to_dict() for a in self.partner_assets], "currency": [], "ready": self.partner_ready},
        }

    def to_create_params(self) -> TradeOfferCreateParams:
        return {"trade_offer_access_token": self.token} if self.token else {}

    def make_referer(self, base: URL = STEAM_URL.COMMUNITY) -> URL:
        """Originating trade url or new trade offer page of the partner on `base`"""

        if self.trade_url:
            return URL(self.trade_url)

        referer = (base / NEW_TRADE_OFFER_PATH) % {"partner": self.partner_account_id}
        if self.token:
            referer %= {"token": self.token}
        return referer

    @property
    def referer(self) -> URL:
        return self.make_referer()

    def to_form(self, session_id: str) -> dict[str, str]:
        """Form data of create trade offer request"""

        return {
            "sessionid": session_id,
            "serverid": "1",
            "partner": str(self.partner_id),
            "tradeoffermessage": self.message,
            "json_tradeoffer": jdumps(self.to_json_tradeoffer()),
            "captcha": "",
            "trade_offer_create_params": jdumps(self.to_create_params()),
        }

    def _begin_submission(self):
        self._ensure_draft()
        if self.is_empty:
            raise ValueError("You can't make empty trade offer!")
        self.state = TradeOfferState.SUBMITTING

    def _mark_submitted(self, result: SubmissionResult):
        self.result = result
        self.state = TradeOfferState.SUBMITTED

    def _mark_failed(self, error: BaseException):
        self.error = error
        self.state = TradeOfferState.FAILED
