from dataclasses import dataclass, field
from typing import NamedTuple, TypeAlias, Iterable

from yarl import URL

from .constants import STEAM_URL, App, AppContext
from .utils import create_ident_code


class ItemAction(NamedTuple):
    link: str
    name: str


class ItemDescriptionEntry(NamedTuple):
    value: str
    color: str | None  # hexadecimal


class ItemTag(NamedTuple):
    category: str
    internal_name: str
    localized_category_name: str
    localized_tag_name: str
    color: str | None  # hexadecimal


class DescriptionList(NamedTuple):
    """`owner_descriptions` came as a list of entries"""

    entries: tuple[ItemDescriptionEntry, ...] = ()


class DescriptionText(NamedTuple):
    """`owner_descriptions` came as a plain string"""

    text: str


OwnerDescriptions: TypeAlias = DescriptionList | DescriptionText


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class ItemDescription:
    """
    Shared description of class of items, keyed by `(class_id, instance_id)`.
    `id` or `ident_code` field is guaranteed unique within whole Steam Economy.
    """

    id: str = field(init=False, default="")
    """Unique identifier of the `ItemDescription` within `Steam Economy`"""

    class_id: int
    instance_id: int

    app: App

    name: str
    market_name: str
    market_hash_name: str

    type: str | None = None

    name_color: str | None = None  # hexadecimal
    background_color: str | None = None

    icon: str | None = None
    icon_large: str | None = None

    actions: tuple[ItemAction, ...] = ()
    market_actions: tuple[ItemAction, ...] = ()
    tags: tuple[ItemTag, ...] = ()
    descriptions: tuple[ItemDescriptionEntry, ...] = ()
    owner_descriptions: OwnerDescriptions = DescriptionList()

    fraud_warnings: tuple[str, ...] = ()

    commodity: bool = False
    tradable: bool
    marketable: bool
    # days for which the item will be untradable after being sold on the market
    market_tradable_restriction: int | None = None
    market_marketable_restriction: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "id", create_ident_code(self.instance_id, self.class_id, self.app.value))

    @property
    def ident_code(self) -> str:
        """Alias for `id`"""
        return self.id

    @property
    def key(self) -> tuple[int, int]:
        """`(class_id, instance_id)` pair"""
        return self.class_id, self.instance_id

    @property
    def icon_url(self) -> URL | None:
        return (STEAM_URL.STATIC / f"economy/image/{self.icon}/96fx96f") if self.icon is not None else None

    def has_tag(self, category: str, value: str) -> bool:
        return any(t.category == category and t.localized_tag_name == value for t in self.tags)

    def __eq__(self, other):
        if isinstance(other, ItemDescription):
            return self.id == other.id
        return False

    def __hash__(self):
        return hash(self.id)


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class Asset:
    """
    Represents unique copy of a `Steam Economy` item.
    `id` or `ident_code` field is guaranteed unique within whole Steam Economy.
    """

    id: str = field(init=False, default="")
    """Unique identifier of the `Asset` within `Steam Economy`"""

    asset_id: int  # The item's unique ID within its app+context
    owner_id: int

    app_context: AppContext

    class_id: int
    instance_id: int

    amount: int  # if stackable

    description: ItemDescription

    def __post_init__(self):
        ident = create_ident_code(self.asset_id, self.app_context.context, self.app_context.app_id)
        object.__setattr__(self, "id", ident)

    @property
    def ident_code(self) -> str:
        """Alias for `id`"""
        return self.id

    @property
    def key(self) -> tuple[int, int]:
        """`(class_id, instance_id)` pair of the description"""
        return self.class_id, self.instance_id

    def __eq__(self, other):
        if isinstance(other, Asset):
            return self.id == other.id
        return False

    def __hash__(self):
        return hash(self.id)


@dataclass(slots=True, frozen=True)
class TradeOfferAsset:
    """Identity needed to transfer one unit of an item within trade offer"""

    app_id: int
    context_id: int
    amount: int
    asset_id: int

    @classmethod
    def from_asset(cls, asset: Asset, amount=1) -> "TradeOfferAsset":
        return cls(asset.app_context.app_id, asset.app_context.context, amount, asset.asset_id)

    def to_dict(self) -> dict[str, int | str]:
        return {
            "appid": self.app_id,
            "contextid": str(self.context_id),
            "amount": self.amount,
            "assetid": str(self.asset_id),
        }


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class InventorySnapshot:
    """
    Point-in-time capture of user inventory within single app+context.
    Immutable, not refreshed.
    """

    owner_id: int
    app_context: AppContext

    assets: tuple[Asset, ...] = ()
    descriptions: tuple[ItemDescription, ...] = ()

    total_count: int = 0
    last_assetid: int | None = None  # for pagination
    more_items: bool = False

    _descriptions_map: dict[tuple[int, int], ItemDescription] = field(init=False, repr=False, default=None)

    def __post_init__(self):
        object.__setattr__(self, "_descriptions_map", {d.key: d for d in self.descriptions})

    def __len__(self):
        return len(self.assets)

    def get_description(self, class_id: int, instance_id: int) -> ItemDescription | None:
        return self._descriptions_map.get((class_id, instance_id))

    def get_assets(self, description: ItemDescription) -> list[Asset]:
        """All assets of the description, snapshot order"""
        return [a for a in self.assets if a.key == description.key]

    def find_by_name(self, query: str) -> ItemDescription | None:
        """
        First description which `market_name` contains `query`. Case-sensitive.

        .. note:: Order of descriptions is the order from `Steam` response, which may differ between fetches,
            so ambiguous query returns any of matching descriptions
        """

        return next((d for d in self.descriptions if query in d.market_name), None)

    def filter_by_tag(self, category: str, value: str) -> list[ItemDescription]:
        """
        Descriptions with tag of `category` and `localized_tag_name` equal to `value`, snapshot order.

        .. seealso:: `aiosteamtrade.constants.CS2_TAG_VALUES`
        """

        return [d for d in self.descriptions if d.has_tag(category, value)]

    def resolve(self, descriptions: Iterable[ItemDescription]) -> list[TradeOfferAsset]:
        """
        Resolve descriptions to trade offer assets. Each physical asset matching a description
        is returned once, even if description passed multiple times.
        """

        seen: set[int] = set()
        result = []
        for descr in descriptions:
            for asset in self.assets:
                if asset.asset_id in seen or asset.key != descr.key:
                    continue

                result.append(TradeOfferAsset.from_asset(asset))
                seen.add(asset.asset_id)

        return result


def resolve_trade_assets(snapshot: InventorySnapshot, descriptions: Iterable[ItemDescription]) -> list[TradeOfferAsset]:
    """Shorthand for `snapshot.resolve(descriptions)`"""

    return snapshot.resolve(descriptions)


class RSAKeyMaterial(NamedTuple):
    modulus: str  # hex
    exponent: str  # hex
    timestamp: str  # correlates login request with the key
    token_gid: str | None = None


@dataclass(slots=True, frozen=True)
class AccountIdentity:
    """Result of successful login. Replaced, not mutated, on next login."""

    steam_id: int
    logged_in: bool
    token_secure: str = field(repr=False)
    auth: str = field(repr=False)
    webcookie: str = field(repr=False)

    @property
    def cookie(self) -> str:
        """Authentication `Cookie` header value"""

        return (
            f"steamLoginSecure={self.steam_id}%7C%7C{self.token_secure}; "
            f"steamMachineAuth{self.steam_id}={self.webcookie}"
        )


@dataclass(slots=True, frozen=True)
class SubmissionResult:
    offer_id: int
    needs_mobile_confirmation: bool = False
    needs_email_confirmation: bool = False
    email_domain: str | None = None
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def needs_confirmation(self) -> bool:
        return self.needs_mobile_confirmation or self.needs_email_confirmation
