"""Constants and enums, some types"""

from sys import version_info
from typing import TypeAlias, Mapping
from enum import Enum, IntEnum

from yarl import URL
from aenum import extend_enum


if version_info < (3, 11):

    class StrEnum(str, Enum):
        """Enum with possibility to be a query param serializable"""

        def __str__(self):
            return self.value

else:
    from enum import StrEnum


class App(IntEnum):
    """App enum. Add new member, when missing"""

    # predefined
    CS2 = 730
    CSGO = CS2  # alias

    DOTA2 = 570
    RUST = 252490
    TF2 = 440

    STEAM = 753

    @classmethod
    def extend(cls, name: str, value: int) -> "App":
        return extend_enum(cls, name, value)

    @classmethod
    def _missing_(cls, value: int):
        return cls.extend(f"{cls.__name__}_{value}", value)  # add new member when missing


class AppContext(Enum):
    """
    Combination of `App` and context id (sub-inventory of the app)

    .. seealso:: https://dev.doctormckay.com/topic/332-identifying-steam-items/
    """

    # predefined
    CS2 = App.CS2, 2
    CSGO = CS2  # alias

    DOTA2 = App.DOTA2, 2
    RUST = App.RUST, 2
    TF2 = App.TF2, 2

    STEAM_COMMUNITY = App.STEAM, 6

    @classmethod
    def extend(cls, name: str, value: tuple[App | int, int]) -> "AppContext":
        return extend_enum(cls, name, (App(value[0]), value[1]))

    @classmethod
    def _missing_(cls, value: tuple[App | int, int]):
        with_enum = (App(value[0]), int(value[1]))
        return cls.extend(f"{cls.__name__}_{with_enum[0].value}_{with_enum[1]}", with_enum)

    @property
    def app(self) -> App:
        return self.value[0]

    @property
    def app_id(self) -> int:
        return self.value[0].value

    @property
    def context(self) -> int:
        return self.value[1]


class TradeOfferState(Enum):
    """Lifecycle of locally built trade offer"""

    DRAFT = 1
    SUBMITTING = 2
    SUBMITTED = 3  # terminal
    FAILED = 4  # terminal


class STEAM_URL:
    COMMUNITY = URL("https://steamcommunity.com")  # default, client can be pointed to another base
    STATIC = URL("https://community.akamai.steamstatic.com")


# relative to community url
RSA_KEY_PATH = "login/getrsakey/"
DO_LOGIN_PATH = "login/dologin/"
INVENTORY_PATH = "inventory"
LEGACY_INVENTORY_PATH = "profiles"
NEW_TRADE_OFFER_PATH = "tradeoffer/new/"

# account id (id32) + this = steam id64 of individual account in public universe
# 1 << 56 | 1 << 52 | 1 << 32
STEAM_ID64_BASE = 76561197960265728

LOGIN_FRIENDLY_NAME = "aiosteamtrade"

JSON_HEADERS = {"Accept": "application/json"}


class TagCategory(StrEnum):
    """`category` field of item tags"""

    TYPE = "Type"
    WEAPON = "Weapon"
    QUALITY = "Quality"
    RARITY = "Rarity"
    EXTERIOR = "Exterior"


# localized tag names of CS2 items (english), just data for `InventorySnapshot.filter_by_tag`
CS2_TAG_VALUES: Mapping[TagCategory, tuple[str, ...]] = {
    TagCategory.RARITY: (
        "Consumer Grade",
        "Industrial Grade",
        "Mil-Spec Grade",
        "Restricted",
        "Classified",
        "Covert",
        "Contraband",
        "Base Grade",
        "Distinguished",
        "Exceptional",
        "Superior",
        "Extraordinary",
        "Master",
        "High Grade",
        "Remarkable",
        "Exotic",
    ),
    TagCategory.QUALITY: ("Normal", "Souvenir", "StatTrak™", "★", "★ StatTrak™"),
    TagCategory.EXTERIOR: (
        "Factory New",
        "Minimal Wear",
        "Field-Tested",
        "Well-Worn",
        "Battle-Scarred",
        "Not Painted",
    ),
    TagCategory.TYPE: (
        "Pistol",
        "SMG",
        "Rifle",
        "Sniper Rifle",
        "Shotgun",
        "Machinegun",
        "Agent",
        "Container",
        "Knife",
        "Sticker",
        "Gloves",
        "Graffiti",
        "Music Kit",
        "Patch",
        "Collectible",
        "Key",
        "Pass",
        "Gift",
        "Tag",
        "Tool",
    ),
}


T_PARAMS: TypeAlias = Mapping[str, int | str | float]
T_PAYLOAD: TypeAlias = Mapping[str, str | int | float | bool | None | list | Mapping]
T_HEADERS: TypeAlias = Mapping[str, str]
