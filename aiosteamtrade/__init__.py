"""
Login to steam community, index inventories and send trade offers.
"""

from .exceptions import (
    SteamError,
    NetworkError,
    ProtocolError,
    AuthenticationError,
    StatusError,
    RateLimitedError,
    ForbiddenError,
    UnexpectedStatusError,
    MalformedUrlError,
    InvalidSecretError,
    DuplicateAssetError,
)
from .constants import App, AppContext, STEAM_URL, TradeOfferState, TagCategory, CS2_TAG_VALUES
from .client import SteamClient, SteamPublicClient
from .models import (
    ItemDescription,
    ItemTag,
    DescriptionList,
    DescriptionText,
    Asset,
    InventorySnapshot,
    TradeOfferAsset,
    SubmissionResult,
    AccountIdentity,
    RSAKeyMaterial,
    resolve_trade_assets,
)
from .trade import TradeOffer
from .helpers import load_credentials, client_from_env
