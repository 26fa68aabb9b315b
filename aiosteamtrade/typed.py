"""Typed dicts for responses and methods."""

from typing import TypedDict


class SteamObjectResponse(TypedDict, total=False):
    success: bool | int
    message: str  # optional, exists if success is false


class RSAKeyResponse(SteamObjectResponse):
    publickey_mod: str
    publickey_exp: str
    timestamp: str
    token_gid: str


class TransferParameters(TypedDict, total=False):
    steamid: str
    token_secure: str
    auth: str
    remember_login: bool
    webcookie: str


class LoginResponse(SteamObjectResponse):
    requires_twofactor: bool
    login_complete: bool
    captcha_needed: bool
    emailauth_needed: bool
    transfer_urls: list[str]
    transfer_parameters: TransferParameters


class JsonTradeOfferAsset(TypedDict):
    appid: int
    contextid: str
    amount: int
    assetid: str


class JsonTradeOfferSide(TypedDict):
    assets: list[JsonTradeOfferAsset]
    currency: list
    ready: bool


class JsonTradeOffer(TypedDict):
    newversion: bool
    version: int
    me: JsonTradeOfferSide
    them: JsonTradeOfferSide


class TradeOfferCreateParams(TypedDict, total=False):
    trade_offer_access_token: str


class SendTradeOfferResponse(TypedDict, total=False):
    tradeofferid: str
    needs_mobile_confirmation: bool
    needs_email_confirmation: bool
    email_domain: str
    strError: str
