"""Abstract utils within `Steam` context and not"""

from base64 import b64decode, b64encode, b32decode
from binascii import Error as BinasciiError
from struct import pack, unpack
from time import time as time_time
from hmac import new as hmac_new
from hashlib import sha1
from functools import partial
from secrets import token_hex
from typing import TYPE_CHECKING

from aiohttp import ClientSession
from rsa import PublicKey, encrypt
from yarl import URL

from .constants import STEAM_ID64_BASE
from .exceptions import InvalidSecretError

if TYPE_CHECKING:
    from .models import RSAKeyMaterial

__all__ = (
    "gen_two_factor_code",
    "gen_one_time_code",
    "encrypt_password",
    "generate_session_id",
    "create_ident_code",
    "account_id_to_steam_id",
    "steam_id_to_account_id",
    "to_steam_id64",
    "compose_cookie",
    "patch_session_with_http_proxy",
)

ACCOUNT_ID_MAX = 2**32
STEAM_GUARD_CHARS = "23456789BCDFGHJKMNPQRTVWXY"


def gen_two_factor_code(shared_secret: str | bytes, timestamp: int = None) -> str:
    """Generate `Steam Guard` mobile twofactor code from base64 encoded shared secret."""

    try:
        key = b64decode(shared_secret, validate=True)
    except (BinasciiError, ValueError) as e:
        raise InvalidSecretError("Shared secret is not a valid base64 string") from e

    if timestamp is None:
        timestamp = int(time_time())
    time_buffer = pack(">Q", timestamp // 30)  # pack as Big endian, uint64
    time_hmac = hmac_new(key, time_buffer, digestmod=sha1).digest()
    begin = ord(time_hmac[19:20]) & 0xF
    full_code = unpack(">I", time_hmac[begin : begin + 4])[0] & 0x7FFFFFFF  # unpack as Big endian uint32
    code = ""

    for _ in range(5):
        full_code, i = divmod(full_code, len(STEAM_GUARD_CHARS))
        code += STEAM_GUARD_CHARS[i]

    return code


def gen_one_time_code(secret: str, timestamp: int = None, *, digits=6, period=30) -> str:
    """
    Generate RFC 6238 time based one-time code from base32 encoded secret.
    Secret is case-insensitive, spaces and missing padding are allowed.

    :raises InvalidSecretError: if secret can't be decoded
    """

    normalized = secret.replace(" ", "").upper()
    if not normalized:
        raise InvalidSecretError("Secret is empty")
    normalized += "=" * (-len(normalized) % 8)

    try:
        key = b32decode(normalized)
    except (BinasciiError, ValueError) as e:
        raise InvalidSecretError("Secret is not a valid base32 string") from e

    if timestamp is None:
        timestamp = int(time_time())
    digest = hmac_new(key, pack(">Q", timestamp // period), digestmod=sha1).digest()
    offset = digest[-1] & 0xF
    full_code = unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF

    return str(full_code % 10**digits).zfill(digits)


def encrypt_password(material: "RSAKeyMaterial", password: str) -> str:
    """
    Encrypt password with `Steam` public key (PKCS#1 v1.5), return base64 string.
    Padding is random, so result differs on each call.
    """

    # hex strings are big-endian unsigned integers
    pub_key = PublicKey(int(material.modulus, 16), int(material.exponent, 16))
    return b64encode(encrypt(password.encode("utf-8"), pub_key)).decode()


def generate_session_id() -> str:
    """Generate steam like session id from cryptographically strong random source."""

    return token_hex(12)


def create_ident_code(*args, sep=":") -> str:
    """
    Create unique ident code for asset or item description within whole `Steam Economy`.
    Pass `(asset_id, context_id, app_id)` for asset and `(instance_id, class_id, app_id)` for description.

    .. seealso:: https://dev.doctormckay.com/topic/332-identifying-steam-items/
    """

    return sep.join(reversed(list(str(i) for i in filter(lambda i: i is not None, args))))


def account_id_to_steam_id(account_id: int) -> int:
    """Convert account id (id32, `partner` param of trade url) to steam id64."""

    if not 0 <= account_id < ACCOUNT_ID_MAX:
        raise ValueError(f"Account id must be non-negative 32-bit integer, got {account_id}")

    return account_id + STEAM_ID64_BASE


def steam_id_to_account_id(steam_id: int) -> int:
    """Convert steam id64 to account id (id32)."""

    return steam_id & 0xFFFFFFFF


def to_steam_id64(obj: int) -> int:
    """Steam id64 from account id (id32) or steam id64."""

    return account_id_to_steam_id(obj) if obj < ACCOUNT_ID_MAX else obj


def compose_cookie(cookie: str, session_id: str) -> str:
    """Append `sessionid` to `Cookie` header value."""

    cookie = cookie.strip()
    if cookie and not cookie.endswith(";"):
        cookie += ";"

    return f"{cookie} sessionid={session_id};" if cookie else f"sessionid={session_id};"


def patch_session_with_http_proxy(session: ClientSession, proxy: str | URL) -> ClientSession:
    """Patch `aiohttp.ClientSession` to make all requests go through web proxy"""

    session._request = partial(session._request, proxy=proxy)
    return session
