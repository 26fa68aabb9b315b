from typing import Literal, TypeAlias

from ..utils import gen_one_time_code, gen_two_factor_code, steam_id_to_account_id
from .http import SteamHTTPTransportMixin

T_CODE_FORMAT: TypeAlias = Literal["totp", "steam"]


class SteamGuardMixin(SteamHTTPTransportMixin):
    """
    Mixin with Steam Guard related methods.
    Depends on `SteamHTTPTransportMixin`.
    """

    __slots__ = ()

    # required instance attributes
    steam_id: int | None
    _shared_secret: str
    guard_code_format: T_CODE_FORMAT

    @property
    def account_id(self) -> int | None:
        """Steam id32."""
        return steam_id_to_account_id(self.steam_id) if self.steam_id else None

    @property
    def two_factor_code(self) -> str:
        """
        Generate one-time code for login.
        `totp` format is RFC 6238 code from base32 secret,
        `steam` format is `Steam Guard` mobile code from base64 shared secret.

        :raises InvalidSecretError: if secret can't be decoded
        """

        if self.guard_code_format == "steam":
            return gen_two_factor_code(self._shared_secret)
        return gen_one_time_code(self._shared_secret)
