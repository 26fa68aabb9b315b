import logging

from ..constants import RSA_KEY_PATH, DO_LOGIN_PATH, LOGIN_FRIENDLY_NAME, JSON_HEADERS
from ..exceptions import AuthenticationError, ProtocolError
from ..models import RSAKeyMaterial, AccountIdentity
from ..typed import LoginResponse, RSAKeyResponse
from ..utils import encrypt_password
from .guard import SteamGuardMixin

logger = logging.getLogger(__name__)


class LoginMixin(SteamGuardMixin):
    """
    Mixin with login logic methods.
    Depends on `SteamGuardMixin`.
    """

    __slots__ = ()

    # required instance attributes
    username: str
    _password: str
    identity: AccountIdentity | None
    _cookie: str | None  # pre-authenticated cookie header value
    _steam_id: int | None  # owner of pre-authenticated cookie

    @property
    def steam_id(self) -> int | None:
        return self.identity.steam_id if self.identity else self._steam_id

    @property
    def cookie(self) -> str | None:
        """Authentication `Cookie` header value: from last login or passed to client"""

        return self.identity.cookie if self.identity else self._cookie

    @property
    def is_logged(self) -> bool:
        return bool(self.identity and self.identity.logged_in) or bool(self._cookie)

    async def get_rsa_key(self, username: str = None) -> RSAKeyMaterial:
        """
        Fetch public key material to encrypt password with.

        :param username: account name, client `username` by default
        :raises ProtocolError: if Steam refused to give a key or response is malformed
        :raises NetworkError:
        """

        rj: RSAKeyResponse = await self._request_json(
            "GET",
            self.community_url / RSA_KEY_PATH,
            params={"username": username or self.username},
            headers=JSON_HEADERS,
            what="Get rsa key",
        )

        if not rj.get("success"):
            raise ProtocolError("Could not obtain rsa key", rj)

        try:
            material = RSAKeyMaterial(
                modulus=rj["publickey_mod"],
                exponent=rj["publickey_exp"],
                timestamp=str(rj["timestamp"]),
                token_gid=rj.get("token_gid"),
            )
            # validate hex now, before credentials sent anywhere
            int(material.modulus, 16), int(material.exponent, 16)
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError("Malformed rsa key response", rj) from e

        return material

    async def login(self) -> AccountIdentity:
        """
        Perform login to `Steam Community` with username, password and one-time code.
        Result identity stored to client and returned.

        :raises AuthenticationError: credentials or one-time code rejected
        :raises ProtocolError: malformed Steam responses
        :raises NetworkError:
        """

        material = await self.get_rsa_key()
        data = {
            "username": self.username,
            "password": encrypt_password(material, self._password),
            "twofactorcode": self.two_factor_code,
            "rsatimestamp": material.timestamp,
            "remember_login": "false",
            "emailauth": "",
            "emailsteamid": "",
            "loginfriendlyname": LOGIN_FRIENDLY_NAME,
            "captcha_text": "",
            "captchagid": "",
        }

        logger.debug("Logging in as %s", self.username)
        rj: LoginResponse = await self._request_json(
            "POST",
            self.community_url / DO_LOGIN_PATH,
            data=data,
            headers=JSON_HEADERS,
            what="Login",
        )

        self.identity = self._parse_login_response(rj)
        logger.info("Logged in, steam id %d", self.identity.steam_id)
        return self.identity

    @staticmethod
    def _parse_login_response(rj: LoginResponse) -> AccountIdentity:
        if rj.get("requires_twofactor") and not rj.get("login_complete"):
            raise AuthenticationError("One-time code rejected or required", rj)
        if not rj.get("login_complete") or ("success" in rj and not rj["success"]):
            raise AuthenticationError(rj.get("message") or "Login is not complete", rj)

        params = rj.get("transfer_parameters")
        try:
            return AccountIdentity(
                steam_id=int(params["steamid"]),
                logged_in=True,
                token_secure=params["token_secure"],
                auth=params["auth"],
                webcookie=params["webcookie"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError("Malformed transfer parameters in login response", rj) from e
