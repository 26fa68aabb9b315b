class SteamError(Exception):
    """All errors related to Steam"""


class NetworkError(SteamError):
    """Raised when request to Steam failed on transport level (connection, timeout, etc.)"""


class ProtocolError(SteamError):
    """Raised when Steam response can't be parsed or does not match expected shape"""

    def __init__(self, msg: str, raw=None):
        self.msg = msg
        self.raw = raw  # raw body or decoded data, for diagnostics

    def __str__(self):
        return self.msg


class AuthenticationError(SteamError):
    """Raised when credentials or one-time code has been rejected by Steam"""

    def __init__(self, msg: str, data=None):
        self.msg = msg
        self.data = data

    def __str__(self):
        return self.msg


class StatusError(SteamError):
    """Base for errors of non-success HTTP statuses"""

    def __init__(self, msg: str, status: int, body: str | None = None):
        self.msg = msg
        self.status = status
        self.body = body

    def __str__(self):
        return f"{self.msg} [{self.status}]"


class RateLimitedError(StatusError):
    """Raised when Steam decided you were in need of a bit of a rest :)"""


class ForbiddenError(StatusError):
    """Raised on 403 status. Typically, cookie/login has been expired or resource is private"""


class UnexpectedStatusError(StatusError):
    """Raised on any other non-success status"""


class MalformedUrlError(SteamError, ValueError):
    """Raised when trade url does not contain required query params"""


class InvalidSecretError(SteamError, ValueError):
    """Raised when shared secret can't be decoded"""


class DuplicateAssetError(SteamError, ValueError):
    """Raised when asset is already present on the side of the trade offer"""

    def __init__(self, asset_id: int):
        self.asset_id = asset_id

    def __str__(self):
        return f"Asset {self.asset_id} is already in trade offer"
