"""Helper functions to load credentials and create client from them."""

import os
from typing import NamedTuple

from dotenv import dotenv_values

__all__ = ("Credentials", "load_credentials", "client_from_env")

USERNAME_VAR = "STEAM_USERNAME"
PASSWORD_VAR = "STEAM_PASSWORD"
SHARED_SECRET_VAR = "STEAM_SHARED_SECRET"
COOKIE_VAR = "STEAM_COOKIE"


class Credentials(NamedTuple):
    username: str
    password: str
    shared_secret: str
    cookie: str | None = None

    def __repr__(self):
        return f"{type(self).__name__}(username={self.username!r})"


def load_credentials(env_file: str | os.PathLike = None) -> Credentials:
    """
    Load account credentials from `.env` file or environment variables.
    Environment variables take precedence over file values.
    `STEAM_COOKIE` is optional.

    :param env_file: path to `.env` file
    :raises ValueError: if required variable is missing or empty
    """

    values = {**(dotenv_values(env_file) if env_file is not None else {}), **os.environ}

    def required(name: str) -> str:
        if not (value := values.get(name)):
            raise ValueError(f"Environment variable {name} is missing or empty")
        return value

    return Credentials(
        username=required(USERNAME_VAR),
        password=required(PASSWORD_VAR),
        shared_secret=required(SHARED_SECRET_VAR),
        cookie=values.get(COOKIE_VAR) or None,
    )


def client_from_env(env_file: str | os.PathLike = None, **kwargs):
    """Create `SteamClient` from loaded credentials, `kwargs` passed to client constructor."""

    from .client import SteamClient

    creds = load_credentials(env_file)
    return SteamClient(creds.username, creds.password, creds.shared_secret, cookie=creds.cookie, **kwargs)
