"""Fake `Steam Community` served locally and clients pointed to it."""

import asyncio
from base64 import b64decode

import pytest
import pytest_asyncio
import rsa
from aiohttp import web
from aiohttp.test_utils import TestServer
from yarl import URL

from aiosteamtrade import SteamClient, SteamPublicClient

from data import (
    USERNAME,
    PASSWORD,
    MOCK_TOTP_SECRET,
    LOGIN_SUCCESS,
    INVENTORY_PAGE,
    LEGACY_INVENTORY,
    SEND_OFFER_SUCCESS,
)

T_RESPONSE = tuple[int, dict | str | bytes]  # status, json object, raw text or raw bytes


class FakeSteam:
    """Routes of `Steam Community` used by library. Responses are configurable, requests are recorded."""

    def __init__(self, public_key: rsa.PublicKey, private_key: rsa.PrivateKey):
        self.public_key = public_key
        self.private_key = private_key

        self.rsa_key: T_RESPONSE = (
            200,
            {
                "success": True,
                "publickey_mod": format(public_key.n, "x"),
                "publickey_exp": format(public_key.e, "x"),
                "timestamp": "465512250000",
                "token_gid": "2d6d5d6ee6a5b1b5",
            },
        )
        self.login: T_RESPONSE = (200, LOGIN_SUCCESS)
        self.inventory: T_RESPONSE = (200, INVENTORY_PAGE)
        self.inventory_pages: list[T_RESPONSE] | None = None  # consumed one by one if set
        self.legacy_inventory: T_RESPONSE = (200, LEGACY_INVENTORY)
        self.send_offer: T_RESPONSE = (200, SEND_OFFER_SUCCESS)
        self.send_offer_delay = 0.0  # seconds

        self.requests: list[dict] = []
        self.url: URL | None = None

    def decrypt_password(self, encrypted: str) -> str:
        return rsa.decrypt(b64decode(encrypted), self.private_key).decode("utf-8")

    @staticmethod
    def _respond(response: T_RESPONSE) -> web.Response:
        status, body = response
        if isinstance(body, bytes):
            return web.Response(body=body, status=status, content_type="application/json")
        if isinstance(body, str):
            return web.Response(text=body, status=status)
        return web.json_response(body, status=status)

    async def _record(self, request: web.Request, route: str) -> dict:
        record = {
            "route": route,
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "headers": dict(request.headers),
            "form": dict(await request.post()) if request.method == "POST" else {},
        }
        self.requests.append(record)
        return record

    def last(self, route: str) -> dict:
        return next(r for r in reversed(self.requests) if r["route"] == route)

    async def handle_rsa_key(self, request: web.Request) -> web.Response:
        await self._record(request, "rsa_key")
        return self._respond(self.rsa_key)

    async def handle_login(self, request: web.Request) -> web.Response:
        await self._record(request, "login")
        return self._respond(self.login)

    async def handle_inventory(self, request: web.Request) -> web.Response:
        await self._record(request, "inventory")
        if self.inventory_pages is not None:
            return self._respond(self.inventory_pages.pop(0))
        return self._respond(self.inventory)

    async def handle_legacy_inventory(self, request: web.Request) -> web.Response:
        await self._record(request, "legacy_inventory")
        return self._respond(self.legacy_inventory)

    async def handle_send_offer(self, request: web.Request) -> web.Response:
        await self._record(request, "send_offer")
        if self.send_offer_delay:
            await asyncio.sleep(self.send_offer_delay)
        return self._respond(self.send_offer)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/login/getrsakey/", self.handle_rsa_key)
        app.router.add_post("/login/dologin/", self.handle_login)
        app.router.add_get("/inventory/{steam_id}/{app_id}/{context_id}", self.handle_inventory)
        app.router.add_get("/profiles/{steam_id}/inventory/json/{app_id}/{context_id}/", self.handle_legacy_inventory)
        app.router.add_post("/tradeoffer/new/send", self.handle_send_offer)
        return app


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[rsa.PublicKey, rsa.PrivateKey]:
    return rsa.newkeys(512)


@pytest_asyncio.fixture
async def steam(rsa_keys) -> FakeSteam:
    fake = FakeSteam(*rsa_keys)
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.url = server.make_url("/")

    yield fake

    await server.close()


@pytest_asyncio.fixture
async def client(steam) -> SteamClient:
    client = SteamClient(USERNAME, PASSWORD, MOCK_TOTP_SECRET, community_url=steam.url)

    yield client

    await client.session.close()


@pytest_asyncio.fixture
async def public_client(steam) -> SteamPublicClient:
    client = SteamPublicClient(community_url=steam.url)

    yield client

    await client.session.close()
