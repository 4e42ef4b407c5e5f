import asyncio

import aiohttp
from aiohttp_socks import ProxyConnectionError, ProxyConnector, ProxyError, ProxyTimeoutError

from config import API_BASE_URL, REQUEST_TIMEOUT
from errors import NetworkError

HEADERS = {
    "accept": "application/json, text/plain, */*",
    "content-type": "application/json",
    "user-agent": "Mozilla/5.0 (compatible)",
    "Referer": "https://earn.taker.xyz/",
}

SOCKS_SCHEMES = ("socks4://", "socks4a://", "socks5://", "socks5h://")

TRANSPORT_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ProxyError,
    ProxyConnectionError,
    ProxyTimeoutError,
)


def normalize_proxy(proxy: str) -> str:
    if proxy and "://" not in proxy:
        return "http://" + proxy
    return proxy


def is_socks(proxy: str) -> bool:
    return bool(proxy) and proxy.lower().startswith(SOCKS_SCHEMES)


class ApiClient:
    """Thin transport over the mining API. One instance per wallet cycle.

    SOCKS proxies are tunnelled by the session's connector; HTTP(S) proxies
    are passed per request.
    """

    def __init__(self, proxy: str = None, base_url: str = API_BASE_URL):
        self.proxy = normalize_proxy(proxy) if proxy else None
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._session = None

    async def __aenter__(self):
        connector = ProxyConnector.from_url(self.proxy) if is_socks(self.proxy) else None
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
        )
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def get(self, path: str, token: str) -> dict:
        return await self._request("GET", path, token=token)

    async def post(self, path: str, body: dict, token: str = None) -> dict:
        return await self._request("POST", path, body=body, token=token)

    async def _request(self, method, path, body=None, token=None):
        if self._session is None:
            raise RuntimeError("ApiClient must be used as an async context manager")
        headers = dict(HEADERS)
        if token:
            headers["authorization"] = f"Bearer {token}"
        url = self.base_url + path.lstrip("/")
        http_proxy = None if is_socks(self.proxy) else self.proxy
        try:
            async with self._session.request(method, url, json=body, headers=headers, proxy=http_proxy) as resp:
                if resp.status >= 400:
                    text = await resp.text(errors="replace")
                    raise NetworkError(f"{method} {path} returned HTTP {resp.status}: {text[:200]}", resp.status)
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise NetworkError(f"{method} {path} returned a non-JSON body", resp.status) from e
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"{method} {path} failed: {e or type(e).__name__}") from e
