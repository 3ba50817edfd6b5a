"""Spot price lookup against a CoinGecko-style ``simple/price`` endpoint."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from chat_relay._exceptions import PriceFetchError
from chat_relay.config import DEFAULT_PRICE_API_URL

logger = logging.getLogger(__name__)


class PriceClient:
    """Fetches USD prices; the HTTP client is created on first use and reused."""

    def __init__(
        self,
        base_url: str = DEFAULT_PRICE_API_URL,
        *,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def get_price(self, coin: str) -> dict[str, Any]:
        """Return the raw ``{coin: {"usd": price}}`` mapping for *coin*.

        The coin id is passed through as given; an id the index does not know
        yields an empty mapping rather than an error.
        """
        params = {"ids": coin, "vs_currencies": "usd"}
        try:
            response = await self._get_client().get(self.base_url, params=params)
        except httpx.HTTPError as exc:
            raise PriceFetchError(coin, f"request failed ({exc.__class__.__name__})") from exc

        if not response.is_success:
            raise PriceFetchError(coin, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise PriceFetchError(coin, "response is not JSON") from exc

        if not isinstance(payload, dict):
            raise PriceFetchError(coin, "response is not a JSON object")

        logger.debug("Price payload for %s: %s", coin, payload)
        return payload

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def usd_price(payload: dict[str, Any], coin: str) -> Optional[float]:
    """Pick ``payload[coin]["usd"]`` out of a price payload, or None."""
    entry = payload.get(coin)
    if not isinstance(entry, dict):
        return None
    usd = entry.get("usd")
    if isinstance(usd, bool) or not isinstance(usd, (int, float)):
        return None
    return usd
