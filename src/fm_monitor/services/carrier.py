"""HTTP client for the FM Transportes tracking API.

The carrier is advisory for this service: every failure mode (timeouts,
non-2xx responses, ``success: false`` bodies, malformed JSON) surfaces as a
``TransientCarrierError`` for the caller to log and absorb.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from fm_monitor.core.settings import Settings, settings
from fm_monitor.schemas.carrier import CarrierTrackingEvent, CarrierTrackingResponse

# Configure logger for this module
logger = logging.getLogger(__name__)

TRACKING_PATH = "/v1/tracking"
QUOTE_PATH = "/v1/quote"

# Connectivity probe: a minimal quote to a São Paulo ZIP code.
_QUOTE_PROBE: dict[str, Any] = {
    "zipCodeDestination": 1310100,
    "totalValue": 100,
    "totalWeight": 0.5,
    "volumes": [{"length": 30, "height": 20, "width": 15}],
}


class CarrierError(RuntimeError):
    """Base exception raised for carrier-related failures."""


class TransientCarrierError(CarrierError):
    """The carrier did not deliver usable data this time; retry on a later cycle."""


@dataclass(frozen=True)
class CarrierConfig:
    """Immutable configuration for carrier operations."""

    base_url: str
    username: str
    password: str
    client_document: str
    timeout_seconds: float = 30.0


def load_carrier_config(source: Settings | None = None) -> CarrierConfig:
    """Build configuration object from application settings."""

    source = source or settings
    return CarrierConfig(
        base_url=source.fm_api_url,
        username=source.fm_api_user,
        password=source.fm_api_password,
        client_document=source.fm_client_document,
        timeout_seconds=float(source.fm_tracking_timeout_seconds),
    )


class CarrierClient:
    """HTTP client wrapper for FM Transportes tracking calls."""

    def __init__(
        self,
        config: CarrierConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_carrier_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    auth=httpx.BasicAuth(self.config.username, self.config.password),
                    headers={"Content-Type": "application/json"},
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
                logger.info("Carrier client initialized for %s", self.config.base_url)
        return self._client

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        client = await self._ensure_client()
        try:
            response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise TransientCarrierError(f"Carrier request to {path} failed: {exc}") from exc

        if not response.is_success:
            raise TransientCarrierError(
                f"Carrier responded with {response.status_code} for {path}",
            )
        return response

    async def fetch_tracking(self, tracking_code: str | None = None) -> list[CarrierTrackingEvent]:
        """Return the carrier's event history for one shipment or the whole account.

        Raises:
            TransientCarrierError: on transport errors, non-2xx responses,
                unparseable bodies or an explicit ``success: false``.
        """
        payload: dict[str, Any] = {"clientDocument": self.config.client_document}
        if tracking_code:
            payload["trackingCode"] = tracking_code

        response = await self._post(TRACKING_PATH, payload)

        try:
            body = CarrierTrackingResponse.model_validate(response.json())
        except ValueError as exc:
            raise TransientCarrierError(f"Malformed tracking response: {exc}") from exc

        if not body.success:
            raise TransientCarrierError(body.message or "Carrier reported a tracking failure")

        return body.data or []

    async def health_check(self) -> dict[str, Any]:
        """Probe the carrier with a minimal quote request.

        Returns:
            Dictionary with ``status`` (``ok`` or ``error``) and the base URL.
        """
        payload = {"clientDocument": self.config.client_document, **_QUOTE_PROBE}
        try:
            response = await self._post(QUOTE_PATH, payload)
            ok = response.json().get("success") is True
        except (CarrierError, ValueError, AttributeError) as exc:
            logger.error("FM Transportes unavailable: %s", exc)
            return {"status": "error", "url": self.config.base_url, "error": str(exc)}

        return {"status": "ok" if ok else "error", "url": self.config.base_url}

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _CarrierClientSingleton:
    """Singleton wrapper for CarrierClient."""

    _instance: CarrierClient | None = None

    @classmethod
    def get_instance(cls) -> CarrierClient:
        """Get or create the singleton CarrierClient instance."""
        if cls._instance is None:
            cls._instance = CarrierClient()
        return cls._instance


def get_carrier_client() -> CarrierClient:
    """Return a singleton carrier client instance."""
    return _CarrierClientSingleton.get_instance()
