"""HTTP client for the Google Geocoding API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from ...config import settings
from ...errors import GeocodingError
from ..geospatial import validate_coordinates

logger = logging.getLogger(__name__)

# Statuses worth retrying; everything else non-OK is a definitive answer.
RETRYABLE_STATUSES = {"OVER_QUERY_LIMIT", "UNKNOWN_ERROR"}


@dataclass(slots=True)
class GeocodeResult:
    lat: float
    lng: float
    formatted_address: str | None = None


class GeocodingClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        region: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.geocoding_api_key
        if not self.api_key:
            raise ValueError("Geocoding API key is not configured.")
        self.base_url = base_url or settings.geocoding_base_url
        self.region = region if region is not None else settings.geocoding_region
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoding_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.geocoding_backoff_seconds
        )
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self.transport,
        )

    def _wait(self, attempt: int, reason: str) -> None:
        wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        logger.warning(f"Geocoding {reason}, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
        time.sleep(wait_time)

    def geocode(self, address: str) -> GeocodeResult:
        """Resolve a free-text address to coordinates.

        Raises:
            GeocodingError: If the provider has no match or keeps failing.
        """
        query = (address or "").strip()
        if not query:
            raise GeocodingError("Address must not be empty.")

        params = {"address": query, "key": self.api_key}
        if self.region:
            params["region"] = self.region

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(self.base_url, params=params)
                    response.raise_for_status()
                    data = response.json()
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise GeocodingError(
                            f"Could not geocode address '{query}': provider returned HTTP {e.response.status_code}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(f"Could not geocode address '{query}': {e}") from e
                    self._wait(attempt, f"server error {e.response.status_code}")
                    continue
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"Could not geocode address '{query}': geocoding service unreachable ({e})"
                        ) from e
                    self._wait(attempt, "request failed")
                    continue
                except ValueError as e:
                    raise GeocodingError(f"Could not geocode address '{query}': invalid response") from e

                status = data.get("status")
                if status == "OK" and data.get("results"):
                    return self._parse_result(query, data["results"][0])
                if status in RETRYABLE_STATUSES:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(f"Could not geocode address '{query}': {status}")
                    self._wait(attempt, f"status {status}")
                    continue
                message = data.get("error_message") or status or "no results"
                raise GeocodingError(f"Could not geocode address '{query}': {message}")
        finally:
            client.close()

    def _parse_result(self, query: str, result: dict) -> GeocodeResult:
        try:
            location = result["geometry"]["location"]
            lat, lng = float(location["lat"]), float(location["lng"])
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Could not geocode address '{query}': malformed result") from e
        try:
            validate_coordinates(lat, lng, label=query)
        except ValueError as e:
            raise GeocodingError(f"Could not geocode address '{query}': {e}") from e
        return GeocodeResult(lat=lat, lng=lng, formatted_address=result.get("formatted_address"))


def check_health(api_key: str | None = None, base_url: str | None = None) -> bool:
    """Return True when the geocoding endpoint is configured and answers."""
    key = api_key or settings.geocoding_api_key
    if not key:
        return False
    try:
        response = httpx.get(
            base_url or settings.geocoding_base_url,
            params={"address": "1600 Amphitheatre Parkway, Mountain View, CA", "key": key},
            timeout=5.0,
        )
        response.raise_for_status()
        return response.json().get("status") == "OK"
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
