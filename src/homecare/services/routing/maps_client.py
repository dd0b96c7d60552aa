"""HTTP client for the directions (mapping) service."""

from __future__ import annotations

import logging
import time

import httpx

from ...config import settings
from .models import DirectionsResult, TravelMode

logger = logging.getLogger(__name__)

_MODE_PARAMS: dict[str, str] = {
    "DRIVING": "driving",
    "WALKING": "walking",
    "TRANSIT": "transit",
}


class MapsClient:
    """Requests door-to-door duration and distance between two postal addresses.

    Each call is bounded by ``timeout`` seconds in total, retries included, so
    one slow leg cannot stall a whole route.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        language: str | None = None,
    ) -> None:
        self.api_key = api_key or settings.maps_api_key
        if not self.api_key:
            raise ValueError("Mapping service API key is not configured.")
        self.base_url = base_url or settings.maps_base_url
        self.timeout = timeout if timeout is not None else settings.maps_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.maps_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.maps_backoff_seconds
        self.language = language or settings.maps_language

    def _get_client(self, remaining: float) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(remaining, connect=min(remaining, 5.0)))

    @staticmethod
    def _parse(data: dict) -> DirectionsResult:
        status = str(data.get("status") or "UNKNOWN_ERROR")
        if status != "OK":
            return DirectionsResult(status=status, error_message=data.get("error_message") or status)
        try:
            leg = data["routes"][0]["legs"][0]
            return DirectionsResult(
                status="OK",
                duration=int(leg["duration"]["value"]),
                distance=int(leg["distance"]["value"]),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ValueError(f"Directions response missing duration/distance: {e}") from e

    def directions(self, origin: str, destination: str, travel_mode: TravelMode = "DRIVING") -> DirectionsResult:
        """Return the service's answer for one leg.

        Raises:
            ValueError: malformed response body.
            ConnectionError: service unreachable after retries.
            TimeoutError: the leg's time budget ran out.
        """
        if not origin.strip() or not destination.strip():
            raise ValueError("Origin and destination addresses are required.")
        if travel_mode not in _MODE_PARAMS:
            raise ValueError(f"Unsupported travel mode '{travel_mode}'")

        params = {
            "origin": origin,
            "destination": destination,
            "mode": _MODE_PARAMS[travel_mode],
            "alternatives": "false",
            "language": self.language,
            "key": self.api_key,
        }
        deadline = time.monotonic() + self.timeout
        attempt = 0
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"Directions request exceeded {self.timeout:.0f}s")
            client = self._get_client(remaining)
            try:
                response = client.get(self.base_url, params=params)
                response.raise_for_status()
                return self._parse(response.json())
            except httpx.HTTPStatusError:
                attempt += 1
                if attempt > self.max_retries:
                    raise
                time.sleep(min(self.backoff_seconds * attempt, max(deadline - time.monotonic(), 0)))
            except httpx.TimeoutException as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise TimeoutError(f"Directions request timed out: {e}") from e
                logger.debug(f"Directions request timeout, retrying (attempt {attempt}/{self.max_retries})")
            except (httpx.ConnectError, httpx.NetworkError) as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise ConnectionError(f"Failed to connect to directions service: {e}") from e
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"Directions network error, retrying in {wait_time:.1f}s: {e}")
                time.sleep(min(wait_time, max(deadline - time.monotonic(), 0)))
            finally:
                client.close()


def check_health(api_key: str | None = None) -> bool:
    """Check that the directions service answers a minimal request."""
    key = api_key or settings.maps_api_key
    if not key:
        return False
    try:
        client = MapsClient(api_key=key, max_retries=0, timeout=5.0)
        result = client.directions(
            f"{settings.default_city}, {settings.default_country}",
            f"{settings.default_city}, {settings.default_country}",
        )
        return result.status in ("OK", "ZERO_RESULTS")
    except (ValueError, ConnectionError, TimeoutError, httpx.HTTPError):
        return False
