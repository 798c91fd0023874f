from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from loguru import logger

from .config import (
    BAN_BASE_URL,
    BAN_REVERSE_URL,
    HTTP_ACCEPT_LANGUAGE,
    HTTP_CONNECT_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
)
from .errors import GeocoderError, MalformedResponseError


class BanClient:
    """
    Thin client for the Base Adresse Nationale search and reverse endpoints.

    Every request:
      - carries the application User-Agent and Accept-Language: fr
      - asks intermediaries not to serve a cached answer
      - raises GeocoderError on network failure, non-2xx status or a body
        that is not JSON; the caller decides whether that is fatal
    """

    def __init__(
        self,
        base_url: str = BAN_BASE_URL,
        reverse_url: str = BAN_REVERSE_URL,
        user_agent: str = HTTP_USER_AGENT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url
        self.reverse_url = reverse_url
        self.headers = {
            "User-Agent": user_agent,
            "Accept-Language": HTTP_ACCEPT_LANGUAGE,
            "Cache-Control": "no-cache",
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        )

    # -----------------------
    # Lifecycle
    # -----------------------

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "BanClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -----------------------
    # Endpoints
    # -----------------------

    def search(
        self,
        query: str,
        limit: int,
        latitude: float,
        longitude: float,
        types: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        params: List[Tuple[str, str]] = [
            ("q", query),
            ("limit", str(limit)),
            ("autocomplete", "1"),
            ("lat", str(latitude)),
            ("lon", str(longitude)),
        ]
        for t in types or ():
            params.append(("type", t))
        return self._get_features(self.base_url, params)

    def reverse(
        self,
        latitude: float,
        longitude: float,
        postcode: Optional[str] = None,
        city: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: List[Tuple[str, str]] = [
            ("lat", str(latitude)),
            ("lon", str(longitude)),
            ("limit", "1"),
        ]
        if postcode:
            params.append(("postcode", postcode))
        if city:
            params.append(("city", city))
        return self._get_features(self.reverse_url, params)

    # -----------------------
    # Internals
    # -----------------------

    def _get_features(self, url: str, params: List[Tuple[str, str]]) -> List[Dict[str, Any]]:
        try:
            r = self._client.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as e:
            logger.warning("BAN request to {} failed: {}", url, e)
            raise GeocoderError(f"BAN request failed: {e}") from e

        if r.status_code < 200 or r.status_code >= 300:
            logger.warning("BAN request: HTTP {} for {}", r.status_code, url)
            raise GeocoderError(f"BAN answered HTTP {r.status_code}", status_code=r.status_code)

        try:
            payload = r.json()
        except ValueError as e:
            logger.warning("BAN response from {} is not JSON: {}", url, e)
            raise MalformedResponseError("BAN response is not valid JSON", status_code=r.status_code) from e

        features = payload.get("features") if isinstance(payload, dict) else None
        if not isinstance(features, list):
            return []
        return features
