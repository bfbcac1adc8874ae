"""TriMet v2 arrivals API client."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import requests

TRIMET_API_BASE = "https://developer.trimet.org/ws/v2"


class TriMetClientError(Exception):
    """Raised when a TriMet API request fails or returns a non-200 response."""


class TriMetClient:
    """Thin wrapper around the TriMet arrivals endpoint using requests."""

    def __init__(
        self,
        app_id: str,
        base_url: str = TRIMET_API_BASE,
        timeout_seconds: float = 10,
    ) -> None:
        self._app_id = app_id
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def get_arrivals(
        self,
        stop_ids: Sequence[int],
        minutes: int = 60,
        arrivals: int = 20,
    ) -> dict[str, Any]:
        """Fetch arrivals for the given stops; returns the raw JSON body."""
        if not stop_ids:
            raise ValueError("At least one stop ID is required")
        params = {
            "appID": self._app_id,
            "locIDs": ",".join(str(stop_id) for stop_id in stop_ids),
            "showPosition": "true",
            "minutes": minutes,
            "arrivals": arrivals,
        }
        return self._get("/arrivals", params=params)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = requests.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise TriMetClientError(f"TriMet API request failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise TriMetClientError(f"TriMet API request failed: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise TriMetClientError("TriMet API response was not valid JSON") from exc


__all__ = ["TRIMET_API_BASE", "TriMetClient", "TriMetClientError"]
