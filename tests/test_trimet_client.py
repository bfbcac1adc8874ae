from __future__ import annotations

from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from transit_timer.data.trimet_client import TRIMET_API_BASE, TriMetClient, TriMetClientError


@pytest.fixture()
def trimet_client() -> TriMetClient:
    return TriMetClient("test-app-id")


def _mock_response(status_code: int, json_data: dict[str, Any] | None = None, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = text
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("Invalid JSON")
    return response


def test_get_arrivals_returns_body(trimet_client: TriMetClient) -> None:
    body = {"resultSet": {"arrival": [], "location": [], "queryTime": 0}}
    response = _mock_response(200, body)
    with patch("requests.get", return_value=response) as mock_get:
        result = trimet_client.get_arrivals([8377, 7751])

    assert result == body
    mock_get.assert_called_once()
    args, kwargs = mock_get.call_args
    assert args[0] == f"{TRIMET_API_BASE}/arrivals"
    assert kwargs["params"]["locIDs"] == "8377,7751"
    assert kwargs["params"]["appID"] == "test-app-id"
    assert kwargs["params"]["showPosition"] == "true"
    assert kwargs["params"]["minutes"] == 60
    assert kwargs["params"]["arrivals"] == 20


def test_get_arrivals_requires_stops(trimet_client: TriMetClient) -> None:
    with pytest.raises(ValueError):
        trimet_client.get_arrivals([])


def test_non_200_raises_client_error(trimet_client: TriMetClient) -> None:
    response = _mock_response(401, {"error": "bad appID"}, text="bad appID")
    with patch("requests.get", return_value=response):
        with pytest.raises(TriMetClientError) as exc_info:
            trimet_client.get_arrivals([8377])

    assert "401" in str(exc_info.value)


def test_network_error_raises_client_error(trimet_client: TriMetClient) -> None:
    with patch("requests.get", side_effect=requests.exceptions.ConnectionError("boom")):
        with pytest.raises(TriMetClientError):
            trimet_client.get_arrivals([8377])


def test_invalid_json_raises_client_error(trimet_client: TriMetClient) -> None:
    response = _mock_response(200, None)
    with patch("requests.get", return_value=response):
        with pytest.raises(TriMetClientError):
            trimet_client.get_arrivals([8377])
