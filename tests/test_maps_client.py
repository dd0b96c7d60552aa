import httpx
import pytest

from src.homecare.services.routing import maps_client
from src.homecare.services.routing.maps_client import MapsClient

DIRECTIONS_OK = {
    "status": "OK",
    "routes": [{"legs": [{"duration": {"value": 420, "text": "7 mins"}, "distance": {"value": 1800, "text": "1.8 km"}}]}],
}


def _client_with(monkeypatch, handler, **kwargs):
    client = MapsClient(api_key="test-key", base_url="https://maps.test/directions/json", backoff_seconds=0, **kwargs)
    monkeypatch.setattr(
        client,
        "_get_client",
        lambda remaining: httpx.Client(transport=httpx.MockTransport(handler)),
    )
    return client


def test_directions_reads_first_leg(monkeypatch):
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json=DIRECTIONS_OK)

    client = _client_with(monkeypatch, handler)
    result = client.directions("Riera 1, Mataró, España", "Riera 9, Mataró, España", "WALKING")

    assert result.status == "OK"
    assert result.duration == 420
    assert result.distance == 1800
    assert seen["mode"] == "walking"
    assert seen["key"] == "test-key"
    assert seen["alternatives"] == "false"


def test_non_ok_status_is_returned_not_raised(monkeypatch):
    client = _client_with(monkeypatch, lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS"}))
    result = client.directions("A", "B")
    assert result.status == "ZERO_RESULTS"
    assert result.duration is None
    assert result.error_message == "ZERO_RESULTS"


def test_malformed_ok_body_raises_value_error(monkeypatch):
    client = _client_with(monkeypatch, lambda request: httpx.Response(200, json={"status": "OK", "routes": []}))
    with pytest.raises(ValueError):
        client.directions("A", "B")


def test_server_errors_are_retried(monkeypatch):
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json=DIRECTIONS_OK)

    client = _client_with(monkeypatch, handler, max_retries=1)
    assert client.directions("A", "B").duration == 420
    assert len(attempts) == 2


def test_connection_errors_surface_after_retries(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = _client_with(monkeypatch, handler, max_retries=0)
    with pytest.raises(ConnectionError):
        client.directions("A", "B")


def test_timeouts_surface_as_timeout_error(monkeypatch):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = _client_with(monkeypatch, handler, max_retries=0)
    with pytest.raises(TimeoutError):
        client.directions("A", "B")


def test_invalid_arguments_are_rejected(monkeypatch):
    client = _client_with(monkeypatch, lambda request: httpx.Response(200, json=DIRECTIONS_OK))
    with pytest.raises(ValueError):
        client.directions(" ", "B")
    with pytest.raises(ValueError):
        client.directions("A", "B", "FLYING")


def test_missing_api_key_is_rejected(monkeypatch):
    monkeypatch.setattr(maps_client.settings, "maps_api_key", None)
    with pytest.raises(ValueError):
        MapsClient()
    assert maps_client.check_health() is False
