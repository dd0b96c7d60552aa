from src.homecare.schemas.routing import RouteEstimateRequest, RouteSegmentsRequest, StopModel
from src.homecare.services.routing import service as routing_service
from src.homecare.services.routing.formatting import format_distance, format_duration
from src.homecare.services.routing.models import DirectionsResult
from src.homecare.services.routing.service import (
    NO_VALID_ADDRESSES_ERROR,
    compute_route_segments,
    estimate_route,
)


class DummyMapsClient:
    def __init__(self, durations):
        self.durations = list(durations)
        self.calls = 0

    def directions(self, origin, destination, travel_mode="DRIVING"):
        self.calls += 1
        duration = self.durations.pop(0)
        if duration is None:
            return DirectionsResult(status="NOT_FOUND", error_message="NOT_FOUND")
        return DirectionsResult(status="OK", duration=duration, distance=duration * 10)


def _unconfigured():
    raise ValueError("Mapping service API key is not configured.")


def _stop(address, postal="08301", label=None):
    return StopModel(address=address, postal_code=postal, city="Mataró", label=label)


def test_estimate_route_returns_heuristic_segments():
    payload = RouteEstimateRequest(
        stops=[_stop("A", "08301"), _stop("B", "08302")],
        worker_start=_stop("Home", "08301"),
    )
    response = estimate_route(payload)

    assert len(response.segments) == 2
    assert response.segments[0].billable is False
    assert response.total_distance == 2000
    assert response.total_duration == 300
    assert response.average_confidence == "high"


def test_segments_skip_stops_without_address(monkeypatch):
    monkeypatch.setattr(routing_service, "MapsClient", _unconfigured)
    payload = RouteSegmentsRequest(
        stops=[_stop("A"), StopModel(address="  "), _stop("B", "08302")],
        mode="estimate",
    )
    response = compute_route_segments(payload)

    assert response.metadata["skipped_stops"] == 1
    assert len(response.segments) == 1
    assert response.segments[0].from_label == "Parada 1"
    assert response.segments[0].to_label == "Parada 2"


def test_segments_without_any_address_report_error():
    response = compute_route_segments(RouteSegmentsRequest(stops=[StopModel(), StopModel(address="")]))
    assert response.segments == []
    assert response.error == NO_VALID_ADDRESSES_ERROR
    assert response.confidence == "low"
    assert response.total_billable_minutes == 0


def test_exact_mode_uses_directions_and_bills_rounded_up_minutes(monkeypatch):
    client = DummyMapsClient([600, 61, 125])
    monkeypatch.setattr(routing_service, "MapsClient", lambda: client)
    payload = RouteSegmentsRequest(
        stops=[_stop("Client 1", label="Sra. Puig"), _stop("Client 2"), _stop("Client 3")],
        worker_start=_stop("Home"),
        mode="exact",
    )
    response = compute_route_segments(payload)

    assert client.calls == 3
    assert [s.id for s in response.segments] == ["segment-0", "segment-1", "segment-2"]
    assert [s.billable_minutes for s in response.segments] == [10, 2, 3]
    assert response.segments[0].billable is False
    assert response.segments[0].from_label == "Inicio"
    assert response.segments[0].to_label == "Sra. Puig"
    assert response.segments[1].duration_text == "1m 1s"
    assert response.total_billable_minutes == 5
    assert response.total_duration == 186
    assert response.metadata["directions_service"] is True


def test_exact_mode_without_service_fails_every_leg(monkeypatch):
    monkeypatch.setattr(routing_service, "MapsClient", _unconfigured)
    response = compute_route_segments(RouteSegmentsRequest(stops=[_stop("A"), _stop("B")], mode="exact"))

    assert response.successful_segments == 0
    assert response.segments[0].error_message == "Servicio de mapas no disponible"
    assert response.error == "Todos los cálculos de tiempo fallaron"
    assert response.metadata["directions_service"] is False


def test_auto_mode_estimates_legs_the_service_cannot_answer(monkeypatch):
    client = DummyMapsClient([120, None])
    monkeypatch.setattr(routing_service, "MapsClient", lambda: client)
    response = compute_route_segments(
        RouteSegmentsRequest(stops=[_stop("A"), _stop("B"), _stop("C", "08351")], mode="auto")
    )

    assert [s.is_estimated for s in response.segments] == [False, True]
    assert all(s.success for s in response.segments)
    assert response.segments[1].distance == 5000
    assert response.segments[1].distance_text == "5.0km"
    assert response.total_duration == 120 + 600
    assert response.total_duration_text == "12m"
    assert response.error is None


def test_estimate_mode_never_builds_a_client(monkeypatch):
    def _explode():
        raise AssertionError("directions client should not be used")

    monkeypatch.setattr(routing_service, "MapsClient", _explode)
    response = compute_route_segments(
        RouteSegmentsRequest(stops=[_stop("A", "08301"), _stop("B", "08302")], mode="estimate", travel_mode="WALKING")
    )
    assert response.segments[0].is_estimated
    assert response.segments[0].travel_mode == "WALKING"
    assert "directions_service" not in response.metadata


def test_duration_and_distance_text():
    assert format_duration(45) == "45s"
    assert format_duration(330) == "5m 30s"
    assert format_duration(300) == "5m"
    assert format_duration(3900) == "1h 5m"
    assert format_duration(7200) == "2h"
    assert format_distance(850) == "850m"
    assert format_distance(2000) == "2.0km"
