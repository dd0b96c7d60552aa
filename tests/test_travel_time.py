from src.homecare.models.domain import AddressInfo
from src.homecare.services.routing.models import DirectionsResult
from src.homecare.services.routing.travel_time import (
    ALL_FAILED_ERROR,
    build_full_address,
    calculate_real_travel_time,
    calculate_route_travel_time,
)


class DummyMapsClient:
    """Answers legs from a scripted list; exceptions in the list are raised."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    def directions(self, origin, destination, travel_mode="DRIVING"):
        self.calls.append((origin, destination, travel_mode))
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


def _ok(duration, distance=1000):
    return DirectionsResult(status="OK", duration=duration, distance=distance)


def _stop(street, postal="08301"):
    return AddressInfo(address=street, postal_code=postal, city="Mataró")


def test_build_full_address_joins_fields_and_appends_country():
    info = AddressInfo(address="Carrer Major 1", postal_code="08301", city="Mataró")
    assert build_full_address(info) == "Carrer Major 1, 08301, Mataró, España"


def test_build_full_address_keeps_existing_country_and_defaults_when_empty():
    assert build_full_address(AddressInfo(address="Riera 5, Mataró, España")) == "Riera 5, Mataró, España"
    assert build_full_address(AddressInfo(address="  ")) == "Mataró, España"


def test_real_travel_time_success_is_high_confidence():
    client = DummyMapsClient([_ok(420, 1800)])
    result = calculate_real_travel_time(_stop("Riera 1"), _stop("Riera 9"), "WALKING", provider=client)

    assert result.success
    assert result.duration == 420
    assert result.distance == 1800
    assert result.confidence == "high"
    assert client.calls[0][2] == "WALKING"


def test_real_travel_time_never_raises():
    client = DummyMapsClient([TimeoutError("deadline"), DirectionsResult(status="ZERO_RESULTS", error_message="ZERO_RESULTS")])

    first = calculate_real_travel_time(_stop("Riera 1"), _stop("Riera 9"), provider=client)
    assert not first.success
    assert first.duration == 0 and first.distance == 0
    assert "deadline" in first.error_message

    second = calculate_real_travel_time(_stop("Riera 1"), _stop("Riera 9"), provider=client)
    assert not second.success
    assert second.error_message == "ZERO_RESULTS"


def test_real_travel_time_without_provider_or_address():
    assert calculate_real_travel_time(_stop("A"), _stop("B"), provider=None).error_message == "Servicio de mapas no disponible"

    client = DummyMapsClient([])
    result = calculate_real_travel_time(AddressInfo(), _stop("B"), provider=client)
    assert result.error_message == "Dirección de origen incompleta"
    result = calculate_real_travel_time(_stop("A"), AddressInfo(), provider=client)
    assert result.error_message == "Dirección de destino incompleta"
    assert client.calls == []


def test_route_excludes_worker_leg_from_totals():
    client = DummyMapsClient([_ok(100, 500), _ok(200, 1000), _ok(300, 1500)])
    route = calculate_route_travel_time(
        [_stop("Client 1"), _stop("Client 2"), _stop("Client 3")],
        worker_start=_stop("Home"),
        provider=client,
    )

    assert [s.billable for s in route.segments] == [False, True, True]
    assert route.total_duration == 500
    assert route.total_distance == 2500
    assert route.successful_segments == 3
    assert route.total_segments == 3
    assert route.confidence == "high"
    assert route.error is None
    assert client.calls[0][0] == "Home, 08301, Mataró, España"


def test_failed_leg_does_not_stop_the_route():
    client = DummyMapsClient([_ok(100), ConnectionError("unreachable"), _ok(300)])
    route = calculate_route_travel_time([_stop("A"), _stop("B"), _stop("C"), _stop("D")], provider=client)

    assert [s.success for s in route.segments] == [True, False, True]
    assert route.segments[1].duration == 0
    assert route.total_duration == 400
    assert route.successful_segments == 2
    assert route.error is None
    # (3 + 1 + 3) / 3
    assert route.confidence == "medium"


def test_all_failed_route_reports_error():
    client = DummyMapsClient([RuntimeError("boom"), RuntimeError("boom")])
    route = calculate_route_travel_time([_stop("A"), _stop("B"), _stop("C")], provider=client)

    assert route.successful_segments == 0
    assert route.total_segments == 2
    assert route.total_duration == 0
    assert route.error == ALL_FAILED_ERROR
    assert route.confidence == "low"


def test_fallback_replaces_failed_legs_with_estimates():
    client = DummyMapsClient([_ok(100), DirectionsResult(status="NOT_FOUND", error_message="NOT_FOUND")])
    route = calculate_route_travel_time(
        [_stop("A", "08301"), _stop("B", "08301"), _stop("C", "08302")],
        provider=client,
        fallback_to_estimate=True,
    )

    estimated = route.segments[1]
    assert estimated.success
    assert estimated.is_estimated
    assert estimated.duration == 300
    assert estimated.distance == 2000
    assert route.total_duration == 400
    assert route.error is None


def test_route_with_one_stop_has_no_segments():
    route = calculate_route_travel_time([_stop("A")], provider=DummyMapsClient([]))
    assert route.segments == []
    assert route.error
