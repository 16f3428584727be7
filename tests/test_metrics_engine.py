import math

import pytest

from fleetnav.models.domain import RouteSegment, TrafficContext
from fleetnav.services.errors import InvalidInputError
from fleetnav.services.metrics import engine
from fleetnav.services.metrics.engine import (
    EngineParameters,
    compute_distance,
    compute_fuel_efficiency,
    compute_optimization_factors,
    compute_safety_score,
    compute_total_distance,
    compute_traffic_delay,
    estimate_base_duration,
    generate_segments,
    optimize_route,
)

PARAMS = EngineParameters()
HOSPITAL = (75.7804, 11.2588)
A = (75.9064, 10.9847)
B = (75.908, 10.986)
C = (75.9100, 10.9880)


def _segment(distance: float, duration: float, traffic: float, safety: float) -> RouteSegment:
    return RouteSegment(
        start=(0.0, 0.0),
        end=(0.0, 0.0),
        distance=distance,
        duration=duration,
        road_type="local",
        traffic_level=traffic,
        safety_score=safety,
        emergency_access=False,
    )


def test_distance_is_symmetric_and_zero_for_identical_points():
    assert compute_distance(A, B) == pytest.approx(compute_distance(B, A))
    assert compute_distance(A, A) == 0.0


def test_distance_matches_short_urban_hop():
    # 0.0016 deg of longitude and 0.0013 deg of latitude at ~11N
    distance = compute_total_distance([A, B])
    assert 220 < distance < 235
    assert compute_traffic_delay([A, B]) == 0.0


def test_total_distance_is_additive():
    expected = compute_distance(A, B) + compute_distance(B, C)
    assert compute_total_distance([A, B, C]) == pytest.approx(expected)


def test_base_duration_uses_average_speed_and_is_increasing():
    assert estimate_base_duration(833.0, PARAMS) == pytest.approx(100.0)
    assert estimate_base_duration(100.0, PARAMS) < estimate_base_duration(100.1, PARAMS)
    slow = EngineParameters(average_speed_mps=4.165)
    assert estimate_base_duration(833.0, slow) == pytest.approx(200.0)


def test_engine_parameters_reject_non_positive_speed():
    with pytest.raises(ValueError):
        EngineParameters(average_speed_mps=0)


def test_full_congestion_adds_half_of_segment_time():
    waypoints = [B, A]
    congested = TrafficContext(congestion_levels={"75.9064,10.9847": 1.0})
    base = estimate_base_duration(compute_total_distance(waypoints), PARAMS)

    delay = compute_traffic_delay(waypoints, congested, PARAMS)

    assert delay == pytest.approx(base * 0.5)
    assert compute_traffic_delay(waypoints, TrafficContext(), PARAMS) == 0.0


def test_congestion_increases_total_duration():
    waypoints = [B, A]
    congested = TrafficContext(congestion_levels={"75.9064,10.9847": 1})

    busy = optimize_route(waypoints, "car", congested, PARAMS)
    quiet = optimize_route(waypoints, "car", TrafficContext(), PARAMS)

    assert busy.total_duration > quiet.total_duration
    assert busy.traffic_delay > 0
    assert quiet.total_duration == pytest.approx(estimate_base_duration(quiet.total_distance, PARAMS))


def test_fuel_multipliers_compose():
    waypoints = [A, B, C]
    total_km = compute_total_distance(waypoints) / 1000

    car = compute_fuel_efficiency(waypoints, "car")
    ambulance = compute_fuel_efficiency(waypoints, "ambulance")

    assert car == pytest.approx(total_km * 0.08 * 0.9)
    assert ambulance == pytest.approx(total_km * 0.12 * 0.9 * 1.2)
    assert ambulance / car == pytest.approx((12 / 8) * 1.2)


def test_fuel_for_two_waypoints_has_no_route_discount():
    total_km = compute_total_distance([A, B]) / 1000
    assert compute_fuel_efficiency([A, B], "bus") == pytest.approx(total_km * 0.25)


def test_unknown_vehicle_uses_default_rate(caplog):
    total_km = compute_total_distance([A, B]) / 1000
    with caplog.at_level("WARNING"):
        fuel = compute_fuel_efficiency([A, B], "hovercraft")
    assert fuel == pytest.approx(total_km * 0.08)
    assert "hovercraft" in caplog.text
    assert optimize_route([A, B], "hovercraft", params=PARAMS).emergency_priority is False


@pytest.mark.parametrize("vehicle", ["ambulance", "fire", "police", "bus", "car", "motorcycle", "unknown"])
def test_fuel_is_never_negative(vehicle):
    assert compute_fuel_efficiency([A, A, B], vehicle) >= 0


def test_safety_score_penalises_incidents_and_road_works():
    far_away = [(80.0, 20.0)] * 5
    traffic = TrafficContext(incident_locations=far_away)
    assert compute_safety_score([A, B], traffic) == 75

    traffic = TrafficContext(incident_locations=far_away[:2], road_works=far_away[:3])
    assert compute_safety_score([A, B], traffic) == 100 - 10 - 9


def test_safety_score_congestion_penalty_per_waypoint():
    traffic = TrafficContext(
        congestion_levels={"75.9064,10.9847": 0.7, "75.9080,10.9860": 0.4, "75.9100,10.9880": 0.39}
    )
    assert compute_safety_score([A, B, C], traffic) == 100 - 10 - 5


def test_safety_score_never_negative():
    traffic = TrafficContext(incident_locations=[A] * 30, road_works=[B] * 30)
    assert compute_safety_score([A, B], traffic) == 0
    assert compute_safety_score([A, B]) == 100


def test_segments_classify_road_types():
    near_hospital = (75.7814, 11.2598)
    local_start = (75.9000, 11.1000)
    waypoints = [
        HOSPITAL,
        near_hospital,
        (75.7814, 11.2698),  # ~1.1 km north
        (75.7814, 11.2752),  # ~600 m north
    ]
    segments = generate_segments(waypoints, "car", params=PARAMS)

    assert [segment.road_type for segment in segments] == ["emergency", "primary", "secondary"]
    assert [segment.emergency_access for segment in segments] == [True, True, False]
    assert generate_segments([local_start, (75.9001, 11.1001)], "car", params=PARAMS)[0].road_type == "local"
    assert all(segment.emergency_access for segment in generate_segments(waypoints, "fire", params=PARAMS))


def test_segment_traffic_level_uses_midpoint_and_default():
    start, end = (75.9000, 11.1000), (75.9002, 11.1002)
    traffic = TrafficContext(congestion_levels={"75.9001,11.1001": 0.9})

    assert generate_segments([start, end], "car", traffic, PARAMS)[0].traffic_level == pytest.approx(0.9)
    assert generate_segments([start, end], "car", TrafficContext(), PARAMS)[0].traffic_level == pytest.approx(0.2)
    assert generate_segments([start, end], "car", None, PARAMS)[0].traffic_level == pytest.approx(0.2)


def test_segment_safety_checks_hazards_near_segment_start():
    start, end = (75.9000, 11.1000), (75.9100, 11.1000)
    traffic = TrafficContext(incident_locations=[(75.9001, 11.1000)], road_works=[(75.9000, 11.1005)])

    segment = generate_segments([start, end], "car", traffic, PARAMS)[0]

    assert segment.safety_score == 100 - 20 - 10
    far = TrafficContext(incident_locations=[end], road_works=[end])
    assert generate_segments([start, end], "car", far, PARAMS)[0].safety_score == 100


def test_optimization_factors_are_normalised():
    factors = compute_optimization_factors([_segment(2500, 300, 0.2, 90), _segment(2500, 600, 0.4, 70)])

    assert factors.traffic_avoidance == pytest.approx(0.7)
    assert factors.distance_optimization == pytest.approx(0.5)
    assert factors.time_optimization == pytest.approx(0.5)
    assert factors.safety_optimization == pytest.approx(0.8)


@pytest.mark.parametrize(
    "segments",
    [
        [_segment(50_000, 9_000, 1.0, 0)],
        [_segment(0, 0, 0.0, 100)],
        [_segment(10, 1, 3.0, 100), _segment(10, 1, 0.0, 100)],
    ],
)
def test_optimization_factors_stay_in_unit_interval(segments):
    factors = compute_optimization_factors(segments)
    for value in (
        factors.traffic_avoidance,
        factors.distance_optimization,
        factors.time_optimization,
        factors.safety_optimization,
    ):
        assert 0.0 <= value <= 1.0


def test_optimization_factors_require_segments():
    with pytest.raises(InvalidInputError):
        compute_optimization_factors([])


def test_optimize_route_composes_metrics():
    metrics = optimize_route([A, B, C], "ambulance", params=PARAMS)

    assert metrics.emergency_priority is True
    assert metrics.vehicle_type == "ambulance"
    assert metrics.total_distance == pytest.approx(sum(segment.distance for segment in metrics.segments))
    assert metrics.traffic_delay == 0.0
    assert metrics.safety_score == 100
    assert len(metrics.segments) == 2
    assert metrics.waypoints == (A, B, C)


def test_single_waypoint_is_rejected():
    with pytest.raises(InvalidInputError) as excinfo:
        optimize_route([A], "car", params=PARAMS)
    assert excinfo.value.context["waypoint_count"] == 1
    with pytest.raises(InvalidInputError):
        compute_total_distance([])


@pytest.mark.parametrize("bad", [(181.0, 10.0), (-180.5, 10.0), (75.0, 91.0), (75.0, -90.1), (math.nan, 10.0)])
def test_out_of_range_coordinates_are_rejected(bad):
    with pytest.raises(InvalidInputError):
        compute_total_distance([A, bad])
    with pytest.raises(InvalidInputError):
        compute_distance(bad, A)


def test_zero_length_segment_is_not_an_error():
    metrics = optimize_route([A, A, B], "car", params=PARAMS)
    assert metrics.segments[0].distance == 0.0
    assert metrics.segments[0].duration == 0.0
    assert metrics.total_distance == pytest.approx(compute_distance(A, B))


def test_default_parameters_come_from_settings(monkeypatch):
    from fleetnav.config import Settings

    monkeypatch.setattr(engine, "settings", Settings(average_speed_mps=10.0))
    assert estimate_base_duration(100.0) == pytest.approx(10.0)


@pytest.mark.parametrize(
    "compute",
    [
        lambda points: compute_traffic_delay(points, TrafficContext(), PARAMS),
        lambda points: compute_fuel_efficiency(points, "car"),
        lambda points: compute_safety_score(points, TrafficContext()),
        lambda points: generate_segments(points, "car", None, PARAMS),
    ],
    ids=["traffic_delay", "fuel_efficiency", "safety_score", "segments"],
)
@pytest.mark.parametrize("points", [[A], [A, (181.0, 0.0)]], ids=["single", "out_of_range"])
def test_every_operation_validates_waypoints(compute, points):
    with pytest.raises(InvalidInputError):
        compute(points)


@pytest.mark.parametrize(
    "traffic",
    [
        TrafficContext(incident_locations=[(500.0, 500.0)]),
        TrafficContext(incident_locations=[(math.nan, math.nan)]),
        TrafficContext(road_works=[(-500.0, 300.0)]),
        TrafficContext(road_works=[(75.9, None)]),
        TrafficContext(congestion_levels={"75.9080,10.9860": -4.0}),
        TrafficContext(congestion_levels={"75.9080,10.9860": 7.0}),
        TrafficContext(congestion_levels={"75.9080,10.9860": math.inf}),
        TrafficContext(congestion_levels={"75.9080,10.9860": "heavy"}),
    ],
    ids=[
        "incident_out_of_range",
        "incident_nan",
        "road_work_out_of_range",
        "road_work_missing_latitude",
        "negative_congestion",
        "congestion_above_one",
        "infinite_congestion",
        "non_numeric_congestion",
    ],
)
def test_invalid_traffic_context_is_rejected(traffic):
    with pytest.raises(InvalidInputError):
        optimize_route([A, B], "car", traffic, PARAMS)
    with pytest.raises(InvalidInputError):
        compute_traffic_delay([A, B], traffic, PARAMS)
    with pytest.raises(InvalidInputError):
        compute_safety_score([A, B], traffic)
    with pytest.raises(InvalidInputError):
        generate_segments([A, B], "car", traffic, PARAMS)


def test_invalid_hazard_reports_its_collection_and_position():
    traffic = TrafficContext(incident_locations=[A, (999.0, 999.0)])

    with pytest.raises(InvalidInputError) as excinfo:
        optimize_route([A, B], "car", traffic, PARAMS)

    assert excinfo.value.context["field"] == "incident_locations"
    assert excinfo.value.context["index"] == 1


def test_congestion_bounds_are_inclusive():
    traffic = TrafficContext(congestion_levels={"75.9064,10.9847": 0.0, "75.9080,10.9860": 1.0})
    metrics = optimize_route([A, B], "car", traffic, PARAMS)
    assert metrics.total_duration > estimate_base_duration(metrics.total_distance, PARAMS)


def test_unknown_vehicle_is_resolved_once_per_route(caplog):
    with caplog.at_level("WARNING", logger="fleetnav.models.vehicles"):
        optimize_route([A, B, C], "hovercraft", params=PARAMS)

    warnings = [record for record in caplog.records if "hovercraft" in record.getMessage()]
    assert len(warnings) == 1
