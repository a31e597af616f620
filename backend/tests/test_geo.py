"""지오펜스 거리 계산과 좌표 검증을 확인하는 테스트입니다."""

import math

import pytest

from workforce.exceptions import InvalidCoordinate
from workforce.utils.geo import (
    Coordinate,
    GeofenceTarget,
    distance_to_target,
    haversine_distance_meters,
    is_within_fence,
    offset_north,
    validate_coordinate,
)

OFFICE = Coordinate(latitude=25.2854, longitude=51.5310)


def test_identical_points_have_zero_distance():
    assert haversine_distance_meters(25.2854, 51.5310, 25.2854, 51.5310) == pytest.approx(0.0, abs=1e-6)


def test_distance_is_symmetric():
    d1 = haversine_distance_meters(37.5665, 126.9780, 35.1796, 129.0756)
    d2 = haversine_distance_meters(35.1796, 129.0756, 37.5665, 126.9780)
    assert d1 == pytest.approx(d2)
    # 서울-부산 직선거리 약 325km
    assert 320_000 < d1 < 330_000


def test_one_degree_of_latitude_is_about_111km():
    assert haversine_distance_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195, rel=1e-3)


def test_antipodal_points_do_not_produce_nan():
    d = haversine_distance_meters(0.0, 0.0, 0.0, 180.0)
    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * 6_371_000, rel=1e-6)


def test_fence_boundary_is_inclusive():
    fence = GeofenceTarget(latitude=OFFICE.latitude, longitude=OFFICE.longitude, allowed_radius_meters=50)
    assert is_within_fence(offset_north(OFFICE, 49), fence)
    assert not is_within_fence(offset_north(OFFICE, 51), fence)

    exact = offset_north(OFFICE, 50)
    fence_at_exact = GeofenceTarget(
        latitude=OFFICE.latitude,
        longitude=OFFICE.longitude,
        allowed_radius_meters=distance_to_target(exact, fence),
    )
    assert is_within_fence(exact, fence_at_exact)


def test_offset_north_moves_requested_distance():
    moved = offset_north(OFFICE, 200)
    assert haversine_distance_meters(OFFICE.latitude, OFFICE.longitude, moved.latitude, moved.longitude) == pytest.approx(200, rel=1e-6)


@pytest.mark.parametrize(
    "lat, lon",
    [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.1), (0.0, -181.0), (float("nan"), 0.0), (0.0, float("inf")), (None, 0.0)],
)
def test_invalid_coordinates_rejected(lat, lon):
    with pytest.raises(InvalidCoordinate):
        validate_coordinate(lat, lon)


def test_distance_to_target_validates_point():
    fence = GeofenceTarget(latitude=0.0, longitude=0.0, allowed_radius_meters=10)
    with pytest.raises(InvalidCoordinate):
        distance_to_target(Coordinate(latitude=120.0, longitude=0.0), fence)
