"""지오펜스 판정을 위한 좌표 값 객체와 하버사인 거리 계산 유틸리티입니다."""

import math
from dataclasses import dataclass
from typing import Optional

from workforce.exceptions import InvalidCoordinate

EARTH_RADIUS_METERS = 6_371_000.0


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class GeofenceTarget:
    latitude: float
    longitude: float
    allowed_radius_meters: float


def validate_coordinate(latitude: float, longitude: float) -> None:
    if latitude is None or longitude is None:
        raise InvalidCoordinate()
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinate()
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinate()


def haversine_distance_meters(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Great-circle distance in meters between two WGS84 points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_to_target(point: Coordinate, target: GeofenceTarget) -> float:
    validate_coordinate(point.latitude, point.longitude)
    validate_coordinate(target.latitude, target.longitude)
    return haversine_distance_meters(point.latitude, point.longitude, target.latitude, target.longitude)


def is_within_fence(point: Coordinate, target: GeofenceTarget) -> bool:
    return distance_to_target(point, target) <= target.allowed_radius_meters


def offset_north(point: Coordinate, meters: float) -> Coordinate:
    """Return the point `meters` due north of `point` along its meridian."""
    delta = math.degrees(meters / EARTH_RADIUS_METERS)
    return Coordinate(latitude=point.latitude + delta, longitude=point.longitude, accuracy=point.accuracy)
