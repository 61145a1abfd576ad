"""
Great-circle helpers used by the nearby query and the search viewbox.

All functions are pure. Distances are kilometres on a spherical Earth, which is
accurate to well under a percent at the radii the app searches.
"""

import math

from hobbyhub.schemas.geo import BoundingBox, Coordinate

EARTH_RADIUS_KM = 6371.0

# Above this latitude the 1/cos(lat) longitude span blows up; use every longitude.
POLAR_LATITUDE = 85.0


def deg_to_rad(deg: float) -> float:
    return deg * (math.pi / 180.0)


def rad_to_deg(rad: float) -> float:
    return rad * (180.0 / math.pi)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates."""
    if a == b:
        return 0.0
    d_lat = deg_to_rad(b.latitude - a.latitude)
    d_lon = deg_to_rad(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(deg_to_rad(a.latitude))
        * math.cos(deg_to_rad(b.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair past 1 for antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Approximate square around ``center`` reaching ``radius_km`` in each direction.

    The box is clamped to valid latitudes and longitudes. Near the poles it
    spans the full longitude range. The longitude span is the flat
    ``lat_delta / cos(lat)`` approximation, good enough for a provider
    viewbox; use ``enclosing_box`` when no point inside the radius may fall
    outside the box.

    Raises:
        ValueError: if ``radius_km`` is not positive
    """
    if radius_km is None or radius_km <= 0 or math.isnan(radius_km):
        raise ValueError("radius_km must be greater than 0")

    lat_delta = rad_to_deg(radius_km / EARTH_RADIUS_KM)
    min_lat = max(-90.0, center.latitude - lat_delta)
    max_lat = min(90.0, center.latitude + lat_delta)

    cos_lat = math.cos(deg_to_rad(center.latitude))
    if abs(center.latitude) > POLAR_LATITUDE or cos_lat <= 0:
        return BoundingBox(-180.0, min_lat, 180.0, max_lat)

    lon_delta = lat_delta / cos_lat
    min_lon = max(-180.0, center.longitude - lon_delta)
    max_lon = min(180.0, center.longitude + lon_delta)
    return BoundingBox(min_lon, min_lat, max_lon, max_lat)


def enclosing_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Smallest latitude/longitude box containing the whole ``radius_km`` circle.

    Used as a database prefilter. The longitude half-width is the circle's
    true extent, ``asin(sin(r/R) / cos(lat))``. When a pole lies inside the
    circle the box spans every longitude.

    Raises:
        ValueError: if ``radius_km`` is not positive
    """
    if radius_km is None or radius_km <= 0 or math.isnan(radius_km):
        raise ValueError("radius_km must be greater than 0")

    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = rad_to_deg(angular)
    min_lat = center.latitude - lat_delta
    max_lat = center.latitude + lat_delta
    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(-180.0, max(-90.0, min_lat), 180.0, min(90.0, max_lat))

    ratio = math.sin(angular) / math.cos(deg_to_rad(center.latitude))
    if ratio >= 1.0:
        return BoundingBox(-180.0, min_lat, 180.0, max_lat)

    lon_delta = rad_to_deg(math.asin(ratio))
    min_lon = max(-180.0, center.longitude - lon_delta)
    max_lon = min(180.0, center.longitude + lon_delta)
    return BoundingBox(min_lon, min_lat, max_lon, max_lat)


def humanize_distance(km: float) -> str:
    """Format a distance the way the map callouts show it: ``350 m``, ``2.4 km``, ``12 km``."""
    if km < 1:
        return f"{round(km * 1000)} m"
    if km < 10:
        return f"{km:.1f} km"
    return f"{round(km)} km"
