import math

from pyproj import CRS

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.utils.crs import WGS84_GEOD


def _is_geographic(crs: CRS) -> bool:
    return crs is not None and crs.is_geographic


def xy_distance(crs: CRS, ax: float, ay: float, bx: float, by: float) -> float:
    """
    Distance between two raw positions given in the same CRS.

    Geographic positions (x=lon, y=lat) are measured on the WGS84 ellipsoid in meters,
    projected positions with the cartesian distance in the units of the CRS.
    """
    if _is_geographic(crs):
        _, _, dist = WGS84_GEOD.inv(ax, ay, bx, by)
        return dist

    return math.hypot(bx - ax, by - ay)


def xy_azimuth(crs: CRS, ax: float, ay: float, bx: float, by: float) -> float:
    """
    Bearing from position a to position b in degrees clockwise from north, in [0, 360).
    """
    if _is_geographic(crs):
        fwd, _, _ = WGS84_GEOD.inv(ax, ay, bx, by)
        return fwd % 360.0

    return math.degrees(math.atan2(bx - ax, by - ay)) % 360.0


def coord_to_coord_dist(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the distance between two coordinates.

    For coordinates in a projected CRS (like EPSG:3857) this is the Euclidean distance
    in the units of the CRS. For coordinates in a geographic CRS (like EPSG:4326) the
    geodesic distance on the WGS84 ellipsoid is returned in meters.

    Args:
        a: The first coordinate
        b: The second coordinate. Must be in the same CRS as coordinate a.

    Returns:
        The distance between the two coordinates

    Raises:
        ValueError: If the coordinates are not in the same CRS

    Examples:
        >>> from hmmatch.constructs.coordinate import Coordinate
        >>> coord1 = Coordinate.from_lat_lon(40.7128, -74.0060)
        >>> coord2 = Coordinate.from_lat_lon(40.7589, -73.9851)
        >>> distance = coord_to_coord_dist(coord1, coord2)
        >>> print(f"Distance: {distance:.1f} meters")
    """
    if a.crs != b.crs:
        raise ValueError(f"crs of {a} must match crs of {b}")

    return xy_distance(a.crs, a.x, a.y, b.x, b.y)


def azimuth(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the bearing from coordinate a to coordinate b.

    Args:
        a: The origin coordinate
        b: The destination coordinate. Must be in the same CRS as coordinate a.

    Returns:
        The bearing in degrees clockwise from north, in [0, 360)
    """
    if a.crs != b.crs:
        raise ValueError(f"crs of {a} must match crs of {b}")

    return xy_azimuth(a.crs, a.x, a.y, b.x, b.y)
