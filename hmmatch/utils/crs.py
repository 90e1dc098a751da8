"""Coordinate Reference System (CRS) constants used throughout hmmatch.

This module defines the standard CRS objects used for geographic transformations:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326)
- XY_CRS: Web Mercator projected coordinates (EPSG:3857)
"""

from pyproj import CRS, Geod

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Standard GPS coordinates in decimal degrees
LATLON_CRS = CRS(4326)

# Web Mercator projected coordinate system (EPSG:3857)
# Coordinates are in meters (easting, northing)
XY_CRS = CRS(3857)

# Ellipsoid used for geodesic distances and azimuths of geographic coordinates
WGS84_GEOD = Geod(ellps="WGS84")
