"""Standard attribute key names used for NetworkX graph data structures.

These constants define the dictionary keys used to store road network data in NetworkX graphs.
Using consistent keys ensures the road network can be read by the NxMap class.
"""

# Key for storing road geometry (LineString) in edge data dictionaries
DEFAULT_GEOMETRY_KEY = "geometry"

# Key for storing additional metadata (road names, speed limits, ...) in edge data dictionaries
DEFAULT_METADATA_KEY = "metadata"

# Key for storing the CRS (Coordinate Reference System) in graph.graph dictionary
DEFAULT_CRS_KEY = "crs"

# Edge attribute holding the road length in the distance units of the map
DEFAULT_DISTANCE_WEIGHT = "meters"

# Edge attribute holding the road travel time in seconds
DEFAULT_TIME_WEIGHT = "seconds"
