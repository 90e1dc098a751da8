from hmmatch.maps.nx.nx_map import NxMap

__all__ = ["NxMap"]
