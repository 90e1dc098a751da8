from dataclasses import dataclass
from typing import List, Optional

import geopandas as gpd
import numpy as np
import pandas as pd

from hmmatch.constructs.match import Match
from hmmatch.constructs.road import Road, RoadId


@dataclass
class MatchResult:
    matches: List[Match]
    path: Optional[List[Road]] = None

    @property
    def crs(self):
        first_crs = self.matches[0].coordinate.crs
        if not all([first_crs.equals(m.coordinate.crs) for m in self.matches]):
            raise ValueError(
                "Found that there were different CRS within the matches. "
                "These must all be equal to use this function"
            )
        return first_crs

    @property
    def matched_road_ids(self) -> List[Optional[RoadId]]:
        """The id of the matched road for every sample, None where nothing matched."""
        return [m.road.road_id if m.road is not None else None for m in self.matches]

    @property
    def path_road_ids(self) -> List[RoadId]:
        """The ids of the roads along the matched path, empty if there is no path."""
        if self.path is None:
            return []
        return [r.road_id for r in self.path]

    def matches_to_dataframe(self) -> pd.DataFrame:
        """
        Convert the matches to a pandas DataFrame, one row per sample.

        Returns:
            A DataFrame with the sample coordinate_id, road_id, distance_to_road and the
            road metadata (NaN where a sample was not matched)
        """
        df = pd.DataFrame([m.to_flat_dict() for m in self.matches])
        df = df.fillna(np.nan)

        return df

    def matches_to_geodataframe(self) -> gpd.GeoDataFrame:
        """
        Convert the matches to a GeoDataFrame holding the matched road geometries.
        """
        df = self.matches_to_dataframe()
        if len(self.matches) == 0 or "geom" not in df.columns:
            return gpd.GeoDataFrame(df)

        gdf = gpd.GeoDataFrame(df, geometry="geom")
        gdf = gdf.set_crs(self.crs)

        return gdf

    def path_to_dataframe(self) -> pd.DataFrame:
        """
        Convert the matched path to a pandas DataFrame, one row per road.
        """
        if self.path is None:
            return pd.DataFrame()

        df = pd.DataFrame([r.to_flat_dict() for r in self.path])
        df = df.fillna(np.nan)

        return df

    def path_to_geodataframe(self) -> gpd.GeoDataFrame:
        """
        Convert the matched path to a GeoDataFrame with the road LineStrings.
        """
        if self.path is None or len(self.path) == 0:
            return gpd.GeoDataFrame()

        df = self.path_to_dataframe()
        gdf = gpd.GeoDataFrame(df, geometry="geom")

        gdf = gdf.set_crs(self.crs)

        return gdf
