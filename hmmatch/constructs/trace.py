from __future__ import annotations

from functools import cached_property
from typing import List, Optional

import pandas as pd
from geopandas import GeoDataFrame, points_from_xy
from pyproj import CRS

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.sample import MatcherSample
from hmmatch.utils.crs import LATLON_CRS, XY_CRS

TIME_COLUMN = "time"
AZIMUTH_COLUMN = "azimuth"


class Trace:
    """
    A sequence of timestamped position samples, e.g. the fixes of one GPS track.

    A Trace wraps a GeoDataFrame of point geometries with a time column and an optional
    azimuth (heading) column. The frame must be ordered by time and have unique indices;
    the index values become the sample and coordinate ids.

    Attributes:
        coords: A list of Coordinate objects, one per sample
        samples: A list of MatcherSample objects, one per sample
        crs: The coordinate reference system (CRS) of the trace
        index: The pandas Index from the underlying GeoDataFrame

    Examples:
        >>> import pandas as pd
        >>> from hmmatch.constructs.trace import Trace
        >>>
        >>> df = pd.DataFrame({
        ...     'latitude': [40.7128, 40.7131],
        ...     'longitude': [-74.0060, -74.0057],
        ...     'time': pd.to_datetime(['2024-01-01 08:00:00', '2024-01-01 08:00:05']),
        ... })
        >>> trace = Trace.from_dataframe(df)
        >>> first_sample = trace.samples[0]
    """

    _frame: GeoDataFrame

    def __init__(self, frame: GeoDataFrame):
        if frame.index.has_duplicates:
            duplicates = frame.index[frame.index.duplicated()].values
            raise IndexError(
                f"Trace cannot have duplicates in the index but found {duplicates}"
            )
        if TIME_COLUMN in frame.columns and not frame[TIME_COLUMN].is_monotonic_increasing:
            raise ValueError("Trace samples must be ordered by time")
        self._frame = frame

    def __getitem__(self, i) -> Trace:
        if isinstance(i, int):
            i = [i]
        new_frame = self._frame.iloc[i]
        return Trace(new_frame)

    def __len__(self):
        """Number of samples."""
        return len(self._frame)

    def __str__(self):
        output_lines = [
            "Hmmatch Trace object",
            f"frame: {self._frame}",
        ]
        return "\n".join(output_lines)

    def __repr__(self):
        return self.__str__()

    @property
    def index(self) -> pd.Index:
        """Get index to underlying GeoDataFrame."""
        return self._frame.index

    @property
    def crs(self) -> CRS:
        """Get Coordinate Reference System(CRS) to underlying GeoDataFrame."""
        return self._frame.crs

    @property
    def has_time(self) -> bool:
        return TIME_COLUMN in self._frame.columns

    @cached_property
    def coords(self) -> List[Coordinate]:
        """
        Get all positions of the trace as Coordinate objects, ids taken from the index.
        """
        coords_list = [
            Coordinate(i, g, self.crs)
            for i, g in zip(self._frame.index, self._frame.geometry)
        ]
        return coords_list

    @cached_property
    def samples(self) -> List[MatcherSample]:
        """
        Get all samples of the trace, in time order.

        Raises:
            ValueError: If the trace has no time column
        """
        if not self.has_time:
            raise ValueError(
                f"Trace has no '{TIME_COLUMN}' column; samples need a timestamp"
            )

        times = self._frame[TIME_COLUMN]
        if AZIMUTH_COLUMN in self._frame.columns:
            azimuths = self._frame[AZIMUTH_COLUMN]
        else:
            azimuths = [None] * len(self._frame)

        samples_list = []
        for coord, time, azimuth in zip(self.coords, times, azimuths):
            if azimuth is not None and pd.isna(azimuth):
                azimuth = None
            samples_list.append(
                MatcherSample(
                    sample_id=coord.coordinate_id,
                    time=pd.Timestamp(time).to_pydatetime(),
                    coordinate=coord,
                    azimuth=None if azimuth is None else float(azimuth),
                )
            )
        return samples_list

    @classmethod
    def from_geo_dataframe(
        cls,
        frame: GeoDataFrame,
        xy: bool = True,
        time_column: str = TIME_COLUMN,
        azimuth_column: Optional[str] = None,
    ) -> Trace:
        """
        Create a trace from a GeoPandas GeoDataFrame with Point geometries.

        Only the geometry, the time column and the azimuth column (if given) are kept.

        Args:
            frame: A GeoDataFrame with Point geometries, a valid CRS and unique index values
            xy: If True, reproject the trace to Web Mercator (EPSG:3857). Default is True.
            time_column: The name of the column holding the sample times. Default is "time".
            azimuth_column: The name of the column holding the sample headings in degrees,
                or None if the samples carry no heading

        Returns:
            A new Trace instance
        """
        data = {}
        if time_column in frame.columns:
            data[TIME_COLUMN] = pd.to_datetime(frame[time_column])
        if azimuth_column is not None:
            data[AZIMUTH_COLUMN] = frame[azimuth_column].astype(float)

        new_frame = GeoDataFrame(data, geometry=frame.geometry, index=frame.index)
        if xy:
            new_frame = new_frame.to_crs(XY_CRS)
        return Trace(new_frame)

    @classmethod
    def from_dataframe(
        cls,
        dataframe: pd.DataFrame,
        xy: bool = True,
        lat_column: str = "latitude",
        lon_column: str = "longitude",
        time_column: str = TIME_COLUMN,
        azimuth_column: Optional[str] = None,
    ) -> Trace:
        """
        Create a trace from a pandas DataFrame with latitude/longitude and time columns.

        Args:
            dataframe: A pandas DataFrame containing GPS coordinates in EPSG:4326 format
            xy: If True, reproject to Web Mercator (EPSG:3857). Default is True.
            lat_column: The name of the column containing latitude values. Default is "latitude".
            lon_column: The name of the column containing longitude values. Default is "longitude".
            time_column: The name of the column containing sample times. Default is "time".
            azimuth_column: The name of the column containing headings in degrees, if any

        Returns:
            A new Trace instance
        """
        frame = GeoDataFrame(
            dataframe,
            geometry=points_from_xy(dataframe[lon_column], dataframe[lat_column]),
            index=dataframe.index,
            crs=LATLON_CRS,
        )

        return Trace.from_geo_dataframe(frame, xy, time_column, azimuth_column)

    def to_crs(self, new_crs: CRS) -> Trace:
        """
        Transform the trace to a different coordinate reference system (CRS).

        Headings are kept as they are; they refer to true north.
        """
        new_frame = self._frame.to_crs(new_crs)
        return Trace(new_frame)
