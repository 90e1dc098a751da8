from unittest import TestCase

import numpy as np
import pandas as pd
from geopandas import GeoDataFrame
from shapely.geometry import Point

from hmmatch.constructs.trace import Trace
from hmmatch.utils.crs import LATLON_CRS, XY_CRS


class TestTrace(TestCase):
    def setUp(self):
        self.df = pd.DataFrame(
            {
                "latitude": [40.7128, 40.7131, 40.7135],
                "longitude": [-74.0060, -74.0057, -74.0052],
                "time": pd.to_datetime(
                    [
                        "2024-01-01 08:00:00",
                        "2024-01-01 08:00:05",
                        "2024-01-01 08:00:10",
                    ]
                ),
                "heading": [45.0, np.nan, 50.0],
            }
        )

    def test_from_dataframe(self):
        trace = Trace.from_dataframe(self.df)

        self.assertEqual(len(trace), 3)
        self.assertEqual(trace.crs, XY_CRS)
        self.assertTrue(trace.has_time)

        samples = trace.samples
        self.assertEqual([s.sample_id for s in samples], [0, 1, 2])
        self.assertEqual(samples[1].seconds_since(samples[0]), 5.0)
        self.assertFalse(samples[0].has_azimuth)

    def test_from_dataframe_latlon(self):
        trace = Trace.from_dataframe(self.df, xy=False)

        self.assertEqual(trace.crs, LATLON_CRS)
        self.assertAlmostEqual(trace.coords[0].y, 40.7128)
        self.assertAlmostEqual(trace.coords[0].x, -74.0060)

    def test_azimuth_column(self):
        trace = Trace.from_dataframe(self.df, azimuth_column="heading")

        samples = trace.samples
        self.assertEqual(samples[0].azimuth, 45.0)
        self.assertIsNone(samples[1].azimuth)
        self.assertTrue(samples[2].has_azimuth)

    def test_samples_need_time(self):
        trace = Trace.from_dataframe(self.df.drop(columns=["time"]))

        self.assertFalse(trace.has_time)
        with self.assertRaises(ValueError):
            trace.samples

    def test_unordered_times(self):
        df = self.df.copy()
        df["time"] = df["time"].iloc[::-1].values

        with self.assertRaises(ValueError):
            Trace.from_dataframe(df)

    def test_duplicate_index(self):
        frame = GeoDataFrame(
            {"time": pd.to_datetime(["2024-01-01 08:00:00", "2024-01-01 08:00:05"])},
            geometry=[Point(0.0, 0.0), Point(1.0, 1.0)],
            index=[0, 0],
            crs=XY_CRS,
        )

        with self.assertRaises(IndexError):
            Trace(frame)

    def test_slice(self):
        trace = Trace.from_dataframe(self.df)

        self.assertEqual(len(trace[0]), 1)
        self.assertEqual(list(trace[1:3].index), [1, 2])

    def test_to_crs(self):
        trace = Trace.from_dataframe(self.df, xy=False)

        projected = trace.to_crs(XY_CRS)

        self.assertEqual(projected.crs, XY_CRS)
        self.assertEqual(len(projected.samples), 3)
