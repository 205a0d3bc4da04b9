import math
import unittest

from shapely.geometry import LineString, Point

from Service.topo_modules.topo import resample_edge, segment_azimuth


class SegmentAzimuthTests(unittest.TestCase):
    def test_horizontal_segment_ignores_direction(self):
        self.assertEqual(segment_azimuth((0, 0), (1, 0)), 0.0)
        self.assertEqual(segment_azimuth((1, 0), (0, 0)), 0.0)

    def test_vertical_segment_is_always_positive_half_pi(self):
        self.assertAlmostEqual(segment_azimuth((0, 0), (0, 1)), math.pi / 2)
        self.assertAlmostEqual(segment_azimuth((0, 1), (0, 0)), math.pi / 2)

    def test_diagonal_segments(self):
        self.assertAlmostEqual(segment_azimuth((0, 0), (1, 1)), math.pi / 4)
        self.assertAlmostEqual(segment_azimuth((1, 1), (0, 0)), math.pi / 4)
        self.assertAlmostEqual(segment_azimuth((0, 0), (1, -1)), -math.pi / 4)
        self.assertAlmostEqual(segment_azimuth((0, 0), (-1, 1)), -math.pi / 4)

    def test_range_is_half_open(self):
        for end in [(1, 5), (-3, 2), (4, -7), (-1, -1), (0, -2)]:
            azimuth = segment_azimuth((0, 0), end)
            self.assertGreater(azimuth, -math.pi / 2)
            self.assertLessEqual(azimuth, math.pi / 2)


class ResampleEdgeTests(unittest.TestCase):
    def test_degenerate_inputs_yield_no_points(self):
        self.assertEqual(resample_edge(LineString(), 1.0), [])
        self.assertEqual(resample_edge([(0, 0)], 1.0), [])
        self.assertEqual(resample_edge([(0, 0), (10, 0)], 0.0), [])
        self.assertEqual(resample_edge([(0, 0), (10, 0)], -1.0), [])

    def test_short_edge_keeps_only_endpoints(self):
        points = resample_edge([(0, 0), (3, 0)], 10.0)
        self.assertEqual([p.coord for p in points], [(0.0, 0.0), (3.0, 0.0)])

    def test_step_is_recomputed_from_floor(self):
        # 10 / 3 -> 3개 구간, 간격 10/3
        points = resample_edge([(0, 0), (10, 0)], 3.0)
        xs = [p.x for p in points]
        self.assertEqual(len(points), 4)
        for actual, expected in zip(xs, [0.0, 10 / 3, 20 / 3, 10.0]):
            self.assertAlmostEqual(actual, expected)

    def test_endpoints_are_exact(self):
        edge = LineString([(0.1, 0.2), (3.3, 4.4), (7.7, 1.1)])
        points = resample_edge(edge, 0.7)
        self.assertEqual(points[0].coord, (0.1, 0.2))
        self.assertEqual(points[-1].coord, (7.7, 1.1))

    def test_samples_follow_polyline_with_segment_azimuth(self):
        points = resample_edge([(0, 0), (5, 0), (5, 5)], 2.5)

        expected = [(0, 0), (2.5, 0), (5, 0), (5, 2.5), (5, 5)]
        self.assertEqual(len(points), len(expected))
        for point, (ex, ey) in zip(points, expected):
            self.assertAlmostEqual(point.x, ex)
            self.assertAlmostEqual(point.y, ey)

        self.assertEqual(points[0].azimuth, 0.0)
        self.assertEqual(points[1].azimuth, 0.0)
        self.assertAlmostEqual(points[3].azimuth, math.pi / 2)
        self.assertAlmostEqual(points[-1].azimuth, math.pi / 2)

    def test_consecutive_samples_are_equally_spaced_along_the_edge(self):
        edge = LineString([(0, 0), (4, 3), (4, 13), (20, 13)])
        points = resample_edge(edge, 2.0)

        distances = [edge.project(Point(p.coord)) for p in points]
        gaps = [b - a for a, b in zip(distances[:-1], distances[1:])]
        step = edge.length / math.floor(edge.length / 2.0)
        for gap in gaps:
            self.assertAlmostEqual(gap, step, places=6)
        self.assertEqual(len(points), math.floor(edge.length / 2.0) + 1)

    def test_zero_length_edge(self):
        points = resample_edge([(1, 1), (1, 1)], 5.0)
        self.assertEqual([p.coord for p in points], [(1.0, 1.0), (1.0, 1.0)])


if __name__ == "__main__":
    unittest.main()
