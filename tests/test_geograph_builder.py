import unittest
from unittest.mock import MagicMock

from pyproj import CRS
from shapely.geometry import LineString, Point

from Service.topo_modules.errors import InvalidGeometry, InvalidParameter
from Service.topo_modules.geograph import (
    GeoGraph,
    GeoGraphBuilder,
    GraphDiagnostics,
    NodeIndexer,
    validate_feature_map,
)


class GeoGraphBuilderTests(unittest.TestCase):
    def setUp(self):
        self.logger = MagicMock()
        self.builder = GeoGraphBuilder(self.logger)

    def test_shared_endpoint_becomes_single_node(self):
        lines = [
            LineString([(0, 0), (1, 0)]),
            LineString([(1, 0), (2, 0)]),
            LineString([(1, 0), (1, 1)]),
        ]
        graph = self.builder.build_from_lines(lines)

        self.assertEqual(graph.node_count(), 4)
        self.assertEqual(graph.edge_count(), 3)
        self.assertEqual(graph.edge_graph.degree(1), 3)
        self.assertEqual((graph.get_node(0).geometry.x, graph.get_node(0).geometry.y), (0.0, 0.0))
        self.assertEqual((graph.get_node(1).geometry.x, graph.get_node(1).geometry.y), (1.0, 0.0))

    def test_node_ids_follow_first_appearance(self):
        graph = self.builder.build_from_lines([[(5, 5), (6, 6)], [(6, 6), (0, 0)]])
        coords = {idx: (node.geometry.x, node.geometry.y) for idx, node in graph.node_map.items()}
        self.assertEqual(coords, {0: (5.0, 5.0), 1: (6.0, 6.0), 2: (0.0, 0.0)})

    def test_parallel_edges_are_preserved(self):
        lines = [
            LineString([(0, 0), (1, 0)]),
            LineString([(0, 0), (0.5, 0.5), (1, 0)]),
        ]
        graph = self.builder.build_from_lines(lines)

        self.assertEqual(graph.node_count(), 2)
        self.assertEqual(graph.edge_count(), 2)
        self.assertEqual(graph.parallel_edge_count(), 1)
        self.assertEqual(len(graph.edges_between(0, 1)), 2)

    def test_lines_with_fewer_than_two_coordinates_are_skipped(self):
        lines = [LineString(), [(3, 3)], LineString([(0, 0), (1, 1)])]
        graph = self.builder.build_from_lines(lines)

        self.assertEqual(graph.node_count(), 2)
        self.assertEqual(graph.edge_count(), 1)

    def test_edge_endpoints_match_node_geometry(self):
        lines = [LineString([(0, 0), (2, 3), (4, 0)]), LineString([(4, 0), (8, 0)])]
        graph = self.builder.build_from_lines(lines)

        for edge in graph.iter_edges():
            first = edge.geometry.coords[0]
            last = edge.geometry.coords[-1]
            start = graph.get_node(edge.start).geometry
            end = graph.get_node(edge.end).geometry
            self.assertEqual(first, (start.x, start.y))
            self.assertEqual(last, (end.x, end.y))

    def test_near_identical_endpoints_stay_distinct_without_tolerance(self):
        graph = self.builder.build_from_lines([[(0, 0), (1, 0)], [(1 + 1e-12, 0), (2, 0)]])
        self.assertEqual(graph.node_count(), 4)

    def test_snap_tolerance_merges_close_endpoints(self):
        builder = GeoGraphBuilder(self.logger, snap_tolerance=0.01)
        graph = builder.build_from_lines([[(0, 0), (1, 0)], [(1.005, 0), (2, 0)]])

        self.assertEqual(graph.node_count(), 3)
        second = list(graph.iter_edges())[1]
        self.assertEqual(second.start, 1)
        self.assertEqual(second.geometry.coords[0], (1.0, 0.0))

    def test_edge_data_is_stored_with_edges(self):
        graph = self.builder.build_from_lines_with_data(
            [[(0, 0), (1, 0)], [(1, 0), (2, 0)]],
            [{"name": "a", "lanes": 2}, None],
        )
        edges = list(graph.iter_edges())
        self.assertEqual(edges[0].data, {"name": "a", "lanes": 2})
        self.assertEqual(edges[1].data, {})

    def test_data_count_mismatch_raises(self):
        with self.assertRaises(InvalidParameter):
            self.builder.build_from_lines_with_data([[(0, 0), (1, 0)]], [])

    def test_default_crs_is_wgs84_and_explicit_crs_is_kept(self):
        self.assertEqual(self.builder.build_from_lines([]).crs.to_epsg(), 4326)
        graph = self.builder.build_from_lines([[(0, 0), (1, 0)]], CRS.from_epsg(32654))
        self.assertEqual(graph.crs.to_epsg(), 32654)

    def test_directed_graph_keeps_edge_direction(self):
        builder = GeoGraphBuilder(self.logger, directed=True)
        graph = builder.build_from_lines([[(0, 0), (1, 0)], [(1, 0), (0, 0)]])

        self.assertTrue(graph.is_directed)
        self.assertEqual(len(graph.edges_between(0, 1)), 1)
        self.assertEqual(len(graph.edges_between(1, 0)), 1)
        self.assertEqual(graph.parallel_edge_count(), 0)


class GeoGraphPrimitiveTests(unittest.TestCase):
    def test_insert_node_with_conflicting_geometry_raises(self):
        graph = GeoGraph()
        graph.insert_node(0, Point(0, 0))
        graph.insert_node(0, Point(0, 0))
        with self.assertRaises(InvalidGeometry):
            graph.insert_node(0, Point(1, 0))

    def test_insert_edge_rejects_conflicting_endpoint(self):
        graph = GeoGraph()
        graph.insert_edge(0, 1, LineString([(0, 0), (1, 0)]))
        with self.assertRaises(InvalidGeometry):
            graph.insert_edge(1, 2, LineString([(5, 5), (6, 6)]))

    def test_feature_map_validation(self):
        self.assertEqual(validate_feature_map({"a": 1, "b": 1.5, "c": "x", "d": None}), {"a": 1, "b": 1.5, "c": "x", "d": None})
        with self.assertRaises(InvalidParameter):
            validate_feature_map({"flag": True})
        with self.assertRaises(InvalidParameter):
            validate_feature_map({"values": [1, 2]})

    def test_node_indexer_rejects_negative_tolerance(self):
        with self.assertRaises(InvalidParameter):
            NodeIndexer(-1.0)

    def test_node_indexer_prefers_lowest_id_within_tolerance(self):
        indexer = NodeIndexer(1.0)
        self.assertEqual(indexer.get_index_for_coordinate((0, 0)), 0)
        self.assertEqual(indexer.get_index_for_coordinate((1.5, 0)), 1)
        self.assertEqual(indexer.get_index_for_coordinate((0.75, 0)), 0)


class GraphDiagnosticsTests(unittest.TestCase):
    def test_summary_counts(self):
        builder = GeoGraphBuilder(MagicMock())
        graph = builder.build_from_lines([
            [(0, 0), (1, 0)],
            [(0, 0), (1, 0)],
            [(10, 10), (11, 10)],
        ])
        summary = GraphDiagnostics(MagicMock()).report(graph, "test")

        self.assertEqual(summary["nodes"], 4)
        self.assertEqual(summary["edges"], 3)
        self.assertEqual(summary["parallel_edges"], 1)
        self.assertEqual(summary["components"], 2)
        self.assertEqual(summary["terminal_nodes"], 2)

    def test_empty_graph(self):
        summary = GraphDiagnostics(MagicMock()).summarize(GeoGraph())
        self.assertEqual(summary["nodes"], 0)
        self.assertEqual(summary["components"], 0)


if __name__ == "__main__":
    unittest.main()
