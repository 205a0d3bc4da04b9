"""
Service/topo_modules/geograph/primitives.py

위상 그래프를 구성하는 노드, 간선 및 좌표계를 보유한 그래프 자료 구조 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import networkx as nx
from pyproj import CRS
from shapely.geometry import LineString, Point

from ..errors import InvalidGeometry, InvalidParameter

AttributeValue = Union[str, int, float, None]
FeatureMap = Dict[str, AttributeValue]

NodeIdx = int
EdgeKey = Tuple[NodeIdx, NodeIdx, int]


def validate_feature_map(data: Optional[FeatureMap]) -> FeatureMap:
    """
    속성 값이 문자열/정수/실수/None 중 하나인지 검증하고 사본을 반환합니다.

    Raises:
        InvalidParameter: 허용되지 않는 키 또는 값 타입이 포함된 경우
    """
    if data is None:
        return {}

    validated: FeatureMap = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise InvalidParameter(f"속성 키는 문자열이어야 합니다: {key!r}")
        if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
            raise InvalidParameter(f"지원하지 않는 속성 값 타입입니다: {key}={value!r} ({type(value).__name__})")
        validated[key] = value
    return validated


@dataclass
class GeoNode:
    geometry: Point
    data: FeatureMap = field(default_factory=dict)


@dataclass
class GeoEdge:
    """간선의 선형 geometry와 시작/끝 노드 ID를 함께 보관합니다."""
    geometry: LineString
    start: NodeIdx
    end: NodeIdx
    data: FeatureMap = field(default_factory=dict)


class GeoGraph:
    """
    정수 노드 ID 기반의 다중 그래프입니다. 평행 간선은 병합하지 않고 모두 보존하며,
    모든 노드/간선 좌표는 하나의 좌표계(crs)를 공유합니다.
    """

    def __init__(self, crs: Optional[CRS] = None, directed: bool = False):
        self.crs: CRS = crs if crs is not None else CRS.from_epsg(4326)
        self._graph = nx.MultiDiGraph() if directed else nx.MultiGraph()
        self._edge_order: List[EdgeKey] = []

    @property
    def edge_graph(self) -> nx.MultiGraph:
        return self._graph

    @property
    def is_directed(self) -> bool:
        return self._graph.is_directed()

    @property
    def node_map(self) -> Dict[NodeIdx, GeoNode]:
        return {idx: self._graph.nodes[idx]["node"] for idx in sorted(self._graph.nodes)}

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def get_node(self, idx: NodeIdx) -> GeoNode:
        return self._graph.nodes[idx]["node"]

    def insert_node(self, idx: NodeIdx, geometry: Point) -> None:
        """
        노드를 추가합니다. 이미 존재하는 ID라면 좌표가 정확히 일치하는지만 확인합니다.

        Raises:
            InvalidGeometry: 같은 ID에 다른 좌표가 이미 등록된 경우
        """
        if idx in self._graph:
            existing = self._graph.nodes[idx]["node"].geometry
            if (existing.x, existing.y) != (geometry.x, geometry.y):
                raise InvalidGeometry(
                    f"노드 ID({idx})에 다른 좌표가 이미 존재합니다: "
                    f"기존=({existing.x}, {existing.y}), 신규=({geometry.x}, {geometry.y})"
                )
            return
        self._graph.add_node(idx, node=GeoNode(geometry=geometry))

    def insert_edge(
        self,
        start_node_idx: NodeIdx,
        end_node_idx: NodeIdx,
        geometry: LineString,
        data: Optional[FeatureMap] = None,
    ) -> EdgeKey:
        """
        간선을 추가합니다. 양 끝 좌표로 노드를 등록하며, 같은 노드 쌍에 간선이 있으면 평행 간선으로 덧붙입니다.

        Returns:
            EdgeKey: (시작 노드, 끝 노드, 평행 간선 키)
        """
        coords = list(geometry.coords)
        if len(coords) < 2:
            raise InvalidGeometry("좌표가 2개 미만인 간선은 추가할 수 없습니다.")

        self.insert_node(start_node_idx, Point(coords[0]))
        self.insert_node(end_node_idx, Point(coords[-1]))

        edge = GeoEdge(geometry=geometry, start=start_node_idx, end=end_node_idx, data=validate_feature_map(data))
        key = self._graph.add_edge(start_node_idx, end_node_idx, edge=edge)
        edge_key = (start_node_idx, end_node_idx, key)
        self._edge_order.append(edge_key)
        return edge_key

    def edges_between(self, u: NodeIdx, v: NodeIdx) -> List[GeoEdge]:
        """두 노드 사이의 평행 간선 목록을 추가된 순서대로 반환합니다."""
        bundle = self._graph.get_edge_data(u, v)
        if not bundle:
            return []
        return [bundle[key]["edge"] for key in sorted(bundle)]

    def iter_edges(self) -> Iterator[GeoEdge]:
        for u, v, key in self._edge_order:
            yield self._graph.edges[u, v, key]["edge"]

    def edge_geometries(self) -> List[LineString]:
        return [edge.geometry for edge in self.iter_edges()]

    def parallel_edge_count(self) -> int:
        """같은 노드 쌍을 공유하는 추가 간선(첫 간선 제외)의 개수를 반환합니다."""
        pairs = set()
        for u, v, _key in self._edge_order:
            pairs.add((u, v) if self.is_directed else tuple(sorted((u, v))))
        return len(self._edge_order) - len(pairs)
