"""
Service/topo_modules/crs/unifier.py

두 그래프가 하나의 미터 단위 투영 좌표계를 공유하도록 좌표계를 통일하고 재투영하는 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError
from shapely.geometry import LineString, Point

from Common.log import Log
from Function.decorators import log_execution_time, safe_run

from ..errors import CrsTransformFailure, InvalidParameter, NoProjectedCrsFound
from ..geograph.primitives import GeoEdge, GeoGraph, NodeIdx
from .resolver import (
    CoordinateReferenceResolver,
    authority_code,
    crs_from_code,
    epsg_authority_string,
)


@dataclass(frozen=True)
class _ProjectionPlan:
    """모든 좌표 변환이 성공한 뒤 그래프에 한 번에 반영할 변환 결과입니다."""

    source: str
    target: str
    target_crs: CRS
    node_geometries: Dict[NodeIdx, Point]
    edge_geometries: List[Tuple[GeoEdge, LineString]]


class CRSUnifier:
    """
    기준 그래프(graph_a)의 좌표계를 기준으로 두 그래프의 좌표계를 하나의 투영 좌표계로 맞춥니다.
    이후 모든 거리 계산은 미터 단위 유클리드 거리를 전제로 합니다.
    """

    def __init__(self, logger: Log, resolver: CoordinateReferenceResolver, datum: str = "WGS84"):
        self._logger = logger
        self._resolver = resolver
        self._datum = datum

    @safe_run
    @log_execution_time
    def ensure_common_projected_crs(self, graph_a: GeoGraph, graph_b: GeoGraph) -> CRS:
        """
        graph_a가 투영 좌표계이면 graph_b만 graph_a의 좌표계로 재투영하고,
        지리 좌표계이면 graph_a의 첫 노드 위치로 UTM 구역을 결정하여 두 그래프를 모두 재투영합니다.

        Returns:
            CRS: 두 그래프가 공유하게 된 투영 좌표계
        """
        if graph_a.crs.is_projected:
            code_a = authority_code(graph_a.crs)
            code_b = authority_code(graph_b.crs)
            if code_a != code_b:
                self._logger.log(f"[CRS:Unify] 비교 대상 그래프를 {epsg_authority_string(code_a)}로 투영합니다.", level="INFO")
                self.project_graph(graph_b, graph_a.crs)
            else:
                self._logger.log(f"[CRS:Unify] 두 그래프가 이미 {epsg_authority_string(code_a)}를 공유합니다.", level="INFO")
            return graph_a.crs

        utm_crs = self.get_utm_zone_for_graph(graph_a)
        utm_code = authority_code(utm_crs)
        self._logger.log(f"[CRS:Unify] 두 그래프를 {epsg_authority_string(utm_code)}로 투영합니다.", level="INFO")

        # 두 그래프의 변환이 모두 성공한 뒤에 반영
        plan_a = self._plan_projection(graph_a, utm_crs)
        plan_b = self._plan_projection(graph_b, utm_crs)
        self._apply_projection(graph_a, plan_a)
        self._apply_projection(graph_b, plan_b)
        return utm_crs

    def get_utm_zone_for_graph(self, graph: GeoGraph) -> CRS:
        """
        지리 좌표계 그래프의 첫 노드(ID 최소) 좌표를 포함하는 UTM 좌표계를 반환합니다.

        Raises:
            NoProjectedCrsFound: 그래프가 지리 좌표계가 아니거나, 노드가 없거나, UTM 구역이 조회되지 않는 경우
        """
        if not graph.crs.is_geographic:
            raise NoProjectedCrsFound(f"그래프가 지리 좌표계가 아닙니다: {graph.crs.name}")

        node_map = graph.node_map
        if not node_map:
            raise NoProjectedCrsFound("노드가 없어 UTM 구역을 결정할 수 없습니다.")

        first_node = node_map[min(node_map)]
        lon, lat = first_node.geometry.x, first_node.geometry.y

        codes = self._resolver.query_utm_zone(lon, lat, self._datum)
        if not codes:
            raise NoProjectedCrsFound(
                f"({lon}, {lat}) 지점에 대한 {self._datum} UTM 구역을 찾을 수 없습니다. {self._adhoc_hint(lon, lat)}"
            )
        return crs_from_code(codes[0])

    def project_graph(self, graph: GeoGraph, target_crs: CRS) -> None:
        """
        그래프의 모든 노드와 간선 좌표를 대상 좌표계로 변환하고 graph.crs를 교체합니다.
        간선의 첫/마지막 좌표는 변환된 끝점 노드 좌표로 맞춥니다.
        변환이 하나라도 실패하면 그래프는 변경되지 않습니다.
        """
        self._apply_projection(graph, self._plan_projection(graph, target_crs))

    def _plan_projection(self, graph: GeoGraph, target_crs: CRS) -> _ProjectionPlan:
        source = epsg_authority_string(authority_code(graph.crs))
        target = epsg_authority_string(authority_code(target_crs))
        transformer = Transformer.from_crs(source, target, always_xy=True)

        node_geometries: Dict[NodeIdx, Point] = {}
        for idx, node in graph.node_map.items():
            x, y = self._transform(transformer, [node.geometry.x], [node.geometry.y])
            node_geometries[idx] = Point(float(x[0]), float(y[0]))

        edge_geometries: List[Tuple[GeoEdge, LineString]] = []
        for edge in graph.iter_edges():
            coords = np.asarray(edge.geometry.coords, dtype=float)
            xs, ys = self._transform(transformer, coords[:, 0], coords[:, 1])
            projected = [(float(x), float(y)) for x, y in zip(xs, ys)]

            start = node_geometries[edge.start]
            end = node_geometries[edge.end]
            projected[0] = (start.x, start.y)
            projected[-1] = (end.x, end.y)
            edge_geometries.append((edge, LineString(projected)))

        return _ProjectionPlan(source, target, target_crs, node_geometries, edge_geometries)

    def _apply_projection(self, graph: GeoGraph, plan: _ProjectionPlan) -> None:
        for idx, geometry in plan.node_geometries.items():
            graph.get_node(idx).geometry = geometry
        for edge, geometry in plan.edge_geometries:
            edge.geometry = geometry

        graph.crs = plan.target_crs
        self._logger.log(
            f"[CRS:Project] {plan.source} -> {plan.target} 변환 완료 (노드={graph.node_count()}, 간선={graph.edge_count()})",
            level="DEBUG",
        )

    @staticmethod
    def _transform(transformer: Transformer, xs, ys):
        try:
            tx, ty = transformer.transform(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float), errcheck=True)
        except ProjError as e:
            raise CrsTransformFailure(f"좌표 변환 실패: {e}") from e

        tx = np.atleast_1d(tx)
        ty = np.atleast_1d(ty)
        if not (np.all(np.isfinite(tx)) and np.all(np.isfinite(ty))):
            raise CrsTransformFailure("좌표 변환 결과에 유한하지 않은 값이 포함되어 있습니다.")
        return tx, ty

    def _adhoc_hint(self, lon: float, lat: float) -> str:
        try:
            number, letter = self._resolver.utm_zone_number_and_letter(lon, lat)
            definition = self._resolver.build_utm_proj_definition(number, letter, self._datum)
        except InvalidParameter:
            return "(UTM 위도 밴드 범위 밖)"
        return f"(참고 투영 정의: {definition})"
