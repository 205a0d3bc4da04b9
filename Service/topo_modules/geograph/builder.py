"""
Service/topo_modules/geograph/builder.py

서로 독립적인 선형 데이터로부터 끝점을 공유하는 위상 그래프를 구성하는 빌더 모듈입니다.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from pyproj import CRS
from rtree import index
from rtree.exceptions import RTreeError
from shapely.geometry import LineString

from Common.log import Log
from Function.decorators import log_execution_time, safe_run

from ..errors import InvalidParameter, SpatialIndexFailure
from .primitives import FeatureMap, GeoGraph, NodeIdx

Coordinate = Tuple[float, float]
LineInput = Union[LineString, Sequence[Sequence[float]]]


class NodeIndexer:
    """
    점 공간 인덱스(R-tree)로 좌표별 노드 ID를 발급합니다.

    tolerance가 0이면 좌표가 정확히 일치할 때만 기존 노드를 재사용합니다.
    부동 소수점 오차만큼 어긋난 끝점도 서로 다른 노드가 되므로 위상이 끊길 수 있습니다.
    """

    def __init__(self, tolerance: float = 0.0):
        if tolerance < 0:
            raise InvalidParameter(f"노드 스냅 허용 오차는 음수일 수 없습니다: {tolerance}")
        self._tolerance = float(tolerance)
        self._rtree = index.Index()
        self._coords: List[Coordinate] = []

    def coordinate_of(self, idx: NodeIdx) -> Coordinate:
        return self._coords[idx]

    def get_index_for_coordinate(self, coord: Sequence[float]) -> NodeIdx:
        """좌표에 해당하는 기존 노드 ID를 반환하고, 없으면 다음 순번으로 새 노드를 등록합니다."""
        x, y = float(coord[0]), float(coord[1])

        existing = self._locate(x, y)
        if existing is not None:
            return existing

        new_idx = len(self._coords)
        try:
            self._rtree.insert(new_idx, (x, y, x, y))
        except RTreeError as e:
            raise SpatialIndexFailure(f"노드 인덱스 삽입 실패: ({x}, {y}) - {e}") from e
        self._coords.append((x, y))
        return new_idx

    def _locate(self, x: float, y: float) -> Optional[NodeIdx]:
        tol = self._tolerance
        try:
            candidates = list(self._rtree.intersection((x - tol, y - tol, x + tol, y + tol)))
        except RTreeError as e:
            raise SpatialIndexFailure(f"노드 인덱스 질의 실패: ({x}, {y}) - {e}") from e

        matched = []
        for idx in candidates:
            cx, cy = self._coords[idx]
            if tol == 0.0:
                if cx == x and cy == y:
                    matched.append(idx)
            elif math.hypot(cx - x, cy - y) <= tol:
                matched.append(idx)

        return min(matched) if matched else None


class GeoGraphBuilder:
    """
    선형 목록을 입력 순서대로 순회하며 끝점 노드를 중복 없이 발급하고 간선을 추가합니다.
    """

    def __init__(self, logger: Log, snap_tolerance: float = 0.0, directed: bool = False):
        self._logger = logger
        self._snap_tolerance = snap_tolerance
        self._directed = directed

    @safe_run
    @log_execution_time
    def build_from_lines(self, lines: Iterable[LineInput], crs: Optional[CRS] = None) -> GeoGraph:
        """
        선형 목록으로 위상 그래프를 생성합니다. 노드 ID는 0부터 처음 등장한 순서대로 부여됩니다.

        Args:
            lines: shapely LineString 또는 좌표 시퀀스 목록
            crs: 그래프 좌표계 (미지정 시 EPSG:4326)

        Returns:
            GeoGraph: 생성된 위상 그래프
        """
        return self._build(lines, None, crs)

    @safe_run
    @log_execution_time
    def build_from_lines_with_data(
        self,
        lines: Sequence[LineInput],
        data: Sequence[Optional[FeatureMap]],
        crs: Optional[CRS] = None,
    ) -> GeoGraph:
        """
        build_from_lines와 같으며, 각 선형에 대응하는 속성을 간선 데이터로 함께 저장합니다.

        Raises:
            InvalidParameter: 선형 수와 속성 수가 다른 경우
        """
        if len(lines) != len(data):
            raise InvalidParameter(f"선형 수({len(lines)})와 속성 수({len(data)})가 일치해야 합니다.")
        return self._build(lines, data, crs)

    def _build(
        self,
        lines: Iterable[LineInput],
        data: Optional[Sequence[Optional[FeatureMap]]],
        crs: Optional[CRS],
    ) -> GeoGraph:
        indexer = NodeIndexer(self._snap_tolerance)
        graph = GeoGraph(crs=crs, directed=self._directed)

        skipped = 0
        for i, line in enumerate(lines):
            coords = self._to_coords(line)
            if len(coords) < 2:
                skipped += 1
                continue

            start_idx = indexer.get_index_for_coordinate(coords[0])
            end_idx = indexer.get_index_for_coordinate(coords[-1])

            geometry = self._snap_endpoints(line, coords, indexer.coordinate_of(start_idx), indexer.coordinate_of(end_idx))
            graph.insert_edge(start_idx, end_idx, geometry, data[i] if data is not None else None)

        if skipped:
            self._logger.log(f"[GeoGraph:Build] 좌표 2개 미만 선형 {skipped}개 제외", level="DEBUG")
        self._logger.log(
            f"[GeoGraph:Build] 그래프 생성 완료: 노드={graph.node_count()} 간선={graph.edge_count()}",
            level="INFO",
        )
        return graph

    @staticmethod
    def _to_coords(line: LineInput) -> List[Coordinate]:
        if line is None:
            return []
        if isinstance(line, LineString):
            if line.is_empty:
                return []
            return [(float(c[0]), float(c[1])) for c in line.coords]
        return [(float(c[0]), float(c[1])) for c in line]

    @staticmethod
    def _snap_endpoints(
        line: LineInput,
        coords: List[Coordinate],
        start_node: Coordinate,
        end_node: Coordinate,
    ) -> LineString:
        # 허용 오차로 기존 노드에 스냅된 경우 간선 끝점을 노드 좌표로 옮긴다
        if coords[0] == start_node and coords[-1] == end_node:
            return line if isinstance(line, LineString) else LineString(coords)
        snapped = list(coords)
        snapped[0] = start_node
        snapped[-1] = end_node
        return LineString(snapped)
