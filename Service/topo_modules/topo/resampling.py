"""
Service/topo_modules/topo/resampling.py

간선을 전체 길이에 걸쳐 균등 간격의 표본점으로 재표본화하는 모듈입니다.
"""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple, Union

from shapely.geometry import LineString

from .primitives import RoadPoint

EdgeInput = Union[LineString, Sequence[Sequence[float]]]

HALF_PI = math.pi / 2.0


def segment_azimuth(start: Sequence[float], end: Sequence[float]) -> float:
    """
    선분의 방위각을 계산합니다. 방향은 구분하지 않으므로 x 성분이 음수가 되지 않도록 뒤집은 뒤
    atan2를 적용하며, 수직 선분은 항상 +π/2를 반환합니다.
    """
    dx = float(end[0]) - float(start[0])
    dy = float(end[1]) - float(start[1])
    if dx < 0:
        dx, dy = -dx, -dy

    azimuth = math.atan2(dy, dx)
    if azimuth == -HALF_PI:
        return HALF_PI
    return azimuth


def edge_coords(edge: EdgeInput) -> List[Tuple[float, float]]:
    if edge is None:
        return []
    if isinstance(edge, LineString):
        if edge.is_empty:
            return []
        return [(float(c[0]), float(c[1])) for c in edge.coords]
    return [(float(c[0]), float(c[1])) for c in edge]


def resample_edge(edge: EdgeInput, resampling_distance: float) -> List[RoadPoint]:
    """
    간선을 resampling_distance에 가까운 균등 간격으로 재표본화합니다.

    간격은 edge_length / floor(edge_length / resampling_distance)로 다시 계산되며
    (몫이 0이면 구간 1개), 첫 점과 마지막 점은 항상 원래 간선의 양 끝 좌표입니다.
    좌표가 2개 미만이거나 resampling_distance가 0 이하이면 빈 목록을 반환합니다.
    """
    coords = edge_coords(edge)
    if len(coords) < 2 or resampling_distance <= 0:
        return []

    segments = list(zip(coords[:-1], coords[1:]))
    seg_lengths = [math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in segments]
    edge_length = sum(seg_lengths)

    num_parts = int(math.floor(edge_length / resampling_distance))
    if num_parts == 0:
        num_parts = 1
    actual_step = edge_length / num_parts

    points = [RoadPoint(coords[0][0], coords[0][1], segment_azimuth(*segments[0]))]

    next_part = 1
    traversed = 0.0
    for (start, end), seg_length in zip(segments, seg_lengths):
        seg_end = traversed + seg_length
        azimuth = segment_azimuth(start, end)

        # 다음 경계가 현재 선분 안에 있는 동안 보간점을 추가
        while next_part < num_parts and next_part * actual_step < seg_end:
            t = (next_part * actual_step - traversed) / seg_length
            points.append(
                RoadPoint(
                    start[0] + t * (end[0] - start[0]),
                    start[1] + t * (end[1] - start[1]),
                    azimuth,
                )
            )
            next_part += 1
        traversed = seg_end

    points.append(RoadPoint(coords[-1][0], coords[-1][1], segment_azimuth(*segments[-1])))
    return points
