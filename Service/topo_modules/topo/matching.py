"""
Service/topo_modules/topo/matching.py

정답 표본점 공간 인덱스를 구성하고, 제안 표본점을 반경 내 정답 표본점에 탐욕적으로 매칭하는 모듈입니다.
"""
from __future__ import annotations

import math
from typing import List, Sequence, Set, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ..errors import SpatialIndexFailure
from .primitives import TopoNode

Candidate = Tuple[float, int]  # (제곱 거리, 정답 노드 ID)


class GroundTruthIndex:
    """
    정답 TopoNode 좌표에 대한 2차원 점 인덱스입니다.
    반경 질의 결과는 (제곱 거리, 노드 ID) 쌍이며 거리순 정렬을 보장하지 않습니다.
    """

    def __init__(self, nodes: Sequence[TopoNode]):
        self._ids = np.fromiter((node.id for node in nodes), dtype=np.int64, count=len(nodes))
        self._coords = np.array([node.point.coord for node in nodes], dtype=float).reshape(-1, 2)
        self._tree = None
        if len(self._coords):
            try:
                self._tree = cKDTree(self._coords)
            except (ValueError, RuntimeError) as e:
                raise SpatialIndexFailure(f"정답 표본점 인덱스 생성 실패: {e}") from e

    def __len__(self) -> int:
        return len(self._ids)

    def query_within(self, coords: np.ndarray, squared_radius: float) -> List[List[Candidate]]:
        """
        각 질의점에 대해 제곱 거리 squared_radius 이내의 후보를 인덱스가 반환한 순서대로 돌려줍니다.
        """
        coords = np.asarray(coords, dtype=float).reshape(-1, 2)
        if self._tree is None or len(coords) == 0:
            return [[] for _ in range(len(coords))]

        radius = math.sqrt(squared_radius)
        try:
            hits = self._tree.query_ball_point(coords, r=radius, return_sorted=False)
        except (ValueError, RuntimeError) as e:
            raise SpatialIndexFailure(f"정답 표본점 반경 질의 실패: {e}") from e

        results: List[List[Candidate]] = []
        for query, positions in zip(coords, hits):
            candidates: List[Candidate] = []
            for pos in positions:
                dx = self._coords[pos, 0] - query[0]
                dy = self._coords[pos, 1] - query[1]
                sq_dist = float(dx * dx + dy * dy)
                if sq_dist <= squared_radius:
                    candidates.append((sq_dist, int(self._ids[pos])))
            results.append(candidates)
        return results


def claim_candidates(
    proposal_nodes: Sequence[TopoNode],
    ground_truth_nodes: Sequence[TopoNode],
    candidates: Sequence[Sequence[Candidate]],
) -> Set[int]:
    """
    제안 노드를 ID 오름차순으로 순회하며, 후보 목록 순서상 아직 점유되지 않은 첫 정답 노드를 점유합니다.
    최근접 또는 전역 최적 매칭이 아니며, 결과는 후보 목록의 순서에 의존합니다.

    Args:
        proposal_nodes: 제안 노드 목록 (candidates와 같은 순서)
        ground_truth_nodes: 정답 노드 목록 (ID로 조회)
        candidates: 제안 노드별 (제곱 거리, 정답 노드 ID) 후보 목록

    Returns:
        Set[int]: 점유된 정답 노드 ID 집합
    """
    gt_by_id = {node.id: node for node in ground_truth_nodes}
    claimed: Set[int] = set()

    order = sorted(range(len(proposal_nodes)), key=lambda i: proposal_nodes[i].id)
    for i in order:
        proposal = proposal_nodes[i]
        for sq_dist, gt_id in candidates[i]:
            if gt_id in claimed:
                continue
            distance = math.sqrt(sq_dist)
            proposal.claim(distance)
            gt_by_id[gt_id].claim(distance)
            claimed.add(gt_id)
            break
    return claimed
