"""
Service/topo_modules/topo/scorer.py

제안 도로망과 정답 도로망의 표본점을 반경 기반으로 매칭하여 TOPO 정밀도/재현율/F1을 계산하는 모듈입니다.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from itertools import repeat
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

import numpy as np

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.schemas import TopoParams

from .matching import Candidate, GroundTruthIndex, claim_candidates
from .primitives import F1ScoreResult, RoadPoint, TopoNode, TopoResult
from .resampling import EdgeInput, resample_edge

R = TypeVar("R")

LOOKUP_CHUNK_SIZE = 4096


def compute_f1_score(tp: int, proposal_count: int, ground_truth_count: int) -> F1ScoreResult:
    """
    정밀도/재현율/F1을 계산합니다. 분모가 0이면 예외 대신 NaN을 반환합니다.
    """
    fp = proposal_count - tp
    fn = ground_truth_count - tp

    precision = tp / (tp + fp) if (tp + fp) else float("nan")
    recall = tp / (tp + fn) if (tp + fn) else float("nan")
    denom = precision + recall
    f1 = 2 * precision * recall / denom if denom else float("nan")
    return F1ScoreResult(precision=precision, recall=recall, f1=f1)


def wrap_topo_nodes(point_sequences: Iterable[Sequence[RoadPoint]]) -> List[TopoNode]:
    """간선별 표본점을 간선-위치 순서로 펼치고 0부터 순번 ID를 부여합니다."""
    nodes: List[TopoNode] = []
    for points in point_sequences:
        for point in points:
            nodes.append(TopoNode(id=len(nodes), point=point))
    return nodes


class TopoScorer:
    """
    재표본화와 후보 탐색은 간선/노드 단위로 병렬 실행하고,
    점유(claim) 단계는 제안 노드 ID 오름차순으로 단일 스레드에서 수행합니다.
    """

    def __init__(self, logger: Log, max_workers: Optional[int] = None):
        self._logger = logger
        self._max_workers = max_workers

    @safe_run
    @log_execution_time
    def calculate_topo(
        self,
        proposal_edges: Sequence[EdgeInput],
        ground_truth_edges: Sequence[EdgeInput],
        params: TopoParams,
    ) -> TopoResult:
        """
        TOPO 지표를 계산합니다. 두 간선 집합은 같은 미터 단위 좌표계에 있어야 합니다.

        Args:
            proposal_edges: 제안 도로망 간선 geometry 목록
            ground_truth_edges: 정답 도로망 간선 geometry 목록
            params (TopoParams): 재표본화 간격과 매칭 반경

        Returns:
            TopoResult: 점수와 매칭 상태가 기록된 제안/정답 노드 목록
        """
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            proposal_nodes = wrap_topo_nodes(
                self._map(executor, lambda edge: resample_edge(edge, params.resampling_distance), proposal_edges)
            )
            ground_truth_nodes = wrap_topo_nodes(
                self._map(executor, lambda edge: resample_edge(edge, params.resampling_distance), ground_truth_edges)
            )
            self._logger.log(
                f"[Topo:Resample] 간격={params.resampling_distance} "
                f"제안 표본점={len(proposal_nodes)} 정답 표본점={len(ground_truth_nodes)}",
                level="INFO",
            )

            gt_index = GroundTruthIndex(ground_truth_nodes)
            squared_radius = params.hole_radius * params.hole_radius
            candidates = self._find_candidates(executor, gt_index, proposal_nodes, squared_radius)

        claimed = claim_candidates(proposal_nodes, ground_truth_nodes, candidates)

        score = compute_f1_score(len(claimed), len(proposal_nodes), len(ground_truth_nodes))
        if not proposal_nodes or not ground_truth_nodes:
            self._logger.log("[Topo:Score] 표본점이 없어 점수가 NaN으로 계산되었습니다.", level="WARNING")

        self._logger.log(
            f"[Topo:Score] TP={len(claimed)} precision={score.precision:.4f} "
            f"recall={score.recall:.4f} f1={score.f1:.4f} (반경={params.hole_radius})",
            level="INFO",
        )
        return TopoResult(
            f1_score_result=score,
            ground_truth_nodes=ground_truth_nodes,
            proposal_nodes=proposal_nodes,
        )

    def _find_candidates(
        self,
        executor: ThreadPoolExecutor,
        gt_index: GroundTruthIndex,
        proposal_nodes: Sequence[TopoNode],
        squared_radius: float,
    ) -> List[List[Candidate]]:
        """제안 노드별 반경 내 정답 후보를 청크 단위로 병렬 조회합니다. 결과는 제안 노드 순서를 유지합니다."""
        coords = np.array([node.point.coord for node in proposal_nodes], dtype=float).reshape(-1, 2)
        chunks = [coords[i:i + LOOKUP_CHUNK_SIZE] for i in range(0, len(coords), LOOKUP_CHUNK_SIZE)]

        candidates: List[List[Candidate]] = []
        for chunk_result in self._map(executor, gt_index.query_within, chunks, repeat(squared_radius)):
            candidates.extend(chunk_result)

        self._logger.log(
            f"[Topo:Match] 후보 보유 제안 표본점={sum(1 for c in candidates if c)}/{len(candidates)}",
            level="DEBUG",
        )
        return candidates

    def _map(self, executor: ThreadPoolExecutor, func: Callable[..., R], *iterables) -> List[R]:
        if self._max_workers == 1:
            return list(map(func, *iterables))
        return list(executor.map(func, *iterables))
