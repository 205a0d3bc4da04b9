"""
Service/topo_modules/topo/primitives.py

TOPO 지표 계산에 사용되는 표본점, 매칭 노드 및 결과 자료 구조를 정의합니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..geograph.primitives import AttributeValue


@dataclass(frozen=True)
class RoadPoint:
    """재표본화로 생성된 좌표와 진행 방위각(라디안)입니다."""
    x: float
    y: float
    azimuth: float

    @property
    def coord(self) -> tuple:
        return self.x, self.y


@dataclass
class TopoNode:
    """
    재표본화 점에 순번 ID와 매칭 상태를 부여한 노드입니다.
    매칭 단계에서 한 번만 점유(claim)되며 이후에는 변경되지 않습니다.
    """
    id: int
    point: RoadPoint
    matched: bool = False
    match_distance: Optional[float] = None

    def claim(self, distance: float) -> None:
        if self.matched:
            raise ValueError(f"이미 매칭된 노드입니다: id={self.id}")
        self.matched = True
        self.match_distance = distance

    def to_feature_attributes(self) -> Dict[str, AttributeValue]:
        return {
            "id": self.id,
            "matched": int(self.matched),
            "match_distance": self.match_distance,
            "azimuth": self.point.azimuth,
        }


@dataclass(frozen=True)
class F1ScoreResult:
    precision: float
    recall: float
    f1: float


@dataclass
class TopoResult:
    f1_score_result: F1ScoreResult
    ground_truth_nodes: List[TopoNode] = field(default_factory=list)
    proposal_nodes: List[TopoNode] = field(default_factory=list)

    @property
    def true_positives(self) -> int:
        return sum(1 for node in self.ground_truth_nodes if node.matched)
