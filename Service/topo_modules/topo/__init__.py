"""
Service/topo_modules/topo/__init__.py

TOPO 지표 계산(재표본화, 매칭, 점수 산출) 모듈들을 외부로 노출합니다.
"""
from .primitives import F1ScoreResult, RoadPoint, TopoNode, TopoResult
from .resampling import resample_edge, segment_azimuth
from .matching import GroundTruthIndex, claim_candidates
from .scorer import TopoScorer, compute_f1_score, wrap_topo_nodes

__all__ = [
    "F1ScoreResult",
    "RoadPoint",
    "TopoNode",
    "TopoResult",
    "resample_edge",
    "segment_azimuth",
    "GroundTruthIndex",
    "claim_candidates",
    "TopoScorer",
    "compute_f1_score",
    "wrap_topo_nodes",
]
