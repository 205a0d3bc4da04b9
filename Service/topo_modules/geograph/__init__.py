"""
Service/topo_modules/geograph/__init__.py

선형 데이터를 위상 그래프로 변환하는 그래프 모듈들을 외부로 노출합니다.
"""
from .primitives import AttributeValue, FeatureMap, GeoEdge, GeoGraph, GeoNode, validate_feature_map
from .builder import GeoGraphBuilder, NodeIndexer
from .diagnostics import GraphDiagnostics

__all__ = [
    "AttributeValue",
    "FeatureMap",
    "GeoEdge",
    "GeoGraph",
    "GeoNode",
    "validate_feature_map",
    "GeoGraphBuilder",
    "NodeIndexer",
    "GraphDiagnostics",
]
