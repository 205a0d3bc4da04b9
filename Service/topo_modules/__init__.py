"""
Service/topo_modules/__init__.py

TOPO 평가 파이프라인 구성에 필요한 주요 모듈들을 외부로 노출합니다.
"""
from .errors import (
    CrsQueryFailure,
    CrsTransformFailure,
    InvalidCrsAuthority,
    InvalidGeometry,
    InvalidParameter,
    NoProjectedCrsFound,
    SpatialIndexFailure,
    TopoError,
)
from .geograph import GeoGraph, GeoGraphBuilder, GraphDiagnostics
from .crs import CoordinateReferenceResolver, CRSUnifier
from .topo import TopoScorer
from .gis_io import GISIO, GeoreferencedLines

__all__ = [
    "CrsQueryFailure",
    "CrsTransformFailure",
    "InvalidCrsAuthority",
    "InvalidGeometry",
    "InvalidParameter",
    "NoProjectedCrsFound",
    "SpatialIndexFailure",
    "TopoError",
    "GeoGraph",
    "GeoGraphBuilder",
    "GraphDiagnostics",
    "CoordinateReferenceResolver",
    "CRSUnifier",
    "TopoScorer",
    "GISIO",
    "GeoreferencedLines",
]
