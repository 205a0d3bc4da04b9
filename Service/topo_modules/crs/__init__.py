"""
Service/topo_modules/crs/__init__.py

UTM 좌표계 조회와 그래프 좌표계 통일을 담당하는 모듈들을 외부로 노출합니다.
"""
from .resolver import (
    CoordinateReferenceResolver,
    EpsgCode,
    authority_code,
    crs_from_code,
    epsg_4326,
    epsg_authority_string,
)
from .unifier import CRSUnifier

__all__ = [
    "CoordinateReferenceResolver",
    "CRSUnifier",
    "EpsgCode",
    "authority_code",
    "crs_from_code",
    "epsg_4326",
    "epsg_authority_string",
]
