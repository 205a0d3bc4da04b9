"""
Service/container.py

애플리케이션의 모든 객체를 생성하고 의존성을 주입하여 실행 가능한 상태로 조립합니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from Common.log import Log

from Service.config import TopoConfig
from Service.topo_modules import (
    CoordinateReferenceResolver,
    CRSUnifier,
    GeoGraphBuilder,
    GISIO,
    GraphDiagnostics,
    TopoScorer,
)

from Service.topo_service import TopoService


@dataclass(frozen=True)
class BuiltApp:
    """조립이 완료된 애플리케이션 서비스 객체 묶음입니다."""
    topo_service: TopoService
    config: TopoConfig


def build_app(logger: Log, config: Optional[TopoConfig] = None) -> BuiltApp:
    """
    설정 로드 및 모든 내부 모듈의 의존성을 주입하여 BuiltApp 객체를 생성합니다.
    """
    topo_config = config or TopoConfig()

    gis_io = GISIO(logger)

    builder = GeoGraphBuilder(
        logger,
        snap_tolerance=topo_config.node_snap_tolerance_m,
        directed=topo_config.directed_graph,
    )
    diagnostics = GraphDiagnostics(logger)

    resolver = CoordinateReferenceResolver(logger)
    unifier = CRSUnifier(logger, resolver, datum=topo_config.utm_datum)

    scorer = TopoScorer(logger, max_workers=topo_config.max_workers)

    topo_service = TopoService(
        logger=logger,
        gis_io=gis_io,
        builder=builder,
        diagnostics=diagnostics,
        unifier=unifier,
        scorer=scorer,
        config=topo_config,
    )

    return BuiltApp(topo_service=topo_service, config=topo_config)
