"""
Service/topo_service.py

TOPO 평가 파이프라인의 전체 공정(로드, 그래프 구성, 좌표계 통일, 점수 계산, 결과 저장)을 제어하는 서비스 모듈입니다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from Common.log import Log
from Function.utils import resolve_output_dir
from Function.decorators import log_execution_time, safe_run
from Service.config import TopoConfig
from Service.schemas import GeofileLoadRequest, GeofileSaveRequest, TopoParams
from Service.topo_modules import (
    CRSUnifier,
    GeoGraph,
    GeoGraphBuilder,
    GISIO,
    GraphDiagnostics,
    TopoScorer,
)
from Service.topo_modules.topo import TopoResult

PROPOSAL_NODES_FILE = "proposal_nodes.gpkg"
GROUND_TRUTH_NODES_FILE = "ground_truth_nodes.gpkg"
GROUND_TRUTH_DUMP_FILE = "ground_truth.geojson"


class TopoService:
    """
    제안 도로망과 정답 도로망 파일을 받아 TOPO 지표를 계산하는 메인 서비스 클래스입니다.
    """

    def __init__(
        self,
        logger: Log,
        gis_io: GISIO,
        builder: GeoGraphBuilder,
        diagnostics: GraphDiagnostics,
        unifier: CRSUnifier,
        scorer: TopoScorer,
        config: Optional[TopoConfig] = None,
    ):
        self._logger = logger
        self._gis_io = gis_io
        self._builder = builder
        self._diagnostics = diagnostics
        self._unifier = unifier
        self._scorer = scorer
        self._config = config or TopoConfig()

    @safe_run
    @log_execution_time
    def run_pipeline(
        self,
        proposal_path: Union[str, Path],
        ground_truth_path: Union[str, Path],
        output_dir: Optional[Union[str, Path]] = None,
        params: Optional[TopoParams] = None,
    ) -> TopoResult:
        """
        두 도로망을 그래프로 구성하고 정답 도로망의 좌표계를 기준으로 통일한 뒤 TOPO 지표를 계산합니다.

        Args:
            proposal_path: 제안(평가 대상) 도로망 파일 경로
            ground_truth_path: 정답 도로망 파일 경로
            output_dir: 매칭 결과 노드 파일 저장 폴더 (미지정 시 설정값)
            params: 재표본화 간격/매칭 반경 (미지정 시 설정값)

        Returns:
            TopoResult: 점수와 매칭 상태가 기록된 노드 목록
        """
        params = params or self._config.to_params()
        target_dir = resolve_output_dir(output_dir, default=self._config.data_dir)

        proposal_graph = self._load_graph(proposal_path, "proposal")
        ground_truth_graph = self._load_graph(ground_truth_path, "ground_truth")

        if self._config.export_ground_truth_geojson:
            self._gis_io.save_lines(
                ground_truth_graph.edge_geometries(),
                ground_truth_graph.crs,
                GeofileSaveRequest(output_path=target_dir / GROUND_TRUTH_DUMP_FILE),
            )

        common_crs = self._unifier.ensure_common_projected_crs(ground_truth_graph, proposal_graph)

        result = self._scorer.calculate_topo(
            proposal_graph.edge_geometries(),
            ground_truth_graph.edge_geometries(),
            params,
        )

        self._gis_io.save_topo_nodes(
            result.proposal_nodes, common_crs, GeofileSaveRequest(output_path=target_dir / PROPOSAL_NODES_FILE)
        )
        self._gis_io.save_topo_nodes(
            result.ground_truth_nodes, common_crs, GeofileSaveRequest(output_path=target_dir / GROUND_TRUTH_NODES_FILE)
        )

        score = result.f1_score_result
        self._logger.log(
            f"[Pipeline] 완료 - precision={score.precision:.4f} recall={score.recall:.4f} f1={score.f1:.4f}",
            level="INFO",
            create_log=True,
        )
        return result

    def _load_graph(self, path: Union[str, Path], label: str) -> GeoGraph:
        """파일을 로드하여 속성을 포함한 위상 그래프를 구성하고 진단 정보를 기록합니다."""
        loaded = self._gis_io.load_lines(GeofileLoadRequest(file_path=Path(path)))
        graph = self._builder.build_from_lines_with_data(loaded.lines, loaded.data, loaded.crs)
        self._diagnostics.report(graph, label)
        return graph
