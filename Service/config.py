"""
Service/config.py

TOPO 평가 파이프라인의 동작을 제어하는 설정 모듈입니다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from Service.schemas import TopoParams


class TopoConfig(BaseSettings):
    """
    TOPO 평가 파이프라인의 핵심 파라미터를 정의하는 설정 클래스입니다.
    """

    resampling_distance: float = Field(
        default=11.0,
        description="간선 재표본화 목표 간격(m), 0 이하이면 표본점을 만들지 않음"
    )

    hole_radius: float = Field(
        default=6.0,
        description="제안/정답 표본점 매칭 허용 반경(m)"
    )

    node_snap_tolerance_m: float = Field(
        default=0.0,
        ge=0.0,
        description="끝점 노드 병합 허용 거리(m), 0이면 좌표가 정확히 같을 때만 병합"
    )

    utm_datum: str = Field(
        default="WGS84",
        description="지리 좌표계 입력을 투영할 UTM 구역의 측지 기준계 이름"
    )

    directed_graph: bool = Field(
        default=False,
        description="방향 그래프로 위상 구성 여부"
    )

    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="재표본화/후보 탐색 병렬 스레드 수 (미지정 시 기본값)"
    )

    data_dir: Path = Field(
        default=Path("Result"),
        description="매칭 결과 노드 파일을 저장할 폴더"
    )

    export_ground_truth_geojson: bool = Field(
        default=False,
        description="디버그 모드: 정답 간선을 GeoJSON으로 저장 여부"
    )

    log_retention_days: int = Field(
        default=3,
        ge=0,
        description="로그 파일 보관 기간(일)"
    )

    model_config = SettingsConfigDict(
        env_prefix="TOPO_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def to_params(self) -> TopoParams:
        return TopoParams(resampling_distance=self.resampling_distance, hole_radius=self.hole_radius)
