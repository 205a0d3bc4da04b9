"""
Service/topo_modules/gis_io.py

도로망 선형 데이터(GPKG/GeoJSON/SHP)의 로드와 TOPO 매칭 결과 저장을 담당하는 모듈입니다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import geopandas as gpd
import numpy as np
import pandas as pd
from pyproj import CRS
from shapely.geometry import LineString, Point

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.schemas import GeofileLoadRequest, GeofileSaveRequest
from Service.topo_modules.geograph import AttributeValue, FeatureMap
from Service.topo_modules.topo import TopoNode


@dataclass(frozen=True)
class GeoreferencedLines:
    """좌표계가 확인된 선형 geometry 목록과 행별 속성입니다."""
    lines: List[LineString]
    data: List[FeatureMap]
    crs: CRS


class GISIO:
    """
    도로망 파일을 LineString 목록으로 읽고, 매칭된 표본점을 포인트 레이어로 저장합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    @safe_run
    @log_execution_time
    def load_lines(self, request: GeofileLoadRequest) -> GeoreferencedLines:
        """
        파일을 로드하여 MultiLineString을 분해하고 선형이 아닌 객체는 경고 후 제외합니다.

        Args:
            request (GeofileLoadRequest): 파일 경로를 포함한 로드 요청 객체

        Returns:
            GeoreferencedLines: LineString 목록, 속성 목록, 좌표계
        """
        gdf = gpd.read_file(request.file_path)

        if gdf.crs is None:
            raise ValueError(f"입력 데이터에 CRS가 없습니다: {request.file_path.name}")

        exploded = gdf.explode(index_parts=False, ignore_index=True)
        geom_types = exploded.geometry.geom_type
        is_line = (geom_types == "LineString") & ~exploded.geometry.is_empty

        skipped = int((~is_line).sum())
        if skipped:
            others = sorted(str(t) for t in geom_types[~is_line].unique())
            self._logger.log(f"[GIS:Load] 선형이 아닌 객체 {skipped}개 제외: {others}", level="WARNING")

        lines_gdf = exploded[is_line]
        attr_columns = [c for c in lines_gdf.columns if c != lines_gdf.geometry.name]

        lines = list(lines_gdf.geometry)
        data = [
            {str(col): self._to_attribute_value(row[col]) for col in attr_columns}
            for _, row in lines_gdf[attr_columns].iterrows()
        ]

        crs = CRS.from_user_input(gdf.crs)
        self._logger.log(
            f"[GIS:Load] {request.file_path.name} - 원본 객체 {len(gdf)}, 선형 {len(lines)}, CRS: {crs.name}",
            level="INFO",
        )
        return GeoreferencedLines(lines=lines, data=data, crs=crs)

    @safe_run
    @log_execution_time
    def save_topo_nodes(self, nodes: Sequence[TopoNode], crs: CRS, request: GeofileSaveRequest) -> Optional[Path]:
        """
        TOPO 표본점을 매칭 여부/거리/방위각 속성을 가진 포인트 레이어로 저장합니다.

        Returns:
            Optional[Path]: 저장된 파일 경로 (저장할 노드가 없으면 None)
        """
        if not nodes:
            self._logger.log(f"[GIS:Save] 저장할 표본점이 없습니다: {request.output_path.name}", level="WARNING")
            return None

        attributes = pd.DataFrame([node.to_feature_attributes() for node in nodes])
        geometries = [Point(node.point.x, node.point.y) for node in nodes]
        gdf = gpd.GeoDataFrame(attributes, geometry=geometries, crs=crs)

        return self._write(gdf, request)

    @safe_run
    @log_execution_time
    def save_lines(self, lines: Sequence[LineString], crs: CRS, request: GeofileSaveRequest) -> Optional[Path]:
        """선형 geometry 목록을 저장합니다. 디버그용 정답 간선 덤프에 사용됩니다."""
        if not lines:
            self._logger.log(f"[GIS:Save] 저장할 선형 객체가 없습니다: {request.output_path.name}", level="WARNING")
            return None

        gdf = gpd.GeoDataFrame({"edge_id": list(range(len(lines)))}, geometry=list(lines), crs=crs)
        return self._write(gdf, request)

    def _write(self, gdf: gpd.GeoDataFrame, request: GeofileSaveRequest) -> Path:
        output_path = request.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if output_path.exists():
            output_path.unlink()

        gdf.to_file(output_path, driver=request.driver)

        self._logger.log(f"[GIS:Save] 저장 완료: {output_path} ({len(gdf)}개)", level="INFO")
        return output_path

    @staticmethod
    def _to_attribute_value(value: Any) -> AttributeValue:
        """판다스/넘파이 값을 문자열·정수·실수·None 중 하나로 변환합니다."""
        if value is None:
            return None
        if isinstance(value, np.generic):
            value = value.item()
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, float):
            return None if math.isnan(value) else value
        if isinstance(value, (int, str)):
            return value
        if pd.api.types.is_scalar(value) and pd.isna(value):
            return None
        return str(value)
