"""
Service/schemas.py

데이터의 구조를 정의하고 입력값의 유효성을 검증하는 스키마 모듈입니다.
"""
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

READABLE_SUFFIXES = {".gpkg", ".geojson", ".json", ".shp"}
WRITABLE_SUFFIXES = {".gpkg", ".geojson"}


class TopoParams(BaseModel):
    """
    TOPO 지표 계산 파라미터입니다. 0 이하 값도 그대로 전달되며 별도 검증하지 않습니다.
    """
    model_config = ConfigDict(frozen=True)

    resampling_distance: float = Field(..., description="간선 재표본화 목표 간격(m)")
    hole_radius: float = Field(..., description="제안/정답 표본점 매칭 허용 반경(m)")


class GeofileLoadRequest(BaseModel):
    """
    도로망 파일 로드 요청을 위한 데이터 모델입니다.
    """
    file_path: Path = Field(..., description="읽어올 GeoPackage/GeoJSON/SHP 파일의 경로")

    @field_validator("file_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in READABLE_SUFFIXES:
            raise ValueError(f"지원하지 않는 파일 형식입니다. ({', '.join(sorted(READABLE_SUFFIXES))} 필요): {v.suffix}")
        return v

    @field_validator("file_path")
    @classmethod
    def validate_existence(cls, v: Path) -> Path:
        resolved_path = v.expanduser().resolve()
        if not resolved_path.exists() or not resolved_path.is_file():
            raise ValueError(f"파일을 찾을 수 없습니다: {resolved_path}")
        return resolved_path


class GeofileSaveRequest(BaseModel):
    """
    결과 파일 저장 요청을 위한 데이터 모델입니다.
    """
    output_path: Path = Field(..., description="결과를 저장할 파일 경로")

    @field_validator("output_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in WRITABLE_SUFFIXES:
            raise ValueError(f"저장 파일 형식은 .gpkg 또는 .geojson이어야 합니다: {v.suffix}")
        return v.expanduser().resolve()

    @property
    def driver(self) -> str:
        return "GPKG" if self.output_path.suffix.lower() == ".gpkg" else "GeoJSON"
