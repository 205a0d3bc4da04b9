"""
Service/topo_modules/crs/resolver.py

좌표 지점을 포함하는 UTM 투영 좌표계를 조회하고 투영 정의 문자열을 생성하는 모듈입니다.
"""
from __future__ import annotations

import math
from typing import List, Optional, Tuple

from pyproj import CRS
from pyproj.aoi import AreaOfInterest
from pyproj.database import query_crs_info
from pyproj.enums import PJType
from pyproj.exceptions import CRSError, ProjError

from Common.log import Log

from ..errors import CrsQueryFailure, InvalidCrsAuthority, InvalidParameter

EpsgCode = int

AUTHORITY = "EPSG"
UTM_NAME_MARKER = "UTM zone"

# 위도 8도 간격 밴드 문자 (X 밴드는 84도까지 확장)
ZONE_LETTERS = "CDEFGHJKLMNPQRSTUVWX"
EQUATOR_BAND_LETTER = "N"
MAX_ZONE_LETTER = "X"
MIN_LATITUDE = -80.0
MAX_LATITUDE = 84.0


def epsg_authority_string(code: EpsgCode) -> str:
    return f"{AUTHORITY}:{code}"


def epsg_4326() -> CRS:
    return CRS.from_epsg(4326)


def authority_code(crs: CRS) -> EpsgCode:
    """
    좌표계의 숫자형 EPSG 코드를 추출합니다.

    Raises:
        InvalidCrsAuthority: 기관 코드를 확인할 수 없거나 숫자가 아닌 경우
    """
    code = crs.to_epsg()
    if code is not None:
        return int(code)

    authority = crs.to_authority()
    if authority is not None:
        _name, raw_code = authority
        if str(raw_code).isdigit():
            return int(raw_code)

    raise InvalidCrsAuthority(f"좌표계에서 숫자형 기관 코드를 추출할 수 없습니다: {crs.name}")


def crs_from_code(code: EpsgCode) -> CRS:
    try:
        return CRS.from_epsg(code)
    except CRSError as e:
        raise InvalidCrsAuthority(f"EPSG 코드로 좌표계를 생성할 수 없습니다: {code} - {e}") from e


class CoordinateReferenceResolver:
    """
    PROJ 데이터베이스에서 UTM 투영 좌표계 후보를 조회하고, 표시용 UTM 투영 정의를 구성합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def query_utm_zone(self, lon: float, lat: float, datum: Optional[str] = None) -> List[EpsgCode]:
        """
        경위도 지점을 사용 영역에 포함하는 UTM 투영 좌표계의 EPSG 코드를 조회합니다.

        Args:
            lon (float): 경도(도)
            lat (float): 위도(도)
            datum (Optional[str]): 측지 기준계 이름 (예: "WGS84", "NAD83"). 미지정 시 전체 기준계 대상

        Returns:
            List[EpsgCode]: 조회된 EPSG 코드 목록 (없으면 빈 목록)

        Raises:
            CrsQueryFailure: PROJ 데이터베이스 조회가 실패한 경우
        """
        area = AreaOfInterest(
            west_lon_degree=lon,
            south_lat_degree=lat,
            east_lon_degree=lon,
            north_lat_degree=lat,
        )
        try:
            crs_info_list = query_crs_info(
                auth_name=AUTHORITY,
                pj_types=PJType.PROJECTED_CRS,
                area_of_interest=area,
            )
        except (CRSError, ProjError) as e:
            raise CrsQueryFailure(f"UTM 좌표계 후보 조회 실패: ({lon}, {lat}) - {e}") from e

        results: List[EpsgCode] = []
        for crs_info in crs_info_list:
            if UTM_NAME_MARKER not in crs_info.name:
                continue
            if datum is not None and self._datum_prefix(crs_info.name) != datum:
                continue
            if not str(crs_info.code).isdigit():
                raise InvalidCrsAuthority(f"UTM 좌표계 코드가 숫자가 아닙니다: {crs_info.name} ({crs_info.code})")
            results.append(int(crs_info.code))

        self._logger.log(
            f"[CRS:Resolve] ({lon:.6f}, {lat:.6f}) datum={datum or '*'} UTM 후보 {len(results)}개: {results}",
            level="DEBUG",
        )
        return results

    @staticmethod
    def utm_zone_number_and_letter(lon: float, lat: float) -> Tuple[int, str]:
        """
        6도 간격 고정 밴드로 UTM 구역 번호를, 위도 밴드 표로 구역 문자를 계산합니다.
        노르웨이/스발바르 예외 구역은 고려하지 않습니다.
        """
        if not MIN_LATITUDE <= lat <= MAX_LATITUDE:
            raise InvalidParameter(f"UTM 위도 밴드 범위({MIN_LATITUDE}~{MAX_LATITUDE})를 벗어났습니다: {lat}")

        zone_number = int(math.floor((lon + 180.0) / 6.0)) % 60 + 1
        band = min(int((lat - MIN_LATITUDE) // 8), len(ZONE_LETTERS) - 1)
        return zone_number, ZONE_LETTERS[band]

    @staticmethod
    def build_utm_proj_definition(zone_number: int, zone_letter: str, datum: str = "WGS84") -> str:
        """
        UTM 투영 정의 문자열을 생성합니다.

        적도 밴드 문자(N)를 포함하여 그 이하의 문자는 남반구로 처리합니다.
        기존 결과와의 호환을 위해 유지하는 동작입니다.

        Raises:
            InvalidParameter: 구역 번호가 1~60을 벗어나거나 구역 문자가 X를 넘는 경우
        """
        if not 1 <= int(zone_number) <= 60:
            raise InvalidParameter(f"UTM 구역 번호가 올바르지 않습니다: {zone_number}")

        letter = str(zone_letter).upper()
        if len(letter) != 1 or letter > MAX_ZONE_LETTER:
            raise InvalidParameter(f"UTM 구역 문자가 올바르지 않습니다: {zone_letter}")

        south = " +south" if letter <= EQUATOR_BAND_LETTER else ""
        return f"+proj=utm +zone={int(zone_number)}{south} +datum={datum} +units=m +no_defs"

    @staticmethod
    def _datum_prefix(crs_name: str) -> str:
        # "WGS 84 / UTM zone 54N" -> "WGS84"
        return "".join(crs_name.split("/", 1)[0].split())
