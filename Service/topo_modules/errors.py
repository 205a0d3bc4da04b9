"""
Service/topo_modules/errors.py

TOPO 평가 코어에서 발생하는 오류 유형을 정의하는 모듈입니다.
"""


class TopoError(Exception):
    """TOPO 코어 오류의 최상위 클래스입니다."""


class InvalidGeometry(TopoError, ValueError):
    """동일 노드 ID에 서로 다른 좌표가 할당된 경우 발생합니다."""


class InvalidParameter(TopoError, ValueError):
    """UTM 구역 문자, 속성 값 등 입력 파라미터가 허용 범위를 벗어난 경우 발생합니다."""


class NoProjectedCrsFound(TopoError):
    """지리 좌표계 데이터에 대해 UTM 투영 좌표계를 결정하지 못한 경우 발생합니다."""


class InvalidCrsAuthority(TopoError):
    """좌표계에서 숫자형 기관 코드(EPSG)를 추출할 수 없는 경우 발생합니다."""


class SpatialIndexFailure(TopoError):
    """공간 인덱스 생성 또는 질의가 실패한 경우 발생합니다."""


class CrsTransformFailure(TopoError):
    """좌표 변환 중 변환 불가능한 좌표가 발견된 경우 발생합니다."""


class CrsQueryFailure(TopoError):
    """PROJ 데이터베이스에서 UTM 좌표계 후보 조회가 실패한 경우 발생합니다."""
