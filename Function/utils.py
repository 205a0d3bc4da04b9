"""
Function/utils.py

결과 파일 및 디렉토리 경로 연산을 처리하는 유틸리티 모듈입니다.
"""
from pathlib import Path
from typing import Optional, Union


def resolve_output_dir(path: Optional[Union[str, Path]], default: Union[str, Path] = "Result") -> Path:
    """
    결과 폴더 경로를 확정하고 생성합니다. 상대 경로는 현재 작업 폴더 기준으로 해석합니다.

    Returns:
        Path: 생성된 결과 폴더의 절대 경로
    """
    target = Path(path if path is not None else default).expanduser()
    if not target.is_absolute():
        target = Path.cwd() / target
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()
