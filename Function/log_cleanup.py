"""
Function/log_cleanup.py

설정된 보관 기간이 지난 오래된 로그 파일을 자동으로 삭제하는 모듈입니다.
"""
import datetime
from pathlib import Path

from Common.log import LOG_FILE_PREFIX

DEFAULT_RETENTION_DAYS = 3


def clean_old_logs(log_dir, logger, retention_days=DEFAULT_RETENTION_DAYS, now=None):
    """
    지정된 디렉토리 내에서 보관 기간이 만료된 'Topo_YYYYMMDD*.log' 파일을 찾아 삭제합니다.

    Args:
        log_dir (str | Path): 로그 파일이 저장된 디렉토리 경로
        logger (Log): 로그 기록을 위한 로거 인스턴스
        retention_days (int): 보관 기간(일)
        now (datetime.datetime | None): 기준 시각 (미지정 시 현재 시각)

    Returns:
        list[str]: 삭제된 파일 이름 목록
    """
    removed = []
    log_path = Path(log_dir)
    try:
        if not log_path.exists():
            logger.log(f"로그 디렉토리 없음: {log_path} (삭제 과정 생략)", level="WARNING")
            return removed

        now = now or datetime.datetime.now()
        date_start = len(LOG_FILE_PREFIX)

        for file_path in sorted(log_path.iterdir()):
            if not (file_path.is_file() and file_path.name.startswith(LOG_FILE_PREFIX)):
                continue

            date_part = file_path.name[date_start:date_start + 8]
            try:
                file_date = datetime.datetime.strptime(date_part, "%Y%m%d")
            except ValueError:
                logger.log(f"잘못된 로그 파일 형식 (삭제 스킵): {file_path.name}", level="WARNING")
                continue

            if (now - file_date).days > retention_days:
                file_path.unlink()
                removed.append(file_path.name)
                logger.log(f"오래된 로그 파일 삭제: {file_path.name}", level="INFO")

    except OSError as e:
        logger.log(f"로그 파일 정리 중 오류 발생: {e} (기능 패스)", level="ERROR")

    return removed
