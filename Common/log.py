import logging
import datetime
import shutil
import os
import sys

LOG_FILE_PREFIX = "Topo_"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class Log:
    def __init__(self, log_dir="Log", base_dir=None, console=True):
        # 기준 폴더: 지정값 > 실행 파일 폴더 > 현재 작업 폴더
        if base_dir is not None:
            program_dir = os.path.abspath(base_dir)
        elif getattr(sys, 'frozen', False):
            program_dir = os.path.dirname(os.path.abspath(sys.executable))
        else:
            program_dir = os.getcwd()

        self.log_dir = os.path.join(program_dir, log_dir)
        os.makedirs(self.log_dir, exist_ok=True)
        self.console = console

        # 로그 파일명 'Topo_YYYYMMDD.log', 복사본 'YYYYMMDD_topo.log'
        self.log_file = os.path.join(self.log_dir, f'{LOG_FILE_PREFIX}{self._current_date_str()}.log')
        self.target_path = os.path.join(program_dir, f'{self._current_date_str()}_topo.log')

        logging.basicConfig(
            filename=self.log_file,
            level=logging.DEBUG,
            format='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y/%m/%d %H:%M',
            encoding='utf-8'
        )

    def _current_date_str(self):
        return datetime.datetime.now().strftime("%Y%m%d")

    def log(self, msg, level='DEBUG', create_log=False):
        """지정된 로그 레벨로 메시지를 기록하고, 필요시 로그 파일을 복사합니다."""
        level = level.upper()
        if level not in _LEVELS:
            print(f"알 수 없는 로그 레벨: {level}")
            return

        logging.log(_LEVELS[level], msg)

        if self.console:
            print(f"{level}: {msg}", file=sys.stderr)

        if create_log:
            self._copy_log()

    def _copy_log(self):
        """로그 파일을 실행 폴더로 복사하는 메서드."""
        try:
            shutil.copy(self.log_file, self.target_path)
        except OSError as e:
            print(f"로그 파일 복사 실패: {e}")
