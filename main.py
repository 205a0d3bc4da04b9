"""
main.py

애플리케이션의 진입점이며 객체 생성 및 의존성 주입(Composition Root)을 담당합니다.
"""
from __future__ import annotations

import argparse
import json
import math
import sys
import traceback
from typing import Any, Dict, List, NoReturn, Optional

from Common.log import Log
from Function.log_cleanup import clean_old_logs
from Service.config import TopoConfig
from Service.container import build_app
from Service.topo_modules.topo import TopoResult


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="제안 도로망과 정답 도로망의 TOPO 정밀도/재현율/F1을 계산합니다.")
    parser.add_argument("--proposal", required=True, help="제안(평가 대상) 도로망 파일 경로")
    parser.add_argument("--ground-truth", required=True, help="정답 도로망 파일 경로")
    parser.add_argument("--output-dir", default=None, help="매칭 결과 노드 파일 저장 폴더")
    parser.add_argument("--resampling-distance", type=float, default=None, help="재표본화 간격(m)")
    parser.add_argument("--hole-radius", type=float, default=None, help="매칭 허용 반경(m)")
    parser.add_argument("--workers", type=int, default=None, help="병렬 스레드 수")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> TopoConfig:
    """환경 변수 설정 위에 명령행 인자로 지정된 값만 덮어씁니다."""
    overrides = {
        "resampling_distance": args.resampling_distance,
        "hole_radius": args.hole_radius,
        "max_workers": args.workers,
    }
    return TopoConfig(**{k: v for k, v in overrides.items() if v is not None})


def _finite_or_none(value: float) -> Optional[float]:
    return None if math.isnan(value) else value


def _score_payload(result: TopoResult) -> Dict[str, Any]:
    """표준 출력용 결과 요약입니다. 정의되지 않은 점수(NaN)는 JSON null로 기록합니다."""
    score = result.f1_score_result
    return {
        "precision": _finite_or_none(score.precision),
        "recall": _finite_or_none(score.recall),
        "f1": _finite_or_none(score.f1),
        "true_positives": result.true_positives,
        "proposal_nodes": len(result.proposal_nodes),
        "ground_truth_nodes": len(result.ground_truth_nodes),
    }


def main(argv: Optional[List[str]] = None) -> NoReturn:
    args = _parse_args(argv)
    logger = Log()

    try:
        logger.log("=== TOPO 평가 시작 ===", level="INFO")

        config = _build_config(args)
        clean_old_logs(logger.log_dir, logger, retention_days=config.log_retention_days)

        built = build_app(logger, config)
        result = built.topo_service.run_pipeline(args.proposal, args.ground_truth, args.output_dir)

        print(json.dumps(_score_payload(result), allow_nan=False))

        logger.log("=== TOPO 평가 정상 종료 ===", level="INFO")
        sys.exit(0)

    except Exception:
        error_msg = traceback.format_exc()
        logger.log(f"평가 중 치명적 오류 발생:\n{error_msg}", level="ERROR", create_log=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
