"""
대시보드 조립 서비스

원문 저장소(source)와 로컬 캐시를 묶어 수집 → 집계 → 응답 데이터 구성을 담당합니다.
source는 MetricsFileStore 또는 MetricsApiClient입니다.
"""
import time
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from copilot_metrics.exceptions import MetricsApiError
from copilot_metrics.logging_config import get_logger, log_performance_metric
from copilot_metrics.models import UsageRecord
from copilot_metrics.services.activity import (
    calculate_average_chat_requests,
    calculate_daily_active_users,
    calculate_weekly_active_users,
)
from copilot_metrics.services.aggregator import calculate_summary
from copilot_metrics.services.insights import (
    calculate_language_acceptance_rates,
    calculate_model_acceptance_rates,
    rank_ides_by_users,
    top_languages_by_acceptances,
)
from copilot_metrics.services.parser import load_records, parse_ndjson
from copilot_metrics.services.user_reducer import build_user_table

logger = get_logger('services.dashboard')


def build_dashboard(records: List[UsageRecord]) -> Dict[str, Any]:
    """레코드 목록으로 대시보드 전체 데이터를 새로 계산"""
    started = time.perf_counter()

    summary = calculate_summary(records)
    dashboard = {
        'summary': summary.to_dict(),
        'daily_active_users': [asdict(item) for item in calculate_daily_active_users(records)],
        'weekly_active_users': [asdict(item) for item in calculate_weekly_active_users(records)],
        'avg_chat_requests': [asdict(item) for item in calculate_average_chat_requests(records)],
        'users': [row.to_dict() for row in build_user_table(records)],
        'model_acceptance_rates': [
            asdict(item) for item in calculate_model_acceptance_rates(summary.model_breakdown)
        ],
        'language_acceptance_rates': [
            asdict(item) for item in calculate_language_acceptance_rates(summary.language_breakdown)
        ],
        'top_languages': top_languages_by_acceptances(summary.language_breakdown),
        'ide_usage': rank_ides_by_users(summary.ide_breakdown),
        'record_count': len(records),
    }

    elapsed_ms = (time.perf_counter() - started) * 1000
    log_performance_metric('dashboard_aggregation', round(elapsed_ms, 2))
    return dashboard


class DashboardService:
    """원문 저장소 우선, 실패 시 로컬 캐시로 대체하는 대시보드 서비스"""

    def __init__(self, source, cache=None):
        self.source = source
        self.cache = cache

    def ingest(self, content: str) -> Dict[str, Any]:
        """
        새 내보내기 파일 수집

        파싱과 집계가 모두 끝난 뒤에만 저장합니다. 어느 단계든 실패하면
        저장소와 캐시는 이전 스냅샷 그대로이고 예외를 그대로 전달합니다.
        """
        records = load_records(content)
        dashboard = build_dashboard(records)

        try:
            self.source.upload_metrics_text(content)
        except MetricsApiError as e:
            # 원격 백엔드가 없으면 로컬 캐시만 사용
            if self.cache is None:
                raise
            logger.warning(f"백엔드 업로드 실패, 로컬 캐시에만 저장: {e}")

        if self.cache is not None:
            self.cache.save(records)

        return dashboard

    def fetch_records(self) -> Optional[List[UsageRecord]]:
        """저장소 → 캐시 순으로 레코드 조회 (둘 다 없으면 None)"""
        content = None
        try:
            content = self.source.fetch_latest_metrics_text()
        except (MetricsApiError, OSError) as e:
            logger.warning(f"저장소를 사용할 수 없어 로컬 캐시로 대체: {e}")

        if content:
            records = parse_ndjson(content)
            if records:
                return records

        if self.cache is not None:
            cached = self.cache.load()
            if cached:
                logger.info(f"로컬 캐시에서 {len(cached)}개 레코드 로드")
                return cached

        return None

    def load(self) -> Optional[Dict[str, Any]]:
        """저장된 데이터로 대시보드 구성 (데이터가 없으면 None)"""
        records = self.fetch_records()
        if not records:
            return None

        dashboard = build_dashboard(records)
        if self.cache is not None:
            dashboard['cached_at'] = self.cache.timestamp()
        return dashboard

    def clear(self):
        """저장소와 캐시 모두 삭제"""
        self.source.clear_metrics()
        if self.cache is not None:
            self.cache.clear()
