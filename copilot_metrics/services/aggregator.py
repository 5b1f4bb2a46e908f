"""
메트릭 집계 엔진

레코드 목록을 한 번 순회하면서 전체 합계, 고유 사용자 수,
IDE / 기능 / 모델 / 언어별 분류 집계를 동시에 계산합니다.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Set

from copilot_metrics.exceptions import EmptyInputError
from copilot_metrics.models import (
    BreakdownStats,
    DateRange,
    ModelBreakdownStats,
    Summary,
    UsageRecord,
)

UNKNOWN_LANGUAGE = 'unknown'


def percentage(part, whole, ndigits: Optional[int] = None) -> float:
    """
    백분율 계산 (whole이 0 이하이면 0)

    ndigits를 주면 사사오입(ROUND_HALF_UP)합니다: 1/800 -> 0.13, 1/16 -> 6.3
    ndigits가 None이면 반올림하지 않은 값을 그대로 돌려주며, 표시 단계에서 사용합니다.
    """
    if whole <= 0:
        return 0
    if ndigits is None:
        return part / whole * 100

    exact = Decimal(part) * 100 / Decimal(whole)
    return float(exact.quantize(Decimal(1).scaleb(-ndigits), rounding=ROUND_HALF_UP))


def acceptance_rate(accepted: int, generated: int, ndigits: Optional[int] = None) -> float:
    """수락률(%) - 생성 건수가 0이면 0"""
    return percentage(accepted, generated, ndigits)


class BreakdownAccumulator:
    """
    분류 키 하나의 중간 집계 값

    기여한 사용자 ID 집합을 그대로 들고 있다가
    finalize() 시점에만 사용자 수로 변환합니다.
    """

    def __init__(self):
        self.contributors: Set[Any] = set()
        self.interactions = 0
        self.code_generation = 0
        self.code_acceptance = 0

    def add(self, user_id, totals):
        self.contributors.add(user_id)
        self.interactions += totals.user_initiated_interaction_count
        self.code_generation += totals.code_generation_activity_count
        self.code_acceptance += totals.code_acceptance_activity_count

    def finalize(self) -> BreakdownStats:
        return BreakdownStats(
            users=len(self.contributors),
            interactions=self.interactions,
            code_generation=self.code_generation,
            code_acceptance=self.code_acceptance,
        )


class ModelBreakdownAccumulator(BreakdownAccumulator):
    """모델 x 기능 조합의 중간 집계 값"""

    def __init__(self, model, feature):
        super().__init__()
        self.model = model
        self.feature = feature

    def finalize(self) -> ModelBreakdownStats:
        return ModelBreakdownStats(
            users=len(self.contributors),
            interactions=self.interactions,
            code_generation=self.code_generation,
            code_acceptance=self.code_acceptance,
            model=self.model,
            feature=self.feature,
        )


class SummaryAccumulator:
    """
    calculate_summary() 한 번의 호출이 단독으로 소유하는 누적기

    호출 사이에 공유되는 상태가 없으므로 같은 입력은 항상 같은 결과를 냅니다.
    """

    def __init__(self):
        self.unique_users: Set[Any] = set()
        self.users_with_agent: Set[Any] = set()
        self.users_with_chat: Set[Any] = set()

        self.total_interactions = 0
        self.total_code_generation = 0
        self.total_code_acceptance = 0
        self.total_loc_suggested = 0
        self.total_loc_added = 0
        self.total_loc_deleted = 0

        self.ide_breakdown: Dict[str, BreakdownAccumulator] = {}
        self.feature_breakdown: Dict[str, BreakdownAccumulator] = {}
        self.model_breakdown: Dict[str, ModelBreakdownAccumulator] = {}
        self.language_breakdown: Dict[str, BreakdownAccumulator] = {}

        self.start_day: Optional[str] = None
        self.end_day: Optional[str] = None

    def add_record(self, record: UsageRecord):
        user_id = record.user_id
        self.unique_users.add(user_id)

        self.total_interactions += record.user_initiated_interaction_count
        self.total_code_generation += record.code_generation_activity_count
        self.total_code_acceptance += record.code_acceptance_activity_count
        self.total_loc_suggested += record.loc_suggested_to_add_sum
        self.total_loc_added += record.loc_added_sum
        self.total_loc_deleted += record.loc_deleted_sum

        if record.used_agent:
            self.users_with_agent.add(user_id)
        if record.used_chat:
            self.users_with_chat.add(user_id)

        for ide in record.totals_by_ide:
            self._entry(self.ide_breakdown, ide.ide).add(user_id, ide)

        for feature in record.totals_by_feature:
            self._entry(self.feature_breakdown, feature.feature).add(user_id, feature)

        for model_feature in record.totals_by_model_feature:
            key = f"{model_feature.model}|{model_feature.feature}"
            entry = self.model_breakdown.get(key)
            if entry is None:
                entry = ModelBreakdownAccumulator(model_feature.model, model_feature.feature)
                self.model_breakdown[key] = entry
            entry.add(user_id, model_feature)

        for language in record.totals_by_language_feature:
            if language.language == UNKNOWN_LANGUAGE:
                continue
            self._entry(self.language_breakdown, language.language).add(user_id, language)

        # ISO 날짜 문자열은 사전순 비교로 충분
        if record.day:
            if self.start_day is None or record.day < self.start_day:
                self.start_day = record.day
            if self.end_day is None or record.day > self.end_day:
                self.end_day = record.day

    @staticmethod
    def _entry(breakdown, key) -> BreakdownAccumulator:
        entry = breakdown.get(key)
        if entry is None:
            entry = BreakdownAccumulator()
            breakdown[key] = entry
        return entry

    def finalize(self) -> Summary:
        """사용자 ID 집합을 개수로 변환하고 파생 지표 계산"""
        return Summary(
            total_users=len(self.unique_users),
            total_interactions=self.total_interactions,
            total_code_generation=self.total_code_generation,
            total_code_acceptance=self.total_code_acceptance,
            total_loc_suggested=self.total_loc_suggested,
            total_loc_added=self.total_loc_added,
            total_loc_deleted=self.total_loc_deleted,
            users_with_agent=len(self.users_with_agent),
            users_with_chat=len(self.users_with_chat),
            acceptance_rate=acceptance_rate(
                self.total_code_acceptance, self.total_code_generation, 2
            ),
            ide_breakdown=_finalize_all(self.ide_breakdown),
            feature_breakdown=_finalize_all(self.feature_breakdown),
            model_breakdown=_finalize_all(self.model_breakdown),
            language_breakdown=_finalize_all(self.language_breakdown),
            date_range=DateRange(start=self.start_day, end=self.end_day),
        )


def _finalize_all(breakdown):
    return {key: entry.finalize() for key, entry in breakdown.items()}


def accumulate(records: Iterable[UsageRecord]) -> SummaryAccumulator:
    """레코드를 누적기에 반영 (사용자 집합이 살아있는 중간 상태)"""
    accumulator = SummaryAccumulator()
    for record in records:
        accumulator.add_record(record)
    return accumulator


def calculate_summary(records: Sequence[UsageRecord]) -> Summary:
    """
    전체 요약 지표 계산

    Raises:
        EmptyInputError: 레코드가 없을 때
    """
    if not records:
        raise EmptyInputError()
    return accumulate(records).finalize()
