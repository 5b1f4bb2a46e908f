"""
표시 단계 지표

완성된 Summary의 분류 집계를 차트/표에 맞게 다시 정리합니다.
모델 'unknown' 제외는 여기서만 적용됩니다 (수집 단계의 모델 집계에는 남아 있음).
수락률은 반올림하지 않은 값으로 내보내며, 자릿수는 차트 쪽에서 정합니다.
"""
from typing import Dict, List

from copilot_metrics.models import (
    BreakdownStats,
    LanguageAcceptanceRate,
    ModelAcceptanceRate,
    ModelBreakdownStats,
)
from copilot_metrics.services.aggregator import UNKNOWN_LANGUAGE, acceptance_rate

UNKNOWN_MODEL = 'unknown'


def calculate_model_acceptance_rates(
    model_breakdown: Dict[str, ModelBreakdownStats],
) -> List[ModelAcceptanceRate]:
    """'모델|기능' 항목을 모델 단위로 합산한 수락률 (높은 순)"""
    model_stats: Dict[str, List[int]] = {}

    for key, stats in model_breakdown.items():
        model = stats.model if stats.model is not None else key.split('|')[0]
        if model == UNKNOWN_MODEL:
            continue
        totals = model_stats.setdefault(model, [0, 0])
        totals[0] += stats.code_generation
        totals[1] += stats.code_acceptance

    rates = [
        ModelAcceptanceRate(
            model=model,
            rate=acceptance_rate(acceptances, generations),
            generations=generations,
            acceptances=acceptances,
        )
        for model, (generations, acceptances) in model_stats.items()
        if generations > 0  # 실제 데이터가 있는 모델만
    ]
    return sorted(rates, key=lambda item: item.rate, reverse=True)


def calculate_language_acceptance_rates(
    language_breakdown: Dict[str, BreakdownStats],
) -> List[LanguageAcceptanceRate]:
    """언어별 수락률 (높은 순)"""
    rates = [
        LanguageAcceptanceRate(
            language=language,
            rate=acceptance_rate(stats.code_acceptance, stats.code_generation),
            generations=stats.code_generation,
            acceptances=stats.code_acceptance,
            users=stats.users,
        )
        for language, stats in language_breakdown.items()
        if language != UNKNOWN_LANGUAGE
    ]
    return sorted(rates, key=lambda item: item.rate, reverse=True)


def top_languages_by_acceptances(language_breakdown: Dict[str, BreakdownStats], limit=10):
    """수락 건수 상위 언어"""
    ranked = sorted(
        (
            (language, stats)
            for language, stats in language_breakdown.items()
            if language != UNKNOWN_LANGUAGE
        ),
        key=lambda item: item[1].code_acceptance,
        reverse=True,
    )
    return [
        {'language': language, 'acceptances': stats.code_acceptance}
        for language, stats in ranked[:limit]
    ]


def rank_ides_by_users(ide_breakdown: Dict[str, BreakdownStats]):
    """IDE별 사용자 수 (많은 순)"""
    ranked = sorted(ide_breakdown.items(), key=lambda item: item[1].users, reverse=True)
    return [{'ide': ide, 'users': stats.users} for ide, stats in ranked]
