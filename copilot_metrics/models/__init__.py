"""
데이터 모델 모듈
"""
from .record import (
    UsageRecord,
    IdeTotals,
    FeatureTotals,
    ModelFeatureTotals,
    LanguageFeatureTotals,
)
from .summary import (
    BreakdownStats,
    ModelBreakdownStats,
    DateRange,
    Summary,
    DailyActiveUsers,
    WeeklyActiveUsers,
    AverageChatRequests,
    UserTableRow,
    UserDetail,
    ModelAcceptanceRate,
    LanguageAcceptanceRate,
)

__all__ = [
    'UsageRecord', 'IdeTotals', 'FeatureTotals', 'ModelFeatureTotals', 'LanguageFeatureTotals',
    'BreakdownStats', 'ModelBreakdownStats', 'DateRange', 'Summary',
    'DailyActiveUsers', 'WeeklyActiveUsers', 'AverageChatRequests',
    'UserTableRow', 'UserDetail', 'ModelAcceptanceRate', 'LanguageAcceptanceRate',
]
