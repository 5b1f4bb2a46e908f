"""
활성 사용자 시계열 계산

일간 / 주간 활성 사용자와 일별 평균 채팅 요청 수를 계산합니다.
요약 집계와는 별도로 레코드를 다시 순회합니다.
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import List, Sequence

from copilot_metrics.exceptions import FormatError
from copilot_metrics.models import (
    AverageChatRequests,
    DailyActiveUsers,
    UsageRecord,
    WeeklyActiveUsers,
)

CHAT_FEATURE_MARKER = 'chat'


def week_start(day: str) -> str:
    """
    해당 날짜가 속한 주의 월요일 (ISO 주 기준)

    일요일은 7번째 날로 보므로 6일 전 월요일로 이동합니다.
    """
    try:
        current = date.fromisoformat(day[:10])
    except (TypeError, ValueError) as e:
        raise FormatError(f'Invalid day value: {day!r}') from e
    return (current - timedelta(days=current.weekday())).isoformat()


def calculate_daily_active_users(records: Sequence[UsageRecord]) -> List[DailyActiveUsers]:
    """날짜별 고유 사용자 수 (날짜 오름차순)"""
    daily_users = defaultdict(set)
    for record in records:
        if record.day:
            daily_users[record.day].add(record.user_id)

    return [
        DailyActiveUsers(date=day, users=len(users))
        for day, users in sorted(daily_users.items())
    ]


def calculate_weekly_active_users(records: Sequence[UsageRecord]) -> List[WeeklyActiveUsers]:
    """주별 고유 사용자 수 (월요일 기준 주 시작일 오름차순)"""
    weekly_users = defaultdict(set)
    for record in records:
        if record.day:
            weekly_users[week_start(record.day)].add(record.user_id)

    return [
        WeeklyActiveUsers(week=week, users=len(users))
        for week, users in sorted(weekly_users.items())
    ]


def calculate_average_chat_requests(records: Sequence[UsageRecord]) -> List[AverageChatRequests]:
    """
    일별 활성 사용자 1인당 평균 채팅 요청 수

    기능 이름에 'chat'이 포함된 항목의 사용자 요청 수만 합산합니다
    (코드 자동완성은 제외).
    """
    daily_users = defaultdict(set)
    daily_requests = defaultdict(int)

    for record in records:
        if not record.day:
            continue
        daily_users[record.day].add(record.user_id)
        for feature in record.totals_by_feature:
            if feature.feature and CHAT_FEATURE_MARKER in feature.feature:
                daily_requests[record.day] += feature.user_initiated_interaction_count

    result = []
    for day, users in sorted(daily_users.items()):
        average = daily_requests[day] / len(users) if users else 0
        result.append(AverageChatRequests(date=day, avg_requests=average))
    return result
