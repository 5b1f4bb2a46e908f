"""
메트릭 처리 서비스
"""
from .parser import parse_ndjson, load_records
from .aggregator import calculate_summary, acceptance_rate, percentage
from .activity import (
    calculate_daily_active_users,
    calculate_weekly_active_users,
    calculate_average_chat_requests,
)
from .user_reducer import build_user_table, build_user_detail
from .insights import (
    calculate_model_acceptance_rates,
    calculate_language_acceptance_rates,
    top_languages_by_acceptances,
    rank_ides_by_users,
)
from .dashboard import DashboardService, build_dashboard

__all__ = [
    'parse_ndjson', 'load_records',
    'calculate_summary', 'acceptance_rate', 'percentage',
    'calculate_daily_active_users', 'calculate_weekly_active_users', 'calculate_average_chat_requests',
    'build_user_table', 'build_user_detail',
    'calculate_model_acceptance_rates', 'calculate_language_acceptance_rates',
    'top_languages_by_acceptances', 'rank_ides_by_users',
    'DashboardService', 'build_dashboard',
]
