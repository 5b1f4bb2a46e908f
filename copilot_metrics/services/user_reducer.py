"""
사용자별 집계

레코드를 user_id로 묶어 사용자 테이블 행을 만들고,
특정 GitHub 로그인에 대한 상세 통계를 계산합니다.
"""
from typing import Dict, List, Optional, Sequence

from copilot_metrics.models import UsageRecord, UserDetail, UserTableRow
from copilot_metrics.services.aggregator import UNKNOWN_LANGUAGE, acceptance_rate, percentage


class _UserAccumulator:
    """사용자 한 명의 누적 상태"""

    def __init__(self, user_id, user_login):
        self.user_id = user_id
        self.user_login = user_login
        self.dates: List[str] = []
        self.interactions = 0
        self.code_generation = 0
        self.code_acceptance = 0
        self.loc_suggested = 0
        self.loc_added = 0
        self.loc_deleted = 0
        self.used_agent = False
        self.used_chat = False
        # dict를 순서 있는 집합으로 사용
        self.ides: Dict[str, None] = {}
        self.ide_versions: Dict[str, None] = {}
        self.plugin_versions: Dict[str, None] = {}

    def add(self, record: UsageRecord):
        if record.day:
            self.dates.append(record.day)

        self.interactions += record.user_initiated_interaction_count
        self.code_generation += record.code_generation_activity_count
        self.code_acceptance += record.code_acceptance_activity_count
        self.loc_suggested += record.loc_suggested_to_add_sum
        self.loc_added += record.loc_added_sum
        self.loc_deleted += record.loc_deleted_sum

        self.used_agent = self.used_agent or record.used_agent
        self.used_chat = self.used_chat or record.used_chat

        for ide in record.totals_by_ide:
            if ide.ide:
                self.ides[ide.ide] = None
            if ide.ide_version:
                self.ide_versions[ide.ide_version] = None
            if ide.plugin_version:
                self.plugin_versions[ide.plugin_version] = None

    def date_range(self) -> str:
        dates = sorted(self.dates)
        if len(dates) > 1:
            return f"{dates[0]} to {dates[-1]}"
        return dates[0] if dates else 'N/A'

    def row_fields(self) -> dict:
        return dict(
            user_id=self.user_id,
            user_login=self.user_login,
            date_range=self.date_range(),
            days_active=len(self.dates),
            ides=list(self.ides),
            ide_versions=list(self.ide_versions),
            plugin_versions=list(self.plugin_versions),
            interactions=self.interactions,
            code_generation=self.code_generation,
            code_acceptance=self.code_acceptance,
            # 테이블 표시 정밀도는 소수점 1자리
            acceptance_rate=acceptance_rate(self.code_acceptance, self.code_generation, 1),
            loc_suggested=self.loc_suggested,
            loc_added=self.loc_added,
            loc_deleted=self.loc_deleted,
            used_agent=self.used_agent,
            used_chat=self.used_chat,
        )


def build_user_table(records: Sequence[UsageRecord]) -> List[UserTableRow]:
    """사용자별로 전체 기간을 합산한 테이블 행 목록 (처음 등장한 순서)"""
    users: Dict[object, _UserAccumulator] = {}
    for record in records:
        user = users.get(record.user_id)
        if user is None:
            user = _UserAccumulator(record.user_id, record.user_login)
            users[record.user_id] = user
        user.add(record)

    return [UserTableRow(**user.row_fields()) for user in users.values()]


def build_user_detail(records: Sequence[UsageRecord], user_login: str) -> Optional[UserDetail]:
    """
    GitHub 로그인 하나에 대한 상세 통계

    테이블 행 값에 더해 에이전트 사용일 수와 비율, 사용 언어 목록을 계산합니다.
    해당 로그인의 레코드가 없으면 None을 반환합니다.
    """
    user_records = [record for record in records if record.user_login == user_login]
    if not user_records:
        return None

    user = _UserAccumulator(user_records[0].user_id, user_login)
    agent_days = set()
    languages = set()

    for record in user_records:
        user.add(record)
        if record.used_agent and record.day:
            agent_days.add(record.day)
        for language in record.totals_by_language_feature:
            if language.language and language.language != UNKNOWN_LANGUAGE:
                languages.add(language.language)

    agent_usage_rate = percentage(len(agent_days), len(user.dates), 1)

    return UserDetail(
        **user.row_fields(),
        agent_days_used=len(agent_days),
        agent_usage_rate=agent_usage_rate,
        languages_used=sorted(languages),
        languages_used_count=len(languages),
    )
