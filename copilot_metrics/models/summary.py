"""
집계 결과 모델

매 수집(ingest)마다 처음부터 다시 계산되는 파생 데이터입니다.
저장되지 않으며, to_dict()로 JSON 응답을 구성합니다.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class BreakdownStats:
    """분류 키(IDE, 기능, 언어) 하나에 대한 집계 값"""
    users: int = 0
    interactions: int = 0
    code_generation: int = 0
    code_acceptance: int = 0


@dataclass
class ModelBreakdownStats(BreakdownStats):
    """모델 x 기능 조합 하나에 대한 집계 값"""
    model: Optional[str] = None
    feature: Optional[str] = None


@dataclass
class DateRange:
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass
class Summary:
    """전체 요약 - 대시보드 상단 지표와 분류별 집계"""
    total_users: int = 0
    total_interactions: int = 0
    total_code_generation: int = 0
    total_code_acceptance: int = 0
    total_loc_suggested: int = 0
    total_loc_added: int = 0
    total_loc_deleted: int = 0
    users_with_agent: int = 0
    users_with_chat: int = 0
    acceptance_rate: float = 0
    ide_breakdown: Dict[str, BreakdownStats] = field(default_factory=dict)
    feature_breakdown: Dict[str, BreakdownStats] = field(default_factory=dict)
    model_breakdown: Dict[str, ModelBreakdownStats] = field(default_factory=dict)
    language_breakdown: Dict[str, BreakdownStats] = field(default_factory=dict)
    date_range: DateRange = field(default_factory=DateRange)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DailyActiveUsers:
    date: str
    users: int


@dataclass
class WeeklyActiveUsers:
    week: str
    users: int


@dataclass
class AverageChatRequests:
    date: str
    avg_requests: float


@dataclass
class UserTableRow:
    """사용자 테이블의 한 행 (전체 기간 합산)"""
    user_id: Any
    user_login: Optional[str]
    date_range: str
    days_active: int
    ides: List[str] = field(default_factory=list)
    ide_versions: List[str] = field(default_factory=list)
    plugin_versions: List[str] = field(default_factory=list)
    interactions: int = 0
    code_generation: int = 0
    code_acceptance: int = 0
    acceptance_rate: float = 0
    loc_suggested: int = 0
    loc_added: int = 0
    loc_deleted: int = 0
    used_agent: bool = False
    used_chat: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UserDetail(UserTableRow):
    """단일 사용자 조회 결과 - 에이전트 사용일과 사용 언어 포함"""
    agent_days_used: int = 0
    agent_usage_rate: float = 0
    languages_used: List[str] = field(default_factory=list)
    languages_used_count: int = 0


@dataclass
class ModelAcceptanceRate:
    model: str
    rate: float
    generations: int
    acceptances: int


@dataclass
class LanguageAcceptanceRate:
    language: str
    rate: float
    generations: int
    acceptances: int
    users: int = 0
