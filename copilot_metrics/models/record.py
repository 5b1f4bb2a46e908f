"""
Copilot 사용량 레코드 모델

메트릭 내보내기 파일의 한 줄(사용자 1명의 하루치 데이터)을 표현합니다.
선택 필드가 없거나 null이면 0 또는 빈 값으로 정규화하고,
타입이 어긋난 값(문자열 카운터, 객체가 아닌 중첩 항목 등)은 ValueError로 거부합니다.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _count(data: Dict[str, Any], key: str) -> int:
    """카운터 값 읽기 (없거나 null이면 0)"""
    value = data.get(key) or 0
    if not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return value


def _entries(data: Dict[str, Any], key: str):
    """중첩 배열 읽기 (없으면 빈 목록, 객체 배열이 아니면 ValueError)"""
    entries = data.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"{key} must be a list of objects")
    return entries


def _day(data: Dict[str, Any]) -> Optional[str]:
    """날짜 읽기 (문자열이 아니면 ValueError)"""
    day = data.get('day')
    if day is not None and not isinstance(day, str):
        raise ValueError("day must be a string")
    return day or None


@dataclass(frozen=True)
class IdeTotals:
    """IDE별 사용량"""
    ide: Optional[str]
    ide_version: Optional[str] = None
    plugin_version: Optional[str] = None
    user_initiated_interaction_count: int = 0
    code_generation_activity_count: int = 0
    code_acceptance_activity_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IdeTotals':
        plugin = data.get('last_known_plugin_version') or {}
        return cls(
            ide=data.get('ide'),
            ide_version=data.get('ide_version'),
            plugin_version=plugin.get('plugin_version') if isinstance(plugin, dict) else None,
            user_initiated_interaction_count=_count(data, 'user_initiated_interaction_count'),
            code_generation_activity_count=_count(data, 'code_generation_activity_count'),
            code_acceptance_activity_count=_count(data, 'code_acceptance_activity_count'),
        )


@dataclass(frozen=True)
class FeatureTotals:
    """기능별 사용량 (chat_panel, code_completion 등)"""
    feature: Optional[str]
    user_initiated_interaction_count: int = 0
    code_generation_activity_count: int = 0
    code_acceptance_activity_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeatureTotals':
        return cls(
            feature=data.get('feature'),
            user_initiated_interaction_count=_count(data, 'user_initiated_interaction_count'),
            code_generation_activity_count=_count(data, 'code_generation_activity_count'),
            code_acceptance_activity_count=_count(data, 'code_acceptance_activity_count'),
        )


@dataclass(frozen=True)
class ModelFeatureTotals:
    """모델 x 기능별 사용량"""
    model: Optional[str]
    feature: Optional[str]
    user_initiated_interaction_count: int = 0
    code_generation_activity_count: int = 0
    code_acceptance_activity_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModelFeatureTotals':
        return cls(
            model=data.get('model'),
            feature=data.get('feature'),
            user_initiated_interaction_count=_count(data, 'user_initiated_interaction_count'),
            code_generation_activity_count=_count(data, 'code_generation_activity_count'),
            code_acceptance_activity_count=_count(data, 'code_acceptance_activity_count'),
        )


@dataclass(frozen=True)
class LanguageFeatureTotals:
    """언어 x 기능별 사용량"""
    language: Optional[str]
    feature: Optional[str] = None
    user_initiated_interaction_count: int = 0
    code_generation_activity_count: int = 0
    code_acceptance_activity_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LanguageFeatureTotals':
        return cls(
            language=data.get('language'),
            feature=data.get('feature'),
            user_initiated_interaction_count=_count(data, 'user_initiated_interaction_count'),
            code_generation_activity_count=_count(data, 'code_generation_activity_count'),
            code_acceptance_activity_count=_count(data, 'code_acceptance_activity_count'),
        )


@dataclass(frozen=True)
class UsageRecord:
    """
    사용자 1명의 하루치 Copilot 사용량

    파싱 후에는 변경되지 않습니다. 캐시에 다시 저장할 수 있도록
    원본 JSON 객체를 raw 필드에 보관합니다.
    """
    user_id: Any
    user_login: Optional[str]
    day: Optional[str]
    user_initiated_interaction_count: int = 0
    code_generation_activity_count: int = 0
    code_acceptance_activity_count: int = 0
    loc_suggested_to_add_sum: int = 0
    loc_added_sum: int = 0
    loc_deleted_sum: int = 0
    used_agent: bool = False
    used_chat: bool = False
    totals_by_ide: Tuple[IdeTotals, ...] = ()
    totals_by_feature: Tuple[FeatureTotals, ...] = ()
    totals_by_model_feature: Tuple[ModelFeatureTotals, ...] = ()
    totals_by_language_feature: Tuple[LanguageFeatureTotals, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UsageRecord':
        """JSON 객체로부터 레코드 생성"""
        return cls(
            user_id=data.get('user_id'),
            user_login=data.get('user_login'),
            day=_day(data),
            user_initiated_interaction_count=_count(data, 'user_initiated_interaction_count'),
            code_generation_activity_count=_count(data, 'code_generation_activity_count'),
            code_acceptance_activity_count=_count(data, 'code_acceptance_activity_count'),
            loc_suggested_to_add_sum=_count(data, 'loc_suggested_to_add_sum'),
            loc_added_sum=_count(data, 'loc_added_sum'),
            loc_deleted_sum=_count(data, 'loc_deleted_sum'),
            used_agent=bool(data.get('used_agent')),
            used_chat=bool(data.get('used_chat')),
            totals_by_ide=tuple(IdeTotals.from_dict(e) for e in _entries(data, 'totals_by_ide')),
            totals_by_feature=tuple(
                FeatureTotals.from_dict(e) for e in _entries(data, 'totals_by_feature')
            ),
            totals_by_model_feature=tuple(
                ModelFeatureTotals.from_dict(e) for e in _entries(data, 'totals_by_model_feature')
            ),
            totals_by_language_feature=tuple(
                LanguageFeatureTotals.from_dict(e) for e in _entries(data, 'totals_by_language_feature')
            ),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        """원본 JSON 객체 반환 (캐시 저장용)"""
        return self.raw
