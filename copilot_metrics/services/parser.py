"""
NDJSON 레코드 파서

내보내기 파일의 각 줄을 JSON 객체 하나로 파싱합니다.
한 줄이라도 잘못되면 배치 전체를 거부합니다 (부분 성공 없음).
"""
import json
from typing import List, Optional

from copilot_metrics.exceptions import EmptyInputError, FormatError
from copilot_metrics.logging_config import get_logger
from copilot_metrics.models import UsageRecord

logger = get_logger('services.parser')


def parse_ndjson(content: Optional[str]) -> List[UsageRecord]:
    """
    NDJSON 텍스트를 사용량 레코드 목록으로 변환

    빈 줄과 공백만 있는 줄은 건너뜁니다. 필드 타입만 확인하며,
    누락된 필드는 UsageRecord에서 기본값으로 처리됩니다.

    Raises:
        FormatError: JSON이 아니거나 객체가 아닌 줄, 또는 필드 타입이 어긋난 줄이 있을 때
    """
    if not content:
        return []

    records = []
    for line_number, line in enumerate(content.split('\n'), start=1):
        if not line.strip():
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"NDJSON 파싱 실패 (line {line_number}): {e}")
            raise FormatError(line_number=line_number) from e

        if not isinstance(data, dict):
            logger.warning(f"JSON 객체가 아닌 줄 (line {line_number})")
            raise FormatError(line_number=line_number)

        try:
            records.append(UsageRecord.from_dict(data))
        except (ValueError, TypeError) as e:
            logger.warning(f"레코드 구조 오류 (line {line_number}): {e}")
            raise FormatError(f'Invalid NDJSON format (line {line_number}): {e}', line_number) from e

    return records


def load_records(content: Optional[str]) -> List[UsageRecord]:
    """
    파싱 후 레코드가 하나도 없으면 EmptyInputError 발생

    집계를 시작하기 전에 호출하는 진입점입니다.
    """
    records = parse_ndjson(content)
    if not records:
        raise EmptyInputError()

    logger.info(f"{len(records)}개 레코드 파싱 완료")
    return records
