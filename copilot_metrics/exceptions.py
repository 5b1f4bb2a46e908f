"""
대시보드 예외 계층

코어 함수는 예외를 발생시키고, HTTP 레이어가 이를 사용자 메시지로 변환합니다.
"""


class MetricsError(Exception):
    """모든 메트릭 처리 오류의 기본 클래스"""

    default_message = 'Failed to process metrics'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FormatError(MetricsError):
    """NDJSON 형식 오류 - 배치 전체를 거부"""

    default_message = 'Invalid NDJSON format'

    def __init__(self, message=None, line_number=None):
        self.line_number = line_number
        if message is None and line_number is not None:
            message = f'Invalid NDJSON format (line {line_number})'
        super().__init__(message)


class EmptyInputError(MetricsError):
    """파싱 후 유효한 레코드가 하나도 없음"""

    default_message = 'No data found in file'


class MetricsApiError(MetricsError):
    """원격 대시보드 API 호출 실패"""

    default_message = 'Metrics API request failed'

    def __init__(self, message=None, status_code=None):
        self.status_code = status_code
        super().__init__(message)
