"""
대시보드 백엔드 API 클라이언트

원격 대시보드 서버의 업로드 / 조회 / 삭제 엔드포인트를 호출합니다.
MetricsFileStore와 같은 메서드 이름을 쓰므로 DashboardService의 source로 바꿔 끼울 수 있습니다.
"""
from typing import Optional

import requests

from copilot_metrics.exceptions import MetricsApiError
from copilot_metrics.logging_config import get_logger

logger = get_logger('client')


class MetricsApiClient:
    """requests 기반 메트릭 API 클라이언트"""

    def __init__(self, base_url, timeout=30, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, action, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{action} 요청 실패: {e}")
            raise MetricsApiError(f"{action} failed: {e}") from e

        if not response.ok:
            raise MetricsApiError(self._error_message(action, response), response.status_code)
        return response

    @staticmethod
    def _error_message(action, response):
        """서버의 error 필드 우선, JSON이 아니면 상태 코드로 메시지 구성"""
        try:
            error = response.json().get('error')
        except ValueError:
            error = None
        return error or f"{action} failed: {response.status_code} {response.reason}"

    def fetch_latest_metrics_text(self) -> Optional[str]:
        """최신 NDJSON 원문 (업로드된 적 없으면 None)"""
        response = self._request('Fetch metrics', 'GET', '/metrics')
        return response.json().get('data')

    def upload_metrics_text(self, text: str):
        """원문을 metrics.ndjson 파일로 업로드"""
        files = {
            'file': ('metrics.ndjson', text.encode('utf-8'), 'application/x-ndjson'),
        }
        response = self._request('Upload', 'POST', '/upload', files=files)
        logger.info("메트릭 업로드 완료")
        return response.json()

    def clear_metrics(self):
        response = self._request('Clear metrics', 'DELETE', '/metrics')
        return response.json()
