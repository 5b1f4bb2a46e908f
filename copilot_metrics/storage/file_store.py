"""
최신 메트릭 파일 저장소

업로드된 NDJSON 원문 하나를 디스크에 보관합니다.
잠금이 없으므로 동시 업로드는 마지막 쓰기가 남습니다.
"""
import os
from typing import Optional

from copilot_metrics.logging_config import get_logger

logger = get_logger('storage.file_store')

DEFAULT_METRICS_FILENAME = 'latest-metrics.ndjson'


class MetricsFileStore:
    """단일 파일 덮어쓰기 방식의 원문 저장소"""

    def __init__(self, storage_path, filename=DEFAULT_METRICS_FILENAME):
        self.storage_path = storage_path
        self.metrics_file = os.path.join(storage_path, filename)

    def ensure_storage_dir(self):
        """저장 디렉터리 생성 (이미 있으면 무시)"""
        os.makedirs(self.storage_path, exist_ok=True)

    def fetch_latest_metrics_text(self) -> Optional[str]:
        """가장 최근 업로드 원문 반환 (없으면 None)"""
        if not os.path.exists(self.metrics_file):
            return None

        with open(self.metrics_file, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def upload_metrics_text(self, text: str):
        """원문을 최신 스냅샷으로 저장 (덮어쓰기)"""
        self.ensure_storage_dir()
        with open(self.metrics_file, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        logger.info(f"메트릭 파일 저장 완료: {self.metrics_file} ({len(text)} chars)")

    def clear_metrics(self):
        """저장된 스냅샷 삭제 (파일이 없어도 성공)"""
        try:
            os.remove(self.metrics_file)
            logger.info("메트릭 파일 삭제 완료")
        except FileNotFoundError:
            pass
