"""
저장소 모듈
"""
from .file_store import MetricsFileStore, DEFAULT_METRICS_FILENAME
from .cache import MetricsCache

__all__ = ['MetricsFileStore', 'MetricsCache', 'DEFAULT_METRICS_FILENAME']
