"""
API 라우트 모듈
"""
from .metrics import metrics_bp

__all__ = ['metrics_bp']
