"""
GitHub Copilot 사용량 메트릭 대시보드 백엔드
"""

__version__ = '0.1.0'
