"""
Flask 애플리케이션 설정 관리

개발, 테스트, 운영 환경별로 다른 설정을 관리합니다.
환경변수는 .env 파일에서 읽어옵니다.
"""
import os
from dotenv import load_dotenv  # .env 파일에서 환경변수를 읽어오는 라이브러리

load_dotenv()


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    """
    기본 설정 클래스

    모든 환경에서 공통으로 사용되는 설정을 정의합니다.
    """

    # Flask 설정
    SECRET_KEY = os.getenv('SECRET_KEY', 'your-secret-key-here')
    DEBUG = False
    TESTING = False

    # 업로드 크기 제한 (기본 50MB)
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 50 * 1024 * 1024))

    # CORS 설정 - 대시보드 프론트엔드에서 API 호출 허용
    CORS_ORIGINS = _split_origins(os.getenv('CORS_ORIGINS', '*'))
    CORS_METHODS = ['GET', 'POST', 'DELETE', 'OPTIONS']
    CORS_HEADERS = ['Content-Type', 'github-username']

    # 최신 메트릭 파일 저장 위치
    STORAGE_PATH = os.getenv('STORAGE_PATH', '/data')
    METRICS_FILENAME = os.getenv('METRICS_FILENAME', 'latest-metrics.ndjson')

    # 로컬 폴백 캐시 (SQLite 호환)
    CACHE_DATABASE_URL = os.getenv('CACHE_DATABASE_URL', 'sqlite:///metrics_cache.db')

    # 원격 대시보드 API (MetricsApiClient에서 사용)
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:8080/api')
    API_TIMEOUT = int(os.getenv('API_TIMEOUT', 30))

    # Sentry 에러 모니터링 (DSN이 없으면 비활성화)
    SENTRY_DSN = os.getenv('SENTRY_DSN')

    PORT = int(os.getenv('PORT', 8080))


class DevelopmentConfig(Config):
    """
    개발 환경 설정

    디버그 모드가 활성화되고, 메트릭 파일을 프로젝트 폴더에 저장합니다.
    """
    DEBUG = True
    STORAGE_PATH = os.getenv('STORAGE_PATH', 'data')


class ProductionConfig(Config):
    """운영 환경 설정"""
    DEBUG = False


class TestingConfig(Config):
    """
    테스트 환경 설정

    테스트에서는 STORAGE_PATH와 CACHE_DATABASE_URL을 임시 경로로 덮어씁니다.
    """
    TESTING = True
    CACHE_DATABASE_URL = 'sqlite:///:memory:'
    SENTRY_DSN = None


# FLASK_ENV 값에 따른 설정 클래스
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(name=None):
    """
    현재 환경에 맞는 설정 반환

    name이 없으면 FLASK_ENV 환경변수를 읽습니다 (기본값: development).

    Returns:
        Config: 현재 환경에 맞는 설정 클래스
    """
    env = name or os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
