"""
Copilot 메트릭 대시보드 백엔드 Flask 애플리케이션 팩토리
"""
from flask import Flask, jsonify
from flask_cors import CORS
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.exceptions import RequestEntityTooLarge

from copilot_metrics.config import get_config
from copilot_metrics.logging_config import get_logger, log_security_event
from copilot_metrics.services import DashboardService
from copilot_metrics.storage import MetricsCache, MetricsFileStore
from copilot_metrics.app.routes import metrics_bp

logger = get_logger('app')


def create_app(config_name=None, overrides=None):
    """
    애플리케이션 팩토리 함수

    Args:
        config_name: 'development' / 'production' / 'testing' (없으면 FLASK_ENV)
        overrides: 설정 클래스 위에 덮어쓸 값 (테스트용)
    """
    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    # Sentry 초기화 (DSN이 설정된 경우만)
    init_sentry(app)

    CORS(
        app,
        origins=app.config['CORS_ORIGINS'],
        methods=app.config['CORS_METHODS'],
        allow_headers=app.config['CORS_HEADERS']
    )

    init_storage(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_static_routes(app)

    return app


def init_sentry(app):
    dsn = app.config.get('SENTRY_DSN')
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration()],
        environment='production' if not app.config.get('DEBUG') else 'development',
        send_default_pii=False,
    )
    logger.info("Sentry 초기화 완료")


def init_storage(app):
    """메트릭 파일 저장소와 로컬 캐시 준비"""
    try:
        store = MetricsFileStore(app.config['STORAGE_PATH'], app.config['METRICS_FILENAME'])
        store.ensure_storage_dir()
        cache = MetricsCache(app.config['CACHE_DATABASE_URL'])
    except Exception as e:
        logger.error(f"저장소 초기화 실패: {e}")
        raise

    app.extensions['dashboard_service'] = DashboardService(store, cache)
    logger.info(f"저장소 초기화 완료: {store.metrics_file}")


def register_blueprints(app):
    """API 블루프린트 등록"""
    app.register_blueprint(metrics_bp)


def register_error_handlers(app):
    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        log_security_event('oversized_upload', {
            'max_content_length': app.config.get('MAX_CONTENT_LENGTH')
        })
        return jsonify({'error': 'File too large'}), 413


def register_static_routes(app):

    @app.route('/health')
    def health():
        """헬스체크 엔드포인트"""
        return {'status': 'healthy'}, 200
